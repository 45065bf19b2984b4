"""
Sign-in to the directory.
"""

from .. import locators, scripts
from ..errors import AuthenticationError, SessionError
from ..logger import get_logger
from .driver import SessionDriver, Interaction
from .overlays import dismiss_overlays

log = get_logger('auth')


async def login(
    driver: SessionDriver,
    login_url: str,
    email: str,
    password: str,
    navigation_timeout_ms: int = 30000,
) -> None:
    """
    Fill and submit the sign-in form.

    Raises:
        AuthenticationError: missing credentials or no sign-in form on the page
    """
    if not email or not password:
        raise AuthenticationError("DIRECTORY_EMAIL and DIRECTORY_PASSWORD must be set")

    log.info("Opening website...")
    await driver.open(login_url)
    await dismiss_overlays(driver)

    log.info("Entering login credentials...")
    filled = await driver.query(scripts.FILL_LOGIN, {
        'emailSelector': locators.LOGIN_EMAIL,
        'passwordSelector': locators.LOGIN_PASSWORD,
        'email': email,
        'password': password,
    })
    if not filled:
        raise AuthenticationError(f"No sign-in form found at {login_url}")

    submitted = False
    for sel in locators.LOGIN_SUBMIT:
        if not await driver.query(scripts.ELEMENT_EXISTS, sel):
            continue
        try:
            await driver.interact(sel, Interaction.CLICK)
            submitted = True
            break
        except SessionError as e:
            log.debug(f"Submit via {sel} failed: {e}")
    if not submitted:
        raise AuthenticationError("Could not submit the sign-in form")

    if not await driver.await_navigation_signal(navigation_timeout_ms):
        log.warning("Navigation timeout after login, continuing...")

    await dismiss_overlays(driver)
    log.info("Signed in")
