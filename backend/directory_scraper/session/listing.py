"""
Listing page bring-up: open the directory search, apply the category
filter, and return to the listing after visiting detail pages.
"""

import asyncio

from .. import locators, scripts
from ..errors import SessionError
from ..logger import get_logger
from .driver import SessionDriver, Interaction
from .overlays import dismiss_overlays

log = get_logger('session')


async def _click_first_present(driver: SessionDriver, selectors) -> bool:
    for sel in selectors:
        if not await driver.query(scripts.ELEMENT_EXISTS, sel):
            continue
        try:
            await driver.interact(sel, Interaction.CLICK)
            return True
        except SessionError as e:
            log.debug(f"Click on {sel} failed: {e}")
    return False


async def apply_category_filter(
    driver: SessionDriver,
    category: str,
    navigation_timeout_ms: int = 30000,
    pause: float = 2.0,
) -> bool:
    """
    Select the category in the listing filter and submit the search.

    Returns True if the selection was confirmed afterwards. A False return is
    not fatal: admitted records are classified again anyway.
    """
    log.info(f"Applying '{category}' filter...")

    # Reset the filter form first - clear any existing filters
    if await _click_first_present(driver, [locators.FILTER_RESET]) and pause > 0:
        await asyncio.sleep(pause)

    selected = await driver.query(scripts.SELECT_CATEGORY, {
        'selector': locators.CATEGORY_SELECT,
        'category': category,
    })
    if not selected:
        log.warning(f"Category option '{category}' not found in filter")
        return False
    log.info(f"Selected option: {selected}")

    if not await _click_first_present(driver, locators.FILTER_SUBMIT):
        log.warning("No search button found")
        return False

    if not await driver.await_navigation_signal(navigation_timeout_ms):
        log.info("Navigation timeout, continuing anyway")

    confirmed = await driver.query(scripts.SELECTED_CATEGORY, locators.CATEGORY_SELECT)
    if confirmed and category in confirmed:
        return True
    return bool(await driver.query(scripts.ELEMENT_EXISTS, locators.LISTING_FILTER_MARKER))


async def open_listing(driver: SessionDriver, listing_url: str, category: str = "") -> bool:
    """Open the listing page, settle overlays, and apply the category filter."""
    log.info("Navigating to listing page...")
    await driver.open(listing_url)
    await dismiss_overlays(driver)
    if not category:
        return True
    return await apply_category_filter(driver, category)


async def ensure_listing(driver: SessionDriver, listing_address: str, category: str = "") -> None:
    """
    Bring the session back onto the listing after detail pages were visited.

    Re-applies the category filter when its label is no longer on the page.
    """
    current = await driver.current_address()
    if current == listing_address:
        return

    log.info(f"Returning to listing: {listing_address}")
    await driver.open(listing_address)
    await dismiss_overlays(driver)

    if category and not await driver.query(scripts.BODY_CONTAINS, category):
        log.info("Re-applying category filter after returning to listing...")
        await apply_category_filter(driver, category)
