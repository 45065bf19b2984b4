"""
SessionDriver implementation over a Playwright async page.
"""

from typing import Any, Optional

from playwright.async_api import Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from ..errors import SessionError, SessionTimeout
from ..logger import get_logger
from .driver import SessionDriver, WaitPolicy, Interaction

log = get_logger('driver')

# Synthetic DOM events dispatched for the low-level interactions
_DISPATCHED_EVENTS = {
    Interaction.PRESS: 'mousedown',
    Interaction.RELEASE: 'mouseup',
    Interaction.ACTIVATE: 'click',
}


class PlaywrightSessionDriver(SessionDriver):
    """
    Adapts a Playwright Page to the SessionDriver capability.

    Args:
        page: Playwright page (already created on a browser context)
        navigation_timeout_ms: Max time for open()/reload()
        interaction_timeout_ms: Max time for a single interaction
    """

    def __init__(self, page: Page, navigation_timeout_ms: int = 120000,
                 interaction_timeout_ms: int = 10000):
        self.page = page
        self.navigation_timeout_ms = navigation_timeout_ms
        self.interaction_timeout_ms = interaction_timeout_ms
        self.page.set_default_timeout(navigation_timeout_ms)

    async def open(self, address: str, wait_policy: WaitPolicy = WaitPolicy.NETWORK_IDLE) -> None:
        try:
            await self.page.goto(address, wait_until=wait_policy.value,
                                 timeout=self.navigation_timeout_ms)
        except PlaywrightTimeout as e:
            raise SessionTimeout(f"Timed out loading {address}") from e
        except PlaywrightError as e:
            raise SessionError(f"Failed to load {address}: {e}") from e

    async def current_address(self) -> str:
        return self.page.url

    async def query(self, script: str, arg: Optional[Any] = None) -> Any:
        try:
            if arg is None:
                return await self.page.evaluate(script)
            return await self.page.evaluate(script, arg)
        except PlaywrightError as e:
            raise SessionError(f"Document query failed: {e}") from e

    async def interact(self, locator: str, action: Interaction) -> None:
        timeout = self.interaction_timeout_ms
        try:
            if action == Interaction.CLICK:
                await self.page.click(locator, timeout=timeout)
            elif action == Interaction.FOCUS:
                await self.page.focus(locator, timeout=timeout)
            else:
                await self.page.dispatch_event(locator, _DISPATCHED_EVENTS[action],
                                               {'bubbles': True}, timeout=timeout)
        except PlaywrightTimeout as e:
            raise SessionTimeout(f"{action.value} on {locator} timed out") from e
        except PlaywrightError as e:
            raise SessionError(f"{action.value} on {locator} failed: {e}") from e

    async def await_locator(self, locator: str, timeout_ms: int) -> bool:
        try:
            await self.page.wait_for_selector(locator, state='attached', timeout=timeout_ms)
            return True
        except PlaywrightTimeout:
            return False
        except PlaywrightError as e:
            # e.g. the execution context was destroyed by a navigation mid-wait
            log.debug(f"Wait for {locator} interrupted: {e}")
            return False

    async def await_navigation_signal(self, timeout_ms: int) -> bool:
        try:
            await self.page.wait_for_event('framenavigated', timeout=timeout_ms)
        except PlaywrightTimeout:
            log.debug(f"No navigation within {timeout_ms}ms")
            return False
        except PlaywrightError as e:
            log.debug(f"Navigation wait failed: {e}")
            return False

        # Timeout is ok - site might have constant polling
        try:
            await self.page.wait_for_load_state('networkidle', timeout=timeout_ms)
        except PlaywrightError:
            pass
        return True

    async def reload(self, wait_policy: WaitPolicy = WaitPolicy.NETWORK_IDLE) -> None:
        try:
            await self.page.reload(wait_until=wait_policy.value,
                                   timeout=self.navigation_timeout_ms)
        except PlaywrightTimeout as e:
            raise SessionTimeout("Timed out reloading") from e
        except PlaywrightError as e:
            raise SessionError(f"Reload failed: {e}") from e
