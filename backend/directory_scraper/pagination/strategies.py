"""
Navigation strategies for reaching the next listing page.

Each strategy performs one technique and then re-probes the page. Progress
means the detected page number is strictly greater than before.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse

from .. import locators, scripts
from ..errors import SessionError
from ..logger import get_logger
from ..models import StrategyOutcome
from ..session.driver import SessionDriver, Interaction, WaitPolicy
from .probes import detect_page

log = get_logger('strategies')


def page_address(address: str, page_param: str, page: int) -> str:
    """Address with the page parameter set (added when missing)."""
    parts = urlparse(address)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != page_param]
    query.append((page_param, str(page)))
    return urlunparse(parts._replace(query=urlencode(query)))


@dataclass
class NavigationContext:
    """What a strategy needs for one attempt."""
    driver: SessionDriver
    before_page: int
    target_page: int
    page_param: str = 'page'
    locator_timeout_ms: int = 10000
    navigation_signal_timeout_ms: int = 15000
    settle_delay: float = 0.0

    async def settle(self):
        if self.settle_delay > 0:
            await asyncio.sleep(self.settle_delay)


class NavigationStrategy(ABC):
    """Base class for navigation strategies."""

    name: str

    @abstractmethod
    async def perform(self, context: NavigationContext) -> Optional[str]:
        """
        Run the technique.

        Returns:
            Reason the technique could not be applied, or None if it ran
        """

    async def attempt(self, context: NavigationContext) -> StrategyOutcome:
        try:
            skipped = await self.perform(context)
        except SessionError as e:
            skipped = f"{type(e).__name__}: {e}"

        page = (await detect_page(context.driver, context.page_param)).page_number
        if page > context.before_page:
            return StrategyOutcome(True, f"{self.name} moved {context.before_page} -> {page}", page)
        reason = skipped or f"{self.name} left page at {page}"
        return StrategyOutcome(False, reason, page)


class NextControlClick(NavigationStrategy):
    """Structured click on the next control, then wait for navigation."""

    name = 'click'

    async def perform(self, context: NavigationContext) -> Optional[str]:
        driver = context.driver
        if not await driver.await_locator(locators.NEXT_CONTROL, context.locator_timeout_ms):
            return "next control not found"

        await driver.interact(locators.NEXT_CONTROL, Interaction.CLICK)
        if not await driver.await_navigation_signal(context.navigation_signal_timeout_ms):
            log.debug("No navigation signal after click")
        await context.settle()
        return None


class SyntheticEvents(NavigationStrategy):
    """Low-level events on the next control, then a jump to its target if it has one."""

    name = 'events'

    async def perform(self, context: NavigationContext) -> Optional[str]:
        driver = context.driver

        control = None
        for sel in locators.NEXT_CONTROL_LADDER:
            if await driver.query(scripts.ELEMENT_EXISTS, sel):
                control = sel
                break
        if control is None:
            return "no next control in ladder"

        for action in (Interaction.FOCUS, Interaction.PRESS, Interaction.RELEASE, Interaction.ACTIVATE):
            await driver.interact(control, action)

        href = await driver.query(scripts.NEXT_HREF, locators.NEXT_CONTROL_LADDER)
        if href and str(href).startswith(('http://', 'https://')):
            log.debug(f"Following next control target: {href}")
            await driver.open(href, WaitPolicy.NETWORK_IDLE)
        elif not await driver.await_navigation_signal(context.navigation_signal_timeout_ms):
            log.debug("No navigation signal after synthetic events")

        await context.settle()
        return None


class DirectAddress(NavigationStrategy):
    """
    Load the listing address with the page parameter replaced.

    Steps one page past the current one, or straight to the target page
    when jump_to_target is set (used as the final fallback).
    """

    def __init__(self, jump_to_target: bool = False):
        self.jump_to_target = jump_to_target
        self.name = 'direct-target' if jump_to_target else 'direct'

    async def perform(self, context: NavigationContext) -> Optional[str]:
        page = context.target_page if self.jump_to_target else context.before_page + 1
        address = page_address(await context.driver.current_address(), context.page_param, page)
        log.debug(f"Loading page {page} directly: {address}")
        await context.driver.open(address, WaitPolicy.NETWORK_IDLE)
        await context.settle()
        return None


def default_strategies():
    """The ladder, in the order it is tried."""
    return [NextControlClick(), SyntheticEvents(), DirectAddress()]
