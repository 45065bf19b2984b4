"""
Pagination Controller - reaches a target listing page with verified progress.

State per advance_to() call:

    Idle -> Navigating -> Verifying -> Settled
                 ^            |
                 |            v
              Retrying     Failed
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Tuple

from ..config import Config
from ..errors import NavigationError, NavigationFailure, SessionTimeout
from ..logger import get_logger
from ..models import AdvanceResult, PageCursor
from ..session.driver import SessionDriver, WaitPolicy
from ..session.overlays import dismiss_overlays
from .probes import detect_page, visible_item_ids
from .strategies import NavigationContext, NavigationStrategy, DirectAddress, default_strategies

log = get_logger('pagination')


class NavigationState(Enum):
    IDLE = "idle"
    NAVIGATING = "navigating"
    VERIFYING = "verifying"
    SETTLED = "settled"
    RETRYING = "retrying"
    FAILED = "failed"


class PaginationController:
    """
    Drives the session to a listing page through an ordered strategy ladder.

    Args:
        driver: Session driver (shared, used sequentially)
        strategies: Ladder tried in order on every attempt
        max_attempts: Ladder runs before falling back to a direct jump
        page_param: Query parameter carrying the page number
        settle_delay: Pause after each navigation (seconds)
        resettle: Coroutine run after a forced reload (overlay dismissal)
    """

    def __init__(
        self,
        driver: SessionDriver,
        strategies: Optional[List[NavigationStrategy]] = None,
        max_attempts: int = Config.MAX_NAVIGATION_ATTEMPTS,
        page_param: str = Config.PAGE_PARAM,
        locator_timeout_ms: int = Config.LOCATOR_TIMEOUT_MS,
        navigation_signal_timeout_ms: int = Config.NAVIGATION_SIGNAL_TIMEOUT_MS,
        settle_delay: float = Config.SETTLE_DELAY,
        resettle: Optional[Callable[[SessionDriver], Awaitable]] = None,
    ):
        self.driver = driver
        self.strategies = strategies if strategies is not None else default_strategies()
        self.max_attempts = max_attempts
        self.page_param = page_param
        self.locator_timeout_ms = locator_timeout_ms
        self.navigation_signal_timeout_ms = navigation_signal_timeout_ms
        self.settle_delay = settle_delay
        self.resettle = resettle or dismiss_overlays
        self.state = NavigationState.IDLE

    def _transition(self, state: NavigationState, detail: str = ""):
        log.debug(f"{self.state.value} -> {state.value}" + (f" ({detail})" if detail else ""))
        self.state = state

    def _context(self, before_page: int, target_page: int) -> NavigationContext:
        return NavigationContext(
            driver=self.driver,
            before_page=before_page,
            target_page=target_page,
            page_param=self.page_param,
            locator_timeout_ms=self.locator_timeout_ms,
            navigation_signal_timeout_ms=self.navigation_signal_timeout_ms,
            settle_delay=self.settle_delay,
        )

    async def current_page(self) -> PageCursor:
        return await detect_page(self.driver, self.page_param)

    async def _run_ladder(self, current: int, target_page: int) -> Tuple[int, Optional[str]]:
        """One attempt: strategies in order until one reports progress."""
        for strategy in self.strategies:
            outcome = await strategy.attempt(self._context(current, target_page))
            if outcome.progressed:
                log.info(f"Strategy '{strategy.name}' succeeded: {outcome.reason}")
                return outcome.page, strategy.name
            log.info(f"Strategy '{strategy.name}' made no progress: {outcome.reason}")
        return current, None

    async def _reload(self):
        """Full reload plus overlay re-settle after an attempt without progress."""
        try:
            await self.driver.reload(WaitPolicy.NETWORK_IDLE)
        except SessionTimeout as e:
            log.warning(f"Reload timed out, continuing: {e}")
        if self.settle_delay > 0:
            await asyncio.sleep(self.settle_delay)
        await self.resettle(self.driver)

    async def advance_to(self, target_page: int) -> AdvanceResult:
        """
        Position the session on target_page.

        Returns:
            AdvanceResult with the settled cursor, the identifiers now visible
            and those visible before navigating

        Raises:
            NavigationError: TIMEOUT, EMPTY_PAGE or STUCK_CURSOR
        """
        self.state = NavigationState.IDLE
        previous_ids = await visible_item_ids(self.driver)
        cursor = await self.current_page()

        if cursor.page_number == target_page:
            self._transition(NavigationState.SETTLED, f"already on page {target_page}")
            return AdvanceResult(cursor=cursor, item_ids=previous_ids)

        log.info(f"Navigating from page {cursor.page_number} to page {target_page}...")
        current = cursor.page_number
        attempts = 0
        used: Optional[str] = None

        self._transition(NavigationState.NAVIGATING)
        while current < target_page and attempts < self.max_attempts:
            attempts += 1
            reached, strategy = await self._run_ladder(current, target_page)
            if strategy is not None:
                current, used = reached, strategy
                continue

            self._transition(NavigationState.RETRYING, f"attempt {attempts}/{self.max_attempts}")
            log.warning(f"No progress on attempt {attempts}, reloading...")
            await self._reload()
            current = (await self.current_page()).page_number
            self._transition(NavigationState.NAVIGATING)

        if current != target_page:
            log.warning(f"Ladder exhausted on page {current}, loading page {target_page} directly")
            fallback = DirectAddress(jump_to_target=True)
            try:
                await fallback.perform(self._context(current, target_page))
            except SessionTimeout as e:
                self._transition(NavigationState.FAILED, "timeout")
                raise NavigationError(NavigationFailure.TIMEOUT, target_page, current, str(e)) from e
            used = fallback.name

        self._transition(NavigationState.VERIFYING)
        cursor = await self.current_page()
        item_ids = await visible_item_ids(self.driver)

        if not item_ids:
            self._transition(NavigationState.FAILED, "empty page")
            raise NavigationError(NavigationFailure.EMPTY_PAGE, target_page, cursor.page_number,
                                  "no items visible")
        if cursor.page_number != target_page:
            self._transition(NavigationState.FAILED, "stuck cursor")
            raise NavigationError(NavigationFailure.STUCK_CURSOR, target_page, cursor.page_number,
                                  f"stuck on page {cursor.page_number}")

        self._transition(NavigationState.SETTLED)
        log.info(f"Reached page {target_page} after {attempts} attempt(s) via {used}")
        return AdvanceResult(
            cursor=cursor,
            item_ids=item_ids,
            previous_item_ids=previous_ids,
            navigated=True,
            attempts=attempts,
            strategy=used,
        )
