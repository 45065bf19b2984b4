"""
Tests for page detection and the pagination controller.
"""

import pytest

from directory_scraper.errors import NavigationError, NavigationFailure, SessionError
from directory_scraper.pagination import (
    PaginationController, NavigationState, NextControlClick, DirectAddress, detect_page, page_address, page_from_address,
)
from directory_scraper.pagination.strategies import NavigationContext
from directory_scraper.session import dismiss_overlays

from fakesite import LISTING_URL


class TestDetectPage:

    @pytest.mark.asyncio
    async def test_indicator_wins(self, make_site):
        site = make_site(pages=3, start_page=2)
        assert (await detect_page(site)).page_number == 2

    @pytest.mark.asyncio
    async def test_url_parameter_when_no_indicator(self, make_site):
        site = make_site(pages=3, start_page=3, show_indicator=False)
        assert (await detect_page(site)).page_number == 3

    @pytest.mark.asyncio
    async def test_default_first_page(self, make_site):
        site = make_site(pages=3, show_indicator=False)
        assert (await detect_page(site)).page_number == 1

    @pytest.mark.asyncio
    async def test_input_value_used_after_indicator(self, make_site, monkeypatch):
        site = make_site(pages=3)

        async def state(script, arg=None):
            return {'indicator': '', 'input': 'Page 7'}

        monkeypatch.setattr(site, "query", state)
        assert (await detect_page(site)).page_number == 7

    @pytest.mark.asyncio
    async def test_failed_probe_falls_through(self, make_site, monkeypatch):
        site = make_site(pages=3, start_page=2)

        async def broken(script, arg=None):
            raise SessionError("detached")

        monkeypatch.setattr(site, "query", broken)
        assert (await detect_page(site)).page_number == 2

    def test_page_address(self):
        assert page_address(f"{LISTING_URL}?q=film&page=2", "page", 5) == f"{LISTING_URL}?q=film&page=5"
        assert page_from_address(page_address(LISTING_URL, "page", 4)) == 4


class TestAdvance:

    @pytest.mark.asyncio
    async def test_already_on_target_is_noop(self, make_site, make_controller):
        site = make_site(pages=3, start_page=2)
        controller = make_controller(site)

        result = await controller.advance_to(2)

        assert result.cursor.page_number == 2
        assert not result.navigated
        assert site.navigation_actions() == []
        assert controller.state == NavigationState.SETTLED

    @pytest.mark.asyncio
    async def test_click_advances_and_returns_previous_ids(self, make_site, make_controller):
        site = make_site(pages=3)
        controller = make_controller(site)

        result = await controller.advance_to(2)

        assert result.cursor.page_number == 2
        assert result.strategy == "click"
        assert result.attempts == 1
        assert len(result.item_ids) == 5
        assert result.previous_item_ids[0].endswith("/c1-1")
        assert result.item_ids[0].endswith("/c2-1")
        assert result.overlap() == set()

    @pytest.mark.asyncio
    async def test_falls_through_to_synthetic_events(self, make_site, make_controller):
        site = make_site(pages=3, click_failures=1)
        result = await make_controller(site).advance_to(2)
        assert result.strategy == "events"
        assert site.reloads() == 0

    @pytest.mark.asyncio
    async def test_falls_through_to_direct_address(self, make_site, make_controller):
        site = make_site(pages=3, click_failures=10, events_work=False)
        result = await make_controller(site).advance_to(2)
        assert result.strategy == "direct"
        assert site.opened[-1] == page_address(LISTING_URL, "page", 2)

    @pytest.mark.asyncio
    async def test_multi_page_advance(self, make_site, make_controller):
        site = make_site(pages=4)
        result = await make_controller(site).advance_to(4)
        assert result.cursor.page_number == 4
        assert result.attempts == 3

    @pytest.mark.asyncio
    async def test_reload_after_attempt_without_progress(self, make_site, make_controller):
        site = make_site(pages=3, click_failures=1)
        controller = make_controller(site, strategies=[NextControlClick()])

        result = await controller.advance_to(2)

        assert result.cursor.page_number == 2
        assert result.attempts == 2
        assert site.reloads() == 1

    @pytest.mark.asyncio
    async def test_overlays_resettled_after_reload(self, make_site):
        site = make_site(pages=3, click_failures=1)
        site.overlays = ['#onetrust-accept-btn-handler']

        async def dismiss(driver):
            return await dismiss_overlays(driver, pause=0)

        controller = PaginationController(site, strategies=[NextControlClick()], settle_delay=0, resettle=dismiss)
        await controller.advance_to(2)
        assert site.overlays == []

    @pytest.mark.asyncio
    async def test_direct_jump_to_target_after_exhaustion(self, make_site, make_controller):
        site = make_site(pages=6, click_failures=100)
        controller = make_controller(site, strategies=[NextControlClick()], max_attempts=2)

        result = await controller.advance_to(5)

        assert result.cursor.page_number == 5
        assert result.strategy == "direct-target"
        assert site.reloads() == 2
        assert site.opened == [page_address(LISTING_URL, "page", 5)]

    @pytest.mark.asyncio
    async def test_empty_page(self, make_site, make_controller):
        site = make_site(pages=2)
        site.pages[2] = []
        controller = make_controller(site)

        with pytest.raises(NavigationError) as exc:
            await controller.advance_to(2)

        assert exc.value.kind == NavigationFailure.EMPTY_PAGE
        assert controller.state == NavigationState.FAILED

    @pytest.mark.asyncio
    async def test_stuck_cursor(self, make_site, make_controller):
        site = make_site(pages=3, click_failures=100, events_work=False, direct_works=False)
        controller = make_controller(site, max_attempts=3)

        with pytest.raises(NavigationError) as exc:
            await controller.advance_to(3)

        assert exc.value.kind == NavigationFailure.STUCK_CURSOR
        assert exc.value.reached_page == 1
        assert site.reloads() == 3

    @pytest.mark.asyncio
    async def test_timeout_on_final_direct_load(self, make_site, make_controller):
        site = make_site(pages=4, click_failures=100)
        site.timeouts.add(page_address(LISTING_URL, "page", 3))
        controller = make_controller(site, strategies=[NextControlClick()], max_attempts=1)

        with pytest.raises(NavigationError) as exc:
            await controller.advance_to(3)

        assert exc.value.kind == NavigationFailure.TIMEOUT


class TestStrategies:

    @pytest.mark.asyncio
    async def test_progress_requires_higher_page(self, make_site):
        site = make_site(pages=3, start_page=2)
        # Loading page 1 is a change, not progress
        context = NavigationContext(driver=site, before_page=2, target_page=1)
        outcome = await DirectAddress(jump_to_target=True).attempt(context)
        assert not outcome.progressed
        assert outcome.page == 1

    @pytest.mark.asyncio
    async def test_missing_control_reported(self, make_site):
        site = make_site(pages=1)
        outcome = await NextControlClick().attempt(NavigationContext(driver=site, before_page=1, target_page=2))
        assert not outcome.progressed
        assert outcome.reason == "next control not found"
