"""
Directory Crawler - the run loop.

One page at a time, one item at a time, over a single shared session:

    advance_to(page) -> list_page() -> extract_detail(url) -> merge -> admit -> flush
"""

import asyncio
from typing import Awaitable, Callable, Optional, Set

from .checkpoint import CheckpointStore
from .classifier import CategoryClassifier
from .config import Config
from .dedup import DedupFilter, Verdict
from .errors import NavigationError, PersistenceError
from .extraction.pipeline import ExtractionPipeline
from .logger import get_logger
from .models import ListItem, PageTiming, Progress, RunSummary, ScrapeSession, utc_now
from .normalizer import RecordNormalizer
from .pagination.controller import PaginationController
from .session.driver import SessionDriver, WaitPolicy
from .session.listing import ensure_listing

log = get_logger('crawler')


def _never() -> bool:
    return False


class DirectoryCrawler:
    """
    Runs a page range against an already signed-in session on the listing.

    Usage:
        crawler = DirectoryCrawler(driver, session, store)
        summary = await crawler.run(1, 10, should_cancel=lambda: stop.is_set())
    """

    def __init__(
        self,
        driver: SessionDriver,
        session: ScrapeSession,
        store: CheckpointStore,
        controller: Optional[PaginationController] = None,
        pipeline: Optional[ExtractionPipeline] = None,
        normalizer: Optional[RecordNormalizer] = None,
        dedup: Optional[DedupFilter] = None,
        category: str = Config.TARGET_CATEGORY,
        record_delay: float = Config.RECORD_DELAY,
        return_to_listing: Optional[Callable[[SessionDriver, str, str], Awaitable]] = None,
    ):
        self.driver = driver
        self.session = session
        self.store = store
        self.controller = controller or PaginationController(driver)
        self.pipeline = pipeline or ExtractionPipeline(driver)
        self.normalizer = normalizer or RecordNormalizer()
        self.dedup = dedup or DedupFilter(CategoryClassifier.for_category(category))
        self.category = category
        self.record_delay = record_delay
        self.return_to_listing = return_to_listing or ensure_listing

        self.listing_address: Optional[str] = None
        # Non-target URLs seen this run; not persisted
        self.rejected_urls: Set[str] = set()

    async def run(
        self,
        start_page: int,
        end_page: int,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> RunSummary:
        """
        Crawl pages start_page..end_page inclusive.

        Navigation failures skip the page; record failures skip the record.
        Anything else aborts the run after one partial snapshot attempt.
        """
        should_cancel = should_cancel or _never
        summary = RunSummary(start_page=start_page, end_page=end_page)

        self.session.page_from = start_page
        self.session.page_to = end_page
        self.session.filter = self.category
        progress = Progress(start_page, end_page)

        if self.listing_address is None:
            self.listing_address = await self.driver.current_address()

        log.info(f"Crawling pages {start_page}-{end_page} "
                 f"({len(self.session.processed_urls)} companies already known)")

        try:
            for page in range(start_page, end_page + 1):
                if should_cancel():
                    log.info(f"Cancellation requested, stopping before page {page}")
                    summary.cancelled = True
                    break

                progress = Progress(page, end_page)
                await self._crawl_page(page, progress, summary, should_cancel)
                if summary.cancelled:
                    break

            if summary.cancelled:
                self.store.flush(self.session, progress)

        except Exception as e:
            log.error(f"Run aborted on {progress}: {type(e).__name__}: {e}")
            self._save_partial(progress)
            raise

        summary.finished_at = utc_now()
        summary.total_companies = len(self.session.companies)
        summary.total_staff = len(self.session.staff)
        log.info(f"Run finished: {summary.companies_admitted} companies admitted, "
                 f"{len(summary.pages_skipped)} page(s) skipped, "
                 f"{summary.total_companies} companies total")
        return summary

    def _save_partial(self, progress: Progress):
        try:
            self.store.flush_partial(self.session, progress)
        except PersistenceError as e:
            log.error(f"Partial snapshot failed: {e}")

    async def _crawl_page(self, page: int, progress: Progress, summary: RunSummary,
                          should_cancel: Callable[[], bool]):
        log.info(f"{'='*20} Page {page} of {summary.end_page} {'='*20}")
        page_start = utc_now()

        try:
            await self.return_to_listing(self.driver, self.listing_address, self.category)
            result = await self.controller.advance_to(page)
        except NavigationError as e:
            log.error(f"Skipping page {page}: {e}")
            summary.pages_skipped.append(page)
            return

        self.listing_address = await self.driver.current_address()
        overlap = result.overlap()
        if overlap:
            log.warning(f"Page {page} repeats {len(overlap)} item(s) from the previous page")

        items = await self.pipeline.list_page()
        if not items:
            log.warning(f"No companies on page {page}, reloading once...")
            await self.driver.reload(WaitPolicy.NETWORK_IDLE)
            items = await self.pipeline.list_page()
        if not items:
            log.error(f"Skipping page {page}: listing still empty after reload")
            summary.pages_skipped.append(page)
            return

        processed = 0
        for index, item in enumerate(items, 1):
            if should_cancel():
                log.info(f"Cancellation requested, stopping on page {page}")
                summary.cancelled = True
                break
            log.info(f"[{index}/{len(items)}] {item.name}")
            await self._crawl_item(item, page, progress, summary)
            processed += 1

        timing = PageTiming(page=page, start_time=page_start, end_time=utc_now(),
                            companies_scraped=processed)
        self.session.page_timing.append(timing)
        summary.page_timing.append(timing)
        if not summary.cancelled:
            summary.pages_completed.append(page)
        log.info(f"Page {page} took {timing.formatted_time}")

        self.store.flush(self.session, progress)

    async def _crawl_item(self, item: ListItem, page: int, progress: Progress, summary: RunSummary):
        if self.dedup.is_known(self.session, item.url):
            log.info(f"Skipping already scraped company: {item.url}")
            summary.duplicates_skipped += 1
            return
        if item.url in self.rejected_urls:
            log.debug(f"Skipping company rejected earlier this run: {item.url}")
            summary.rejected += 1
            return

        try:
            detail = await self.pipeline.extract_detail(item.url)
            company = self.normalizer.merge(detail, item)
            admission = self.dedup.admit(self.session, company, page)
        except Exception as e:
            log.error(f"Failed to scrape {item.url}: {type(e).__name__}: {e}")
            summary.failed_records += 1
            return

        if admission.admitted:
            try:
                self.store.flush(self.session, progress)
            except PersistenceError:
                self.dedup.revoke(self.session, admission)
                raise
            summary.companies_admitted += 1
            summary.staff_admitted += len(admission.staff)
        elif admission.verdict == Verdict.DUPLICATE:
            summary.duplicates_skipped += 1
        else:
            self.rejected_urls.add(item.url)
            summary.rejected += 1

        if self.record_delay > 0:
            await asyncio.sleep(self.record_delay)
