"""
Extraction Pipeline - listing pages and tiered detail reads.

Each pass takes its own snapshot of the rendered document, so a lazily
loaded image missed by one pass can still be picked up by a later one.
"""

import asyncio
from typing import List, Optional

from .. import locators, scripts
from ..config import Config
from ..logger import get_logger
from ..models import DetailPass, DetailRecord, ListItem
from ..session.driver import SessionDriver, WaitPolicy
from .listing import parse_listing
from .passes import PrePass, MainPass, LastResortPass

log = get_logger('pipeline')


def needs_last_resort(pre_pass: DetailPass, main: DetailPass) -> bool:
    """True when the logo or any staff image is still missing after pre+main."""
    if not (main.thumbnail_logo_url or pre_pass.thumbnail_logo_url):
        return True

    pre_images = {m.name: m.image_url for m in pre_pass.staff if m.name and m.image_url}
    pre_by_position = {m.position: m.image_url for m in pre_pass.staff if m.image_url}
    for member in main.staff:
        if member.image_url:
            continue
        if pre_images.get(member.name) or pre_by_position.get(member.position):
            continue
        return True
    return False


class ExtractionPipeline:
    """
    Reads listing pages into stubs and detail documents into DetailRecords.

    Usage:
        pipeline = ExtractionPipeline(driver)
        items = await pipeline.list_page()
        for item in items:
            detail = await pipeline.extract_detail(item.url)
    """

    def __init__(
        self,
        driver: SessionDriver,
        listing_timeout_ms: int = Config.LISTING_TIMEOUT_MS,
        locator_timeout_ms: int = Config.LOCATOR_TIMEOUT_MS,
        settle_delay: float = Config.DETAIL_SETTLE_DELAY,
    ):
        self.driver = driver
        self.listing_timeout_ms = listing_timeout_ms
        self.locator_timeout_ms = locator_timeout_ms
        self.settle_delay = settle_delay

        self.pre_pass = PrePass()
        self.main_pass = MainPass()
        self.last_resort_pass = LastResortPass()

    async def _snapshot(self) -> str:
        html = await self.driver.query(scripts.DOCUMENT_HTML)
        return html or ''

    async def list_page(self) -> List[ListItem]:
        """Directory entries visible on the current listing page, in document order."""
        if not await self.driver.await_locator(locators.LISTING_ITEM_NAME, self.listing_timeout_ms):
            log.warning("Listing items did not appear, reading page anyway")

        base_url = await self.driver.current_address()
        items = parse_listing(await self._snapshot(), base_url)
        log.info(f"Found {len(items)} companies on listing page")
        return items

    async def extract_detail(self, url: str) -> DetailRecord:
        """
        Open a detail document and run the extraction passes over it.

        The last-resort pass only runs when images are still missing.
        Raises SessionError/SessionTimeout if the document cannot be loaded.
        """
        log.info(f"Opening company page: {url}")
        await self.driver.open(url, WaitPolicy.NETWORK_IDLE)

        if not await self.driver.await_locator(locators.COMPANY_NAME[0], self.locator_timeout_ms):
            log.debug("Company header not found, continuing without confirmation")
        if self.settle_delay > 0:
            await asyncio.sleep(self.settle_delay)

        base_url = await self.driver.current_address() or url

        pre_pass = self.pre_pass.read_html(await self._snapshot(), base_url)
        main = self.main_pass.read_html(await self._snapshot(), base_url)

        last_resort: Optional[DetailPass] = None
        if needs_last_resort(pre_pass, main):
            log.debug(f"Images still missing, running last-resort pass on {url}")
            last_resort = self.last_resort_pass.read_html(await self._snapshot(), base_url)

        return DetailRecord(url=url, pre_pass=pre_pass, main=main, last_resort=last_resort)
