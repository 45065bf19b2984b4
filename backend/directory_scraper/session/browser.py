"""
Browser bring-up for directory crawling.

Usage:
    async with DirectoryBrowser(headless=True) as browser:
        driver = browser.driver
        await driver.open('https://example.com')
"""

from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from ..config import Config
from ..logger import get_logger
from .playwright_driver import PlaywrightSessionDriver

log = get_logger('browser')


def get_launch_args():
    """Chrome launch arguments that keep automation traces out of the session."""
    return [
        '--disable-blink-features=AutomationControlled',  # Key: removes webdriver traces
        '--no-sandbox',
        '--disable-dev-shm-usage',
        '--disable-infobars',
        '--no-first-run',
    ]


class DirectoryBrowser:
    """
    Context manager owning one Chromium instance, context and page.

    A directory session is a single shared resource: one page, used
    sequentially by pagination and extraction.
    """

    def __init__(
        self,
        headless: bool = Config.HEADLESS,
        executable_path: Optional[str] = Config.BROWSER_EXECUTABLE,
        navigation_timeout_ms: int = Config.NAVIGATION_TIMEOUT_MS,
        interaction_timeout_ms: int = Config.LOCATOR_TIMEOUT_MS,
    ):
        self.headless = headless
        self.executable_path = executable_path
        self.navigation_timeout_ms = navigation_timeout_ms
        self.interaction_timeout_ms = interaction_timeout_ms
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._driver: Optional[PlaywrightSessionDriver] = None

    async def __aenter__(self):
        self._playwright = await async_playwright().start()
        launch_kwargs = {
            'headless': self.headless,
            'args': get_launch_args(),
            'ignore_default_args': ['--enable-automation'],
        }
        if self.executable_path:
            launch_kwargs['executable_path'] = self.executable_path

        log.info(f"Launching Chromium (headless={self.headless})")
        self._browser = await self._playwright.chromium.launch(**launch_kwargs)
        self._context = await self._browser.new_context(
            viewport={'width': 1920, 'height': 1080},
            locale='en-US',
        )
        self._page = await self._context.new_page()
        self._driver = PlaywrightSessionDriver(
            self._page,
            navigation_timeout_ms=self.navigation_timeout_ms,
            interaction_timeout_ms=self.interaction_timeout_ms,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        log.info("Closing browser...")
        if self._context:
            await self._context.close()
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()

    @property
    def driver(self) -> PlaywrightSessionDriver:
        return self._driver

    @property
    def page(self) -> Page:
        return self._page
