"""
Shared fixtures: fake directory site, stores and a zero-delay crawler.
"""

import pytest

from directory_scraper.checkpoint import CheckpointStore
from directory_scraper.crawler import DirectoryCrawler
from directory_scraper.extraction.pipeline import ExtractionPipeline
from directory_scraper.models import ScrapeSession
from directory_scraper.pagination.controller import PaginationController

from fakesite import FakeSite, company_html, company_url


async def _no_overlays(driver):
    return 0


@pytest.fixture
def store(tmp_path):
    return CheckpointStore(tmp_path / "output")


@pytest.fixture
def make_site():
    """
    Site with `pages` listing pages of `per_page` production companies each.
    Company slugs are c<page>-<n>.
    """
    def _make(pages=2, per_page=5, **kwargs):
        listing = {}
        details = {}
        for page in range(1, pages + 1):
            listing[page] = []
            for n in range(1, per_page + 1):
                name = f"Company {page}-{n}"
                url = company_url(f"c{page}-{n}")
                listing[page].append((name, url))
                details[url] = company_html(
                    name,
                    staff=[{'name': f"Person {page}-{n}", 'role': 'Producer', 'image': '/img/p.jpg'}],
                )
        return FakeSite(listing, details, **kwargs)
    return _make


@pytest.fixture
def make_controller():
    def _make(site, **kwargs):
        kwargs.setdefault('settle_delay', 0)
        kwargs.setdefault('resettle', _no_overlays)
        return PaginationController(site, **kwargs)
    return _make


@pytest.fixture
def make_crawler(store, make_controller):
    def _make(site, session=None, crawl_store=None, **kwargs):
        return DirectoryCrawler(
            site,
            session if session is not None else ScrapeSession(),
            crawl_store or store,
            controller=make_controller(site),
            pipeline=ExtractionPipeline(site, settle_delay=0),
            record_delay=0,
            **kwargs,
        )
    return _make
