"""
End-to-end run loop tests against the fake directory site.
"""

import json
import os

import pytest

from directory_scraper.checkpoint import CheckpointStore
from directory_scraper.errors import PersistenceError, SessionError
from directory_scraper.models import CompanyRecord, Progress, ScrapeSession

from fakesite import LISTING_URL, company_html, company_url


def known_session(*urls):
    session = ScrapeSession()
    for n, url in enumerate(urls):
        session.companies.append(CompanyRecord(id=f"prior-{n}", name=f"Prior {n}", url=url))
        session.processed_urls.add(url)
    return session


class FailingStore(CheckpointStore):
    """Store whose n-th flush fails."""

    def __init__(self, output_dir, fail_on):
        super().__init__(output_dir)
        self.fail_on = fail_on
        self.flushes = 0

    def flush(self, session, progress):
        self.flushes += 1
        if self.flushes == self.fail_on:
            raise PersistenceError("disk full")
        super().flush(session, progress)


class TestRun:

    @pytest.mark.asyncio
    async def test_two_page_run_with_prior_checkpoint(self, store, make_site, make_crawler):
        # Prior checkpoint knows one company listed on page 1, plus one elsewhere
        store.flush(known_session(company_url("c1-3"), company_url("elsewhere")), Progress(1, 1))
        session = store.load()
        prior = len(session.companies)

        site = make_site(pages=2)
        site.pages[2] = list(site.pages[1])
        summary = await make_crawler(site, session).run(1, 2)

        assert len(session.companies) == prior + 4
        assert summary.companies_admitted == 4
        assert summary.pages_completed == [1, 2]
        assert company_url("c1-3") not in site.opened

        urls = [c.url for c in session.companies]
        assert len(urls) == len(set(urls))

        snapshot = json.loads(store.companies_path().read_text())
        assert len(snapshot["companies"]) == prior + 4
        assert snapshot["metadata"]["currentProgress"] == "2/2"
        assert [t["page"] for t in snapshot["metadata"]["timing"]] == [1, 2]

    @pytest.mark.asyncio
    async def test_staff_reference_their_company(self, make_site, make_crawler):
        site = make_site(pages=1, per_page=3)
        session = ScrapeSession()
        await make_crawler(site, session).run(1, 1)

        ids = session.company_ids()
        assert len(session.staff) == 3
        assert all(member.company_id in ids for member in session.staff)

    @pytest.mark.asyncio
    async def test_resume_never_readmits(self, store, make_site, make_crawler):
        await make_crawler(make_site(pages=1)).run(1, 1)

        site = make_site(pages=1)
        session = store.load()
        summary = await make_crawler(site, session).run(1, 1)

        assert summary.companies_admitted == 0
        assert summary.duplicates_skipped == 5
        assert len(session.companies) == 5
        assert not [url for url in site.opened if "/Company/" in url]

    @pytest.mark.asyncio
    async def test_navigation_failure_skips_page(self, make_site, make_crawler):
        site = make_site(pages=3)
        site.pages[2] = []
        session = ScrapeSession()

        summary = await make_crawler(site, session).run(1, 3)

        assert summary.pages_skipped == [2]
        assert summary.pages_completed == [1, 3]
        assert len(session.companies) == 10

    @pytest.mark.asyncio
    async def test_record_failure_skips_record(self, make_site, make_crawler):
        site = make_site(pages=1)
        site.broken.add(company_url("c1-2"))
        session = ScrapeSession()

        summary = await make_crawler(site, session).run(1, 1)

        assert summary.failed_records == 1
        assert len(session.companies) == 4
        assert company_url("c1-2") not in session.processed_urls

    @pytest.mark.asyncio
    async def test_rejected_company_not_fetched_twice(self, make_site, make_crawler):
        site = make_site(pages=2)
        site.details[company_url("c1-1")] = company_html("Cutting Room", activity="Post-production")
        site.pages[2] = list(site.pages[1])
        session = ScrapeSession()

        summary = await make_crawler(site, session).run(1, 2)

        assert site.opened.count(company_url("c1-1")) == 1
        assert summary.rejected == 2
        assert company_url("c1-1") not in session.processed_urls

    @pytest.mark.asyncio
    async def test_configured_category_drives_classification(self, make_site, make_crawler):
        site = make_site(pages=1, per_page=3)
        for slug in ("c1-1", "c1-2"):
            site.details[company_url(slug)] = company_html(
                f"Agency {slug}", activity="International Sales Agent")
        session = ScrapeSession()

        summary = await make_crawler(site, session, category="Sales Agent").run(1, 1)

        assert summary.companies_admitted == 2
        assert summary.rejected == 1
        assert company_url("c1-3") not in session.processed_urls


class TestStopping:

    @pytest.mark.asyncio
    async def test_cancellation_between_items(self, store, make_site, make_crawler):
        site = make_site(pages=2)
        session = ScrapeSession()

        summary = await make_crawler(site, session).run(
            1, 2, should_cancel=lambda: len(session.companies) >= 2)

        assert summary.cancelled
        assert len(session.companies) == 2
        assert not any("page=2" in url for url in site.opened)
        snapshot = json.loads(store.companies_path().read_text())
        assert len(snapshot["companies"]) == 2

    @pytest.mark.asyncio
    async def test_cancellation_before_first_page(self, store, make_site, make_crawler):
        site = make_site(pages=1)
        summary = await make_crawler(site).run(1, 1, should_cancel=lambda: True)
        assert summary.cancelled
        assert site.navigation_actions() == []
        assert store.companies_path().exists()

    @pytest.mark.asyncio
    async def test_persistence_failure_writes_partial(self, tmp_path, make_site, make_crawler):
        failing = FailingStore(tmp_path / "output", fail_on=3)
        site = make_site(pages=1)
        session = ScrapeSession()

        with pytest.raises(PersistenceError):
            await make_crawler(site, session, crawl_store=failing).run(1, 1)

        partial = json.loads(failing.companies_path(partial=True).read_text())
        assert partial["metadata"]["status"] == "partial"
        assert [c["url"] for c in partial["companies"]] == [company_url("c1-1"), company_url("c1-2")]
        staff = json.loads(failing.staff_path(partial=True).read_text())
        assert len(staff["staff"]) == 2

    @pytest.mark.asyncio
    async def test_session_failure_writes_partial(self, store, make_site, make_crawler):
        site = make_site(pages=2)
        site.broken.add(LISTING_URL)
        session = ScrapeSession()

        with pytest.raises(SessionError):
            await make_crawler(site, session).run(1, 2)

        documents = store.load_documents(partial=True)
        assert documents is not None
        assert len(documents[0].companies) == 5
        assert len(store.load().companies) == 5

    @pytest.mark.asyncio
    async def test_cancelled_page_times_processed_items_only(self, store, make_site, make_crawler):
        site = make_site(pages=1)
        session = ScrapeSession()

        await make_crawler(site, session).run(
            1, 1, should_cancel=lambda: len(session.companies) >= 2)

        assert session.page_timing[0].companies_scraped == 2
        snapshot = json.loads(store.companies_path().read_text())
        assert snapshot["metadata"]["timing"][0]["companiesScraped"] == 2

    @pytest.mark.asyncio
    async def test_failed_staff_write_keeps_main_snapshot_confirmed(self, store, make_site, make_crawler,
                                                                    monkeypatch):
        site = make_site(pages=1)
        session = ScrapeSession()
        real_replace = os.replace
        staff_writes = []

        def failing_replace(src, dst):
            if os.fspath(dst) == os.fspath(store.staff_path()):
                staff_writes.append(dst)
                if len(staff_writes) == 2:
                    raise OSError("disk full")
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(PersistenceError):
            await make_crawler(site, session).run(1, 1)
        monkeypatch.undo()

        main = json.loads(store.companies_path().read_text())
        partial = json.loads(store.companies_path(partial=True).read_text())
        assert [c["url"] for c in main["companies"]] == [company_url("c1-1")]
        assert [c["url"] for c in partial["companies"]] == [company_url("c1-1")]

        resumed = store.load()
        assert company_url("c1-2") not in resumed.processed_urls
        assert len(resumed.staff) == 1
