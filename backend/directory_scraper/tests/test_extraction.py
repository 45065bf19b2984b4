"""
Tests for listing parsing, the extraction passes and the pipeline.
"""

import pytest

from directory_scraper.extraction import (
    parse_listing, PrePass, MainPass, LastResortPass, ExtractionPipeline, needs_last_resort,
)
from directory_scraper.models import DetailPass, ExtractionTier, StaffFields

from fakesite import FakeSite, BASE_URL, company_html, company_url, listing_html

DETAIL_URL = company_url("acme")


class TestListing:

    def test_items_in_document_order(self):
        html = listing_html([("Acme", company_url("acme")), ("Bolt", company_url("bolt"))], 1, True)
        items = parse_listing(html, BASE_URL)
        assert [i.name for i in items] == ["Acme", "Bolt"]
        assert items[0].url == company_url("acme")
        assert items[0].title == "Acme"
        assert items[0].logo_url == f"{BASE_URL}/logos/Acme.png"

    def test_item_without_logo_kept(self):
        html = listing_html([("Acme", company_url("acme"))], 1, False, with_logos=False)
        items = parse_listing(html, BASE_URL)
        assert len(items) == 1
        assert items[0].logo_url == ""

    def test_lazy_logo(self):
        html = ('<div class="item item-comp"><div class="item-thumb-wrapper"><img data-src="/lazy.png"></div>'
                '<div class="item--author--name"><a href="/en/Company/1">One</a></div></div>')
        assert parse_listing(html, BASE_URL)[0].logo_url == f"{BASE_URL}/lazy.png"


class TestMainPass:

    def test_reads_every_field(self):
        html = company_html(
            "Acme Films",
            activity="Production Company",
            phone="+33 1 42 00 00 00",
            staff=[{'name': "Jane Doe", 'role': "CEO", 'phone': "+33 6 00", 'email': "jane@acme.test",
                    'image': "/img/jane.jpg", 'slug': "jane"}],
            info={"Year Founded:": "1999"},
        )
        detail = MainPass().read_html(html, DETAIL_URL)

        assert detail.tier == ExtractionTier.MAIN
        assert detail.name == "Acme Films"
        assert detail.thumbnail_logo_url == f"{BASE_URL}/img/logo.png"
        assert detail.background_image_url == f"{BASE_URL}/img/cover.jpg"
        assert detail.activity == "Production Company"
        assert detail.address == "12 Rue de Paris 75001 Paris France"
        assert detail.contact_number == "+33 1 42 00 00 00"
        assert detail.description == "We make films."
        assert detail.objective == "Co-productions."
        assert detail.links == ["films.example.com", "https://films.example.com"]
        assert [(s.url, s.network_type) for s in detail.social_links] == [
            ("https://www.facebook.com/acme", "facebook"),
            ("https://x.com/acme", "twitter"),
        ]
        assert detail.extra == {"year founded": "1999"}

        member = detail.staff[0]
        assert member.name == "Jane Doe"
        assert member.profile_link == f"{BASE_URL}/en/People/jane"
        assert member.role == "CEO"
        assert member.email == "jane@acme.test"
        assert member.image_url == f"{BASE_URL}/img/jane.jpg"
        assert detail.failed_fields == []

    def test_phone_embedded_in_address(self):
        html = company_html("Acme", address="5 High Street London +44 20 7946 0000")
        detail = MainPass().read_html(html, DETAIL_URL)
        assert detail.address == "5 High Street London"
        assert detail.contact_number == "+44 20 7946 0000"

    def test_alternative_logo_locator(self):
        html = company_html("Acme", logo=None, alt_logo="/img/alt-logo.png")
        detail = MainPass().read_html(html, DETAIL_URL)
        assert detail.thumbnail_logo_url == f"{BASE_URL}/img/alt-logo.png"

    def test_missing_fields_default_empty(self):
        detail = MainPass().read_html("<html><body><p>nothing</p></body></html>", DETAIL_URL)
        assert detail.name == ""
        assert detail.activity == ""
        assert detail.links == []
        assert detail.staff == []

    def test_nameless_staff_kept_with_position(self):
        html = company_html("Acme", staff=[{'name': "", 'role': "Assistant"}, {'name': "Bob", 'role': "CFO"}])
        detail = MainPass().read_html(html, DETAIL_URL)
        assert [(m.position, m.name, m.role) for m in detail.staff] == [(0, "", "Assistant"), (1, "Bob", "CFO")]

    def test_field_failure_isolated(self, monkeypatch):
        def broken(self, soup):
            raise ValueError("markup changed")

        monkeypatch.setattr(MainPass, "_activity", broken)
        detail = MainPass().read_html(company_html("Acme"), DETAIL_URL)
        assert detail.activity == ""
        assert detail.name == "Acme"
        assert detail.description == "We make films."
        assert "activity" in detail.failed_fields


class TestOtherPasses:

    def test_pre_pass_reads_images_only(self):
        html = company_html("Acme", staff=[{'name': "Jane", 'image': "/img/jane.jpg", 'role': "CEO"}])
        detail = PrePass().read_html(html, DETAIL_URL)
        assert detail.tier == ExtractionTier.PRE_PASS
        assert detail.thumbnail_logo_url == f"{BASE_URL}/img/logo.png"
        assert detail.staff[0].image_url == f"{BASE_URL}/img/jane.jpg"
        assert detail.staff[0].role == ""
        assert detail.name == ""

    def test_last_resort_takes_any_header_image(self):
        html = company_html("Acme", logo=None)
        detail = LastResortPass().read_html(html, DETAIL_URL)
        assert detail.thumbnail_logo_url == f"{BASE_URL}/img/cover.jpg"

    def test_needs_last_resort(self):
        main = DetailPass(tier=ExtractionTier.MAIN, thumbnail_logo_url="logo",
                          staff=[StaffFields(position=0, name="Jane")])
        pre = DetailPass(tier=ExtractionTier.PRE_PASS)
        assert needs_last_resort(pre, main)

        pre.staff = [StaffFields(position=0, name="Jane", image_url="jane.jpg")]
        assert not needs_last_resort(pre, main)

        main.thumbnail_logo_url = ""
        assert needs_last_resort(pre, main)


class TestPipeline:

    @pytest.mark.asyncio
    async def test_list_page(self):
        site = FakeSite({1: [("Acme", company_url("acme"))]})
        items = await ExtractionPipeline(site, settle_delay=0).list_page()
        assert [i.url for i in items] == [company_url("acme")]

    @pytest.mark.asyncio
    async def test_extract_detail_uses_alternative_logo(self):
        site = FakeSite({1: []}, {DETAIL_URL: company_html("Acme", logo=None, alt_logo="/img/alt.png")})
        record = await ExtractionPipeline(site, settle_delay=0).extract_detail(DETAIL_URL)
        assert record.url == DETAIL_URL
        assert record.main.thumbnail_logo_url == f"{BASE_URL}/img/alt.png"
        assert record.last_resort is None

    @pytest.mark.asyncio
    async def test_last_resort_runs_when_images_missing(self):
        html = company_html("Acme", staff=[{'name': "Jane", 'role': "CEO"}])
        site = FakeSite({1: []}, {DETAIL_URL: html})
        record = await ExtractionPipeline(site, settle_delay=0).extract_detail(DETAIL_URL)
        assert record.last_resort is not None
        assert record.last_resort.tier == ExtractionTier.LAST_RESORT
