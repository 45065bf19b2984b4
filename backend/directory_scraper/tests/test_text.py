"""
Tests for text cleanup: address/phone split, activity labels, social networks.
"""

from directory_scraper.extraction.text import (
    clean_text, absolute_url, split_address_phone, split_activity,
    normalize_activity, network_type, normalize_label,
)


class TestCleanText:

    def test_collapses_whitespace(self):
        assert clean_text("  Acme \n\t Films  ") == "Acme Films"

    def test_none_is_empty(self):
        assert clean_text(None) == ""


class TestAbsoluteUrl:

    def test_relative_resolved(self):
        assert absolute_url("/img/a.png", "https://d.test/en/Company/1") == "https://d.test/img/a.png"

    def test_script_and_fragment_links_dropped(self):
        assert absolute_url("javascript:void(0)", "https://d.test/") == ""
        assert absolute_url("#top", "https://d.test/") == ""


class TestAddressPhone:

    def test_trailing_phone_moves_to_empty_contact(self):
        address, contact = split_address_phone("12 Rue de Paris 75001 Paris +33 1 42 00 00 00")
        assert address == "12 Rue de Paris 75001 Paris"
        assert contact == "+33 1 42 00 00 00"

    def test_existing_contact_kept_but_phone_stripped(self):
        address, contact = split_address_phone("1 Main St Springfield 555 123 4567", "+1 999 999 9999")
        assert address == "1 Main St Springfield"
        assert contact == "+1 999 999 9999"

    def test_postcode_is_not_a_phone(self):
        address, contact = split_address_phone("Via Roma 1 00100")
        assert address == "Via Roma 1 00100"
        assert contact == ""


class TestActivity:

    def test_explicit_labels_win(self):
        labels = split_activity(["Production Company", "Distributor", "Production Company"], "ignored, text")
        assert labels == ["Production Company", "Distributor"]

    def test_comma_split(self):
        assert normalize_activity([], "Activity: Production Company, Sales Agent ,") == \
            "Production Company, Sales Agent"

    def test_whitespace_runs_as_last_resort(self):
        assert normalize_activity([], "Production Company   Distributor\nTV Broadcaster") == \
            "Production Company, Distributor, TV Broadcaster"

    def test_empty_block(self):
        assert normalize_activity([], "") == ""


class TestNetworks:

    def test_known_networks(self):
        assert network_type("https://www.facebook.com/acme") == "facebook"
        assert network_type("https://x.com/acme") == "twitter"
        assert network_type("https://vimeo.com/acme") == "vimeo"

    def test_unknown_is_other(self):
        assert network_type("https://acme.example.com") == "other"

    def test_matches_host_not_substring(self):
        assert network_type("https://www.netflix.com/title/1") == "other"
        assert network_type("https://dropbox.com/s/reel") == "other"
        assert network_type("https://acme.example.com/facebook") == "other"
        assert network_type("https://mobile.twitter.com/acme") == "twitter"

    def test_label_normalized(self):
        assert normalize_label(" Year  Founded: ") == "year founded"
