"""
Tests for the command-line surface (no browser involved).
"""

import pytest

from directory_scraper import cli
from directory_scraper.checkpoint import CheckpointStore
from directory_scraper.models import CompanyRecord, Progress, ScrapeSession


class TestArguments:

    def test_start_after_end_rejected(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["crawl", "--start", "3", "--end", "1"])
        assert exc.value.code == 2

    def test_zero_page_rejected(self):
        with pytest.raises(SystemExit):
            cli.main(["crawl", "--start", "0", "--end", "1"])

    def test_headless_flag(self):
        args = cli.build_parser().parse_args(["crawl", "--start", "1", "--end", "2", "--no-headless"])
        assert args.headless is False


class TestStatus:

    def test_no_checkpoint(self, tmp_path):
        assert cli.main(["status", "--output", str(tmp_path)]) == 0

    def test_existing_checkpoint(self, tmp_path, capsys):
        session = ScrapeSession(page_from=1, page_to=3)
        session.companies.append(CompanyRecord(id="1", name="Acme", url="https://directory.test/en/Company/1"))
        CheckpointStore(tmp_path).flush(session, Progress(2, 3))

        assert cli.main(["status", "--output", str(tmp_path)]) == 0
        assert "2/3" in capsys.readouterr().out

    def test_corrupt_checkpoint(self, tmp_path):
        (tmp_path / "directory_companies.json").write_text("{")
        assert cli.main(["status", "--output", str(tmp_path)]) == 1
