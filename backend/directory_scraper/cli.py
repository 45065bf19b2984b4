#!/usr/bin/env python3
"""
CLI for directory crawling.

Usage:
    # Crawl listing pages 1 to 10
    directory-scraper crawl --start 1 --end 10

    # Watch the browser while crawling
    directory-scraper crawl --start 3 --end 5 --no-headless

    # Show the current checkpoint
    directory-scraper status
"""

import argparse
import asyncio
import signal
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table

from .checkpoint import CheckpointStore
from .config import Config
from .crawler import DirectoryCrawler
from .errors import DirectoryScraperError, PersistenceError
from .logger import get_logger, set_level
from .models import RunSummary, ScrapeSession, format_duration

log = get_logger('cli')
console = Console()


def print_summary(summary: RunSummary):
    """Render a run summary as rich tables."""
    table = Table(title=f"Run: pages {summary.start_page}-{summary.end_page}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Pages completed", str(len(summary.pages_completed)))
    table.add_row("Pages skipped", ", ".join(map(str, summary.pages_skipped)) or "-")
    table.add_row("Companies admitted", str(summary.companies_admitted))
    table.add_row("Staff admitted", str(summary.staff_admitted))
    table.add_row("Duplicates skipped", str(summary.duplicates_skipped))
    table.add_row("Rejected (not target)", str(summary.rejected))
    table.add_row("Failed records", str(summary.failed_records))
    table.add_row("Total companies", str(summary.total_companies))
    table.add_row("Total staff", str(summary.total_staff))
    table.add_row("Elapsed", format_duration(summary.elapsed_ms))

    average = summary.average_page_ms()
    if average is not None:
        table.add_row("Average per page", format_duration(average))
        fastest, slowest = summary.fastest_page(), summary.slowest_page()
        table.add_row("Fastest page", f"{fastest.page} ({fastest.formatted_time})")
        table.add_row("Slowest page", f"{slowest.page} ({slowest.formatted_time})")

    if summary.cancelled:
        table.add_row("Status", "[yellow]cancelled[/yellow]")
    console.print(table)


def print_status(store: CheckpointStore):
    """Render checkpoint totals and per-page timing."""
    documents = store.load_documents()
    if documents is None:
        console.print(f"[yellow]No checkpoint in {store.output_dir}[/yellow]")
        return
    companies_doc, staff_doc = documents
    metadata = companies_doc.metadata

    table = Table(title=f"Checkpoint: {store.companies_path()}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Scraping date", metadata.scraping_date.isoformat())
    table.add_row("Pages", f"{metadata.pages_scraped.from_}-{metadata.pages_scraped.to}")
    table.add_row("Filter", metadata.filter or "-")
    table.add_row("Progress", metadata.current_progress or "-")
    table.add_row("Companies", str(len(companies_doc.companies)))
    table.add_row("Staff", str(len(staff_doc.staff)) if staff_doc else "-")
    if store.companies_path(partial=True).exists():
        table.add_row("Partial snapshot", str(store.companies_path(partial=True)))
    console.print(table)

    if metadata.timing:
        timing = Table(title="Page timing")
        timing.add_column("Page", justify="right")
        timing.add_column("Started")
        timing.add_column("Time")
        timing.add_column("Companies", justify="right")
        for entry in metadata.timing:
            timing.add_row(str(entry.page), entry.start_time.strftime('%Y-%m-%d %H:%M:%S'),
                           entry.formatted_time, str(entry.companies_scraped))
        console.print(timing)


async def crawl(start_page: int, end_page: int, headless: bool, output_dir: str) -> RunSummary:
    """Bring up the browser session and run the crawler."""
    # Playwright is only needed for live crawls
    from .session.browser import DirectoryBrowser
    from .session import login, open_listing

    log.debug(f"Config: {Config.to_dict()}")
    store = CheckpointStore(output_dir)
    session = store.load() or ScrapeSession()

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            log.debug(f"Signal handler for {sig.name} not supported here")

    async with DirectoryBrowser(headless=headless) as browser:
        driver = browser.driver
        await login(driver, Config.login_url(), Config.EMAIL, Config.PASSWORD)
        if not await open_listing(driver, Config.listing_url(), Config.TARGET_CATEGORY):
            log.warning("Category filter not confirmed, relying on classification")

        crawler = DirectoryCrawler(driver, session, store, category=Config.TARGET_CATEGORY)
        return await crawler.run(start_page, end_page, should_cancel=stop.is_set)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="directory-scraper",
                                     description="Crawl company records from the directory")
    subparsers = parser.add_subparsers(dest="command")

    crawl_parser = subparsers.add_parser("crawl", help="Crawl a range of listing pages")
    crawl_parser.add_argument("--start", type=int, required=True, help="First listing page")
    crawl_parser.add_argument("--end", type=int, required=True, help="Last listing page")
    crawl_parser.add_argument("--headless", action=argparse.BooleanOptionalAction,
                              default=Config.HEADLESS, help="Run the browser headless")
    crawl_parser.add_argument("-o", "--output", default=Config.OUTPUT_DIR, help="Output directory")

    status_parser = subparsers.add_parser("status", help="Show the current checkpoint")
    status_parser.add_argument("-o", "--output", default=Config.OUTPUT_DIR, help="Output directory")
    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_level(Config.LOG_LEVEL)

    if args.command == "crawl":
        if args.start < 1 or args.end < 1 or args.start > args.end:
            parser.error("--start and --end must be >= 1 with start <= end")
        try:
            summary = asyncio.run(crawl(args.start, args.end, args.headless, args.output))
        except DirectoryScraperError as e:
            console.print(f"[red]Crawl failed:[/red] {e}")
            return 1
        print_summary(summary)
        return 0

    if args.command == "status":
        try:
            print_status(CheckpointStore(args.output))
        except PersistenceError as e:
            console.print(f"[red]{e}[/red]")
            return 1
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
