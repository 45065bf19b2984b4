"""
Checkpoint Store
================

Publishes the whole accumulated result set as two JSON snapshots
(companies, staff) after every admission, and reloads them to resume.
Every publish is an atomic replace: temp file in the same directory,
then os.replace().
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from .config import Config
from .errors import PersistenceError
from .extraction.text import network_type
from .logger import get_logger
from .checkpoint_schema import (
    CompaniesDocument, CompanyEntry, PagesScraped, SnapshotMetadata,
    StaffDocument, StaffEntry, TimingEntry,
)
from .models import (
    CompanyRecord, PageTiming, Progress, ScrapeSession, SocialLink, StaffRecord,
)

log = get_logger('checkpoint')

PARTIAL_STATUS = 'partial'


class CheckpointStore:
    """
    Durable snapshots of a ScrapeSession.

    Args:
        output_dir: Directory holding the snapshot files
        companies_name: Base name of the companies document
        staff_name: Base name of the staff document
        partial_suffix: Suffix for the fatal-abort variant
    """

    def __init__(
        self,
        output_dir=Config.OUTPUT_DIR,
        companies_name: str = Config.COMPANIES_SNAPSHOT,
        staff_name: str = Config.STAFF_SNAPSHOT,
        partial_suffix: str = Config.PARTIAL_SUFFIX,
    ):
        self.output_dir = Path(output_dir)
        self.companies_name = companies_name
        self.staff_name = staff_name
        self.partial_suffix = partial_suffix

    # ============================================================
    # Paths
    # ============================================================

    def companies_path(self, partial: bool = False) -> Path:
        suffix = self.partial_suffix if partial else ''
        return self.output_dir / f"{self.companies_name}{suffix}.json"

    def staff_path(self, partial: bool = False) -> Path:
        suffix = self.partial_suffix if partial else ''
        return self.output_dir / f"{self.staff_name}{suffix}.json"

    # ============================================================
    # Load
    # ============================================================

    def _read_json(self, file_path: Path) -> Any:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read snapshot {file_path}: {e}") from e

    def load_documents(self, partial: bool = False) -> Optional[Tuple[CompaniesDocument, Optional[StaffDocument]]]:
        """
        Parse the snapshot documents. None if no companies snapshot exists.

        Raises:
            PersistenceError: a snapshot exists but is unreadable or invalid
        """
        companies_path = self.companies_path(partial)
        if not companies_path.exists():
            return None

        try:
            companies = CompaniesDocument.model_validate(self._read_json(companies_path))
        except ValidationError as e:
            raise PersistenceError(f"Invalid companies snapshot {companies_path}: {e}") from e

        staff = None
        staff_path = self.staff_path(partial)
        if staff_path.exists():
            try:
                staff = StaffDocument.model_validate(self._read_json(staff_path))
            except ValidationError as e:
                raise PersistenceError(f"Invalid staff snapshot {staff_path}: {e}") from e

        return companies, staff

    def load(self) -> Optional[ScrapeSession]:
        """
        Rebuild a session from the main snapshot, or None for a fresh start.

        processed_urls is repopulated from every stored company URL.
        Per-page timing is not carried over into the resumed run.
        """
        documents = self.load_documents()
        if documents is None:
            log.info("No previous checkpoint found, starting fresh")
            return None
        companies_doc, staff_doc = documents

        companies = [self._company_from_entry(entry) for entry in companies_doc.companies]
        known_ids = {company.id for company in companies}

        staff: List[StaffRecord] = []
        if staff_doc is not None:
            for entry in staff_doc.staff:
                if entry.company_id not in known_ids:
                    log.warning(f"Dropping staff {entry.name}: company {entry.company_id} not in snapshot")
                    continue
                staff.append(self._staff_from_entry(entry))

        metadata = companies_doc.metadata
        session = ScrapeSession(
            companies=companies,
            staff=staff,
            processed_urls={company.url for company in companies},
            scraping_date=metadata.scraping_date,
            page_from=metadata.pages_scraped.from_,
            page_to=metadata.pages_scraped.to,
            filter=metadata.filter,
        )
        log.info(f"Loaded checkpoint: {len(companies)} companies, {len(staff)} staff "
                 f"(progress {metadata.current_progress or 'unknown'})")
        return session

    @staticmethod
    def _company_from_entry(entry: CompanyEntry) -> CompanyRecord:
        return CompanyRecord(
            id=entry.id,
            name=entry.name,
            url=entry.url,
            thumbnail_logo_url=entry.thumbnail_logo_url,
            background_image_url=entry.background_image_url,
            activity=entry.activity,
            address=entry.address,
            contact_number=entry.contact_number,
            description=entry.description,
            objective=entry.objective,
            links=list(entry.links),
            social_links=[SocialLink(url=url, network_type=network_type(url)) for url in entry.social_links],
            page_scraped=entry.page_scraped,
            extra=dict(entry.extra),
        )

    @staticmethod
    def _staff_from_entry(entry: StaffEntry) -> StaffRecord:
        return StaffRecord(**entry.model_dump())

    # ============================================================
    # Publish
    # ============================================================

    def _metadata(self, session: ScrapeSession, progress: Progress,
                  partial: bool, staff_totals: bool) -> SnapshotMetadata:
        return SnapshotMetadata(
            scraping_date=session.scraping_date,
            pages_scraped=PagesScraped(**{'from': session.page_from, 'to': session.page_to}),
            filter=session.filter,
            total_companies=len(session.companies),
            total_staff=len(session.staff) if staff_totals else None,
            current_progress=str(progress),
            status=PARTIAL_STATUS if partial else None,
            timing=[self._timing_entry(t) for t in session.page_timing],
        )

    @staticmethod
    def _timing_entry(timing: PageTiming) -> TimingEntry:
        return TimingEntry(
            page=timing.page,
            start_time=timing.start_time,
            end_time=timing.end_time,
            time_taken_ms=timing.time_taken_ms,
            formatted_time=timing.formatted_time,
            companies_scraped=timing.companies_scraped,
        )

    def _documents(self, session: ScrapeSession, progress: Progress,
                   partial: bool) -> Tuple[dict, dict]:
        companies = CompaniesDocument(
            metadata=self._metadata(session, progress, partial, staff_totals=False),
            companies=[
                CompanyEntry(
                    id=c.id, name=c.name, url=c.url,
                    thumbnail_logo_url=c.thumbnail_logo_url,
                    background_image_url=c.background_image_url,
                    activity=c.activity, address=c.address,
                    contact_number=c.contact_number,
                    description=c.description, objective=c.objective,
                    links=list(c.links),
                    social_links=[link.url for link in c.social_links],
                    page_scraped=c.page_scraped,
                    extra=dict(c.extra),
                )
                for c in session.companies
            ],
        )
        staff = StaffDocument(
            metadata=self._metadata(session, progress, partial, staff_totals=True),
            staff=[StaffEntry(**vars(s)) for s in session.staff],
        )
        return (
            companies.model_dump(mode='json', by_alias=True, exclude_none=True),
            staff.model_dump(mode='json', by_alias=True, exclude_none=True),
        )

    def _stage(self, file_path: Path, data: Any) -> str:
        """Write JSON data to a temp file beside file_path and return its path."""
        file_path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(
            dir=file_path.parent,
            prefix='.tmp_',
            suffix='.json'
        )
        try:
            with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except BaseException:
            _discard(temp_path)
            raise
        return temp_path

    def _publish(self, session: ScrapeSession, progress: Progress, partial: bool):
        """
        Stage both documents, then replace staff before companies.

        A company is only ever visible once its staff document is in place;
        load() drops staff whose company is missing.
        """
        companies, staff = self._documents(session, progress, partial)
        targets = [(self.staff_path(partial), staff), (self.companies_path(partial), companies)]
        staged = []
        try:
            for file_path, data in targets:
                staged.append((self._stage(file_path, data), file_path))
            for temp_path, file_path in staged:
                os.replace(temp_path, file_path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Could not publish snapshot to {self.output_dir}: {e}") from e
        finally:
            for temp_path, _ in staged:
                if os.path.exists(temp_path):
                    _discard(temp_path)

    def flush(self, session: ScrapeSession, progress: Progress):
        """Publish the whole session over the main snapshot."""
        self._publish(session, progress, partial=False)
        log.info(f"Saved {len(session.companies)} companies and {len(session.staff)} staff "
                 f"(progress {progress})")

    def flush_partial(self, session: ScrapeSession, progress: Progress):
        """Publish the fatal-abort snapshot; the main snapshot is left untouched."""
        self._publish(session, progress, partial=True)
        log.warning(f"Saved partial snapshot: {len(session.companies)} companies "
                    f"to {self.companies_path(partial=True)}")


def _discard(temp_path: str):
    try:
        os.unlink(temp_path)
    except OSError:
        pass
