"""
Data models for directory crawling.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Set, Tuple


# Scalar company fields reconciled by the normalizer, in schema order
SCALAR_FIELDS = [
    'name', 'thumbnail_logo_url', 'background_image_url', 'activity',
    'address', 'contact_number', 'description', 'objective',
]

# Staff attributes filled from later passes (name is the identity)
STAFF_ATTRIBUTES = ['profile_link', 'image_url', 'role', 'phone', 'mobile', 'email']


def format_duration(milliseconds: float) -> str:
    """Format a duration as '1h 2m 3s'."""
    seconds = int(milliseconds // 1000)
    minutes = seconds // 60
    hours = minutes // 60
    return f"{hours}h {minutes % 60}m {seconds % 60}s"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PageCursor:
    """Listing page number detected from the live session."""
    page_number: int


@dataclass
class ListItem:
    """A directory entry as it appears on a listing page."""
    name: str
    url: str
    title: str = ""
    logo_url: str = ""


@dataclass
class SocialLink:
    url: str
    network_type: str = "other"


class ExtractionTier(Enum):
    """The independent read passes over a detail document."""
    PRE_PASS = "pre_pass"
    MAIN = "main"
    LAST_RESORT = "last_resort"


@dataclass
class StaffFields:
    """One staff member as read by a single pass."""
    position: int = -1  # index among the staff items of the document
    name: str = ""
    profile_link: str = ""
    image_url: str = ""
    role: str = ""
    phone: str = ""
    mobile: str = ""
    email: str = ""


@dataclass
class DetailPass:
    """Fields recovered by one extraction tier. Empty string / empty list = not found."""
    tier: ExtractionTier
    name: str = ""
    thumbnail_logo_url: str = ""
    background_image_url: str = ""
    activity: str = ""
    address: str = ""
    contact_number: str = ""
    description: str = ""
    objective: str = ""
    links: List[str] = field(default_factory=list)
    social_links: List[SocialLink] = field(default_factory=list)
    staff: List[StaffFields] = field(default_factory=list)
    extra: Dict[str, str] = field(default_factory=dict)
    failed_fields: List[str] = field(default_factory=list)


@dataclass
class DetailRecord:
    """All passes read from one detail document."""
    url: str
    pre_pass: DetailPass
    main: DetailPass
    last_resort: Optional[DetailPass] = None

    def passes(self) -> List[DetailPass]:
        """Passes in reconciliation order: main, pre-pass, last-resort."""
        ordered = [self.main, self.pre_pass]
        if self.last_resort is not None:
            ordered.append(self.last_resort)
        return ordered


@dataclass
class NormalizedCompany:
    """Canonical record produced by reconciling the passes, before admission."""
    url: str
    name: str = ""
    thumbnail_logo_url: str = ""
    background_image_url: str = ""
    activity: str = ""
    address: str = ""
    contact_number: str = ""
    description: str = ""
    objective: str = ""
    links: List[str] = field(default_factory=list)
    social_links: List[SocialLink] = field(default_factory=list)
    staff: List[StaffFields] = field(default_factory=list)
    extra: Dict[str, str] = field(default_factory=dict)


@dataclass
class CompanyRecord:
    id: str
    name: str
    url: str
    thumbnail_logo_url: str = ""
    background_image_url: str = ""
    activity: str = ""
    address: str = ""
    contact_number: str = ""
    description: str = ""
    objective: str = ""
    links: List[str] = field(default_factory=list)
    social_links: List[SocialLink] = field(default_factory=list)
    page_scraped: int = 0
    extra: Dict[str, str] = field(default_factory=dict)


@dataclass
class StaffRecord:
    id: str
    company_id: str
    name: str
    company_name: str = ""
    profile_link: str = ""
    image_url: str = ""
    role: str = ""
    phone: str = ""
    mobile: str = ""
    email: str = ""
    page_scraped: int = 0


@dataclass
class PageTiming:
    """Timing entry for one processed listing page."""
    page: int
    start_time: datetime
    end_time: datetime
    companies_scraped: int = 0

    @property
    def time_taken_ms(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() * 1000)

    @property
    def formatted_time(self) -> str:
        return format_duration(self.time_taken_ms)


@dataclass
class ScrapeSession:
    """
    Process-wide accumulator.

    Mutated only by admission (DedupFilter.admit); read by the checkpoint store.
    """
    companies: List[CompanyRecord] = field(default_factory=list)
    staff: List[StaffRecord] = field(default_factory=list)
    processed_urls: Set[str] = field(default_factory=set)
    page_timing: List[PageTiming] = field(default_factory=list)
    scraping_date: datetime = field(default_factory=utc_now)
    page_from: int = 1
    page_to: int = 1
    filter: str = ""

    def company_ids(self) -> Set[str]:
        return {company.id for company in self.companies}


@dataclass(frozen=True)
class Progress:
    """Position of the run, persisted as '<page>/<endPage>'."""
    page: int
    end_page: int

    def __str__(self) -> str:
        return f"{self.page}/{self.end_page}"


@dataclass(frozen=True)
class StrategyOutcome:
    """Result of one navigation strategy attempt."""
    progressed: bool
    reason: str
    page: Optional[int] = None


@dataclass(frozen=True)
class AdvanceResult:
    """A settled listing page plus the identifiers needed to detect overlap."""
    cursor: PageCursor
    item_ids: Tuple[str, ...]
    previous_item_ids: Tuple[str, ...] = ()
    navigated: bool = False
    attempts: int = 0
    strategy: Optional[str] = None

    def overlap(self) -> Set[str]:
        """Identifiers listed on both sides of the page boundary."""
        return set(self.item_ids) & set(self.previous_item_ids)


@dataclass
class RunSummary:
    """Outcome of one crawl run."""
    start_page: int
    end_page: int
    pages_completed: List[int] = field(default_factory=list)
    pages_skipped: List[int] = field(default_factory=list)
    companies_admitted: int = 0
    staff_admitted: int = 0
    duplicates_skipped: int = 0
    rejected: int = 0
    failed_records: int = 0
    total_companies: int = 0
    total_staff: int = 0
    cancelled: bool = False
    started_at: datetime = field(default_factory=utc_now)
    finished_at: Optional[datetime] = None
    page_timing: List[PageTiming] = field(default_factory=list)

    @property
    def elapsed_ms(self) -> int:
        end = self.finished_at or utc_now()
        return int((end - self.started_at).total_seconds() * 1000)

    def average_page_ms(self) -> Optional[float]:
        if not self.page_timing:
            return None
        return sum(t.time_taken_ms for t in self.page_timing) / len(self.page_timing)

    def fastest_page(self) -> Optional[PageTiming]:
        if not self.page_timing:
            return None
        return min(self.page_timing, key=lambda t: t.time_taken_ms)

    def slowest_page(self) -> Optional[PageTiming]:
        if not self.page_timing:
            return None
        return max(self.page_timing, key=lambda t: t.time_taken_ms)
