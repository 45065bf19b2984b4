"""
Snapshot document schema.

Two independent JSON documents (companies, staff) share one metadata shape.
Keys are camelCase on disk; older snapshots spread uncategorized labels onto
the company object itself, and those are folded into `extra` on load.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')


class TimingEntry(SnapshotModel):
    page: int
    start_time: datetime
    end_time: datetime
    time_taken_ms: int
    formatted_time: str
    companies_scraped: int = 0


class PagesScraped(SnapshotModel):
    from_: int = Field(alias='from')
    to: int


class SnapshotMetadata(SnapshotModel):
    scraping_date: datetime
    pages_scraped: PagesScraped
    filter: str = ''
    total_companies: int = 0
    total_staff: Optional[int] = None
    current_progress: str = ''
    status: Optional[str] = None
    timing: List[TimingEntry] = Field(default_factory=list)


def _drop_nulls(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: v for k, v in data.items() if v is not None}
    return data


class CompanyEntry(SnapshotModel):
    id: str
    name: str = ''
    url: str
    thumbnail_logo_url: str = ''
    background_image_url: str = ''
    activity: str = ''
    address: str = ''
    contact_number: str = ''
    description: str = ''
    objective: str = ''
    links: List[str] = Field(default_factory=list)
    social_links: List[str] = Field(default_factory=list)
    page_scraped: int = 0
    extra: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode='before')
    @classmethod
    def fold_legacy_keys(cls, data: Any) -> Any:
        """Accept contact_number and move unknown top-level keys into extra."""
        if not isinstance(data, dict):
            return data
        data = _drop_nulls(data)

        if 'contact_number' in data and 'contactNumber' not in data:
            data['contactNumber'] = data.pop('contact_number')

        known = set()
        for name, info in cls.model_fields.items():
            known.add(name)
            known.add(to_camel(name))
            if info.alias:
                known.add(info.alias)

        folded = {key: value for key, value in data.items() if key in known}
        extra = {k: str(v) for k, v in (data.get('extra') or {}).items() if v is not None}
        for key, value in data.items():
            label = key.lower()
            if key in known or label in extra:
                continue
            if isinstance(value, (str, int, float, bool)) and value != '':
                extra[label] = str(value)
        folded['extra'] = extra
        return folded


class StaffEntry(SnapshotModel):
    id: str
    company_id: str
    name: str
    company_name: str = ''
    profile_link: str = ''
    image_url: str = ''
    role: str = ''
    phone: str = ''
    mobile: str = ''
    email: str = ''
    page_scraped: int = 0

    @model_validator(mode='before')
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        return _drop_nulls(data)


class CompaniesDocument(SnapshotModel):
    metadata: SnapshotMetadata
    companies: List[CompanyEntry] = Field(default_factory=list)


class StaffDocument(SnapshotModel):
    metadata: SnapshotMetadata
    staff: List[StaffEntry] = Field(default_factory=list)
