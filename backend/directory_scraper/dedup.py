"""
Dedup Filter - the only place the ScrapeSession is mutated.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .classifier import CategoryClassifier
from .errors import ClassificationAmbiguous
from .logger import get_logger
from .models import CompanyRecord, NormalizedCompany, ScrapeSession, StaffRecord

log = get_logger('dedup')


class Verdict(Enum):
    ADMITTED = "admitted"
    DUPLICATE = "duplicate"
    NOT_TARGET = "not_target"
    AMBIGUOUS = "ambiguous"


@dataclass
class Admission:
    """Outcome of one admit() call."""
    verdict: Verdict
    company: Optional[CompanyRecord] = None
    staff: List[StaffRecord] = field(default_factory=list)

    @property
    def admitted(self) -> bool:
        return self.verdict == Verdict.ADMITTED


def new_id() -> str:
    return str(uuid.uuid4())


class DedupFilter:
    """
    admit(record) = url not in processed_urls AND classify(record).

    Records that fail classification are not marked processed.
    """

    def __init__(self, classifier: Optional[CategoryClassifier] = None):
        self.classifier = classifier or CategoryClassifier()

    @staticmethod
    def is_known(session: ScrapeSession, url: str) -> bool:
        return url in session.processed_urls

    def admit(self, session: ScrapeSession, company: NormalizedCompany, page: int) -> Admission:
        if self.is_known(session, company.url):
            log.info(f"Skipping duplicate: {company.url}")
            return Admission(Verdict.DUPLICATE)

        try:
            accepted = self.classifier.classify(company)
        except ClassificationAmbiguous as e:
            log.info(f"Excluding unclassifiable record: {e}")
            return Admission(Verdict.AMBIGUOUS)

        if not accepted:
            log.info(f"Skipping non-target company: {company.name} ({company.activity or 'no activity'})")
            return Admission(Verdict.NOT_TARGET)

        record = CompanyRecord(
            id=new_id(),
            name=company.name,
            url=company.url,
            thumbnail_logo_url=company.thumbnail_logo_url,
            background_image_url=company.background_image_url,
            activity=company.activity,
            address=company.address,
            contact_number=company.contact_number,
            description=company.description,
            objective=company.objective,
            links=list(company.links),
            social_links=list(company.social_links),
            page_scraped=page,
            extra=dict(company.extra),
        )
        staff = [
            StaffRecord(
                id=new_id(),
                company_id=record.id,
                name=member.name,
                company_name=record.name,
                profile_link=member.profile_link,
                image_url=member.image_url,
                role=member.role,
                phone=member.phone,
                mobile=member.mobile,
                email=member.email,
                page_scraped=page,
            )
            for member in company.staff
            if member.name
        ]

        session.companies.append(record)
        session.staff.extend(staff)
        session.processed_urls.add(record.url)

        log.info(f"Admitted {record.name} with {len(staff)} staff "
                 f"(matched on {self.classifier.describe(company)})")
        return Admission(Verdict.ADMITTED, record, staff)

    @staticmethod
    def revoke(session: ScrapeSession, admission: Admission) -> None:
        """Undo an admission whose checkpoint could not be published."""
        if not admission.admitted or admission.company is None:
            return
        company_id = admission.company.id
        session.companies = [c for c in session.companies if c.id != company_id]
        session.staff = [s for s in session.staff if s.company_id != company_id]
        session.processed_urls.discard(admission.company.url)
        log.warning(f"Revoked unconfirmed admission: {admission.company.url}")
