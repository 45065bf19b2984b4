"""
Record Normalizer - reconciles the extraction passes into one record.

Precedence is fixed: main pass, then pre-pass, then last-resort pass.
Conflicting scalar values are never combined; the first non-empty wins.
"""

from dataclasses import replace
from typing import Dict, List, Optional

from .logger import get_logger
from .models import (
    DetailPass, DetailRecord, ListItem, NormalizedCompany, StaffFields,
    SCALAR_FIELDS, STAFF_ATTRIBUTES,
)

log = get_logger('normalizer')


class RecordNormalizer:
    """Merge a DetailRecord's passes (plus the listing stub) into a NormalizedCompany."""

    def merge(self, detail: DetailRecord, stub: Optional[ListItem] = None) -> NormalizedCompany:
        passes = detail.passes()
        company = NormalizedCompany(url=detail.url)

        for field_name in SCALAR_FIELDS:
            setattr(company, field_name, self._first_scalar(passes, field_name))

        # Listing stub is the final fallback
        if stub is not None:
            if not company.name:
                company.name = stub.name
            if not company.thumbnail_logo_url:
                company.thumbnail_logo_url = stub.logo_url

        company.links = list(self._first_list(passes, 'links'))
        company.social_links = list(self._first_list(passes, 'social_links'))
        company.extra = self._merge_extra(passes)
        company.staff = self._merge_staff(passes)
        return company

    @staticmethod
    def _first_scalar(passes: List[DetailPass], field_name: str) -> str:
        for detail_pass in passes:
            value = getattr(detail_pass, field_name)
            if value:
                return value
        return ''

    @staticmethod
    def _first_list(passes: List[DetailPass], field_name: str) -> list:
        for detail_pass in passes:
            values = getattr(detail_pass, field_name)
            if values:
                return values
        return []

    @staticmethod
    def _merge_extra(passes: List[DetailPass]) -> Dict[str, str]:
        extra: Dict[str, str] = {}
        for detail_pass in passes:
            for label, value in detail_pass.extra.items():
                if value and label not in extra:
                    extra[label] = value
        return extra

    def _merge_staff(self, passes: List[DetailPass]) -> List[StaffFields]:
        """
        Staff keep the main pass's order, matched across passes by name.

        A main-pass member whose name could not be read borrows the name from
        the member at the same position in another pass; it is dropped if no
        pass recovers one. Later passes only fill attributes still empty.
        """
        main, others = passes[0], passes[1:]

        merged: List[StaffFields] = []
        by_name: Dict[str, StaffFields] = {}

        for member in main.staff:
            member = replace(member)
            if not member.name:
                member.name = self._name_at(others, member.position)
            if not member.name:
                log.debug(f"Dropping staff member at position {member.position}: no name in any pass")
                continue
            if member.name in by_name:
                self._fill(by_name[member.name], member)
                continue
            by_name[member.name] = member
            merged.append(member)

        for detail_pass in others:
            for member in detail_pass.staff:
                if not member.name:
                    continue
                existing = by_name.get(member.name)
                if existing is not None:
                    self._fill(existing, member)
                else:
                    member = replace(member)
                    by_name[member.name] = member
                    merged.append(member)

        return merged

    @staticmethod
    def _name_at(passes: List[DetailPass], position: int) -> str:
        if position < 0:
            return ''
        for detail_pass in passes:
            for member in detail_pass.staff:
                if member.position == position and member.name:
                    return member.name
        return ''

    @staticmethod
    def _fill(target: StaffFields, source: StaffFields) -> None:
        for attribute in STAFF_ATTRIBUTES:
            if not getattr(target, attribute) and getattr(source, attribute):
                setattr(target, attribute, getattr(source, attribute))
