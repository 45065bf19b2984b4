"""
Extraction tiers over a detail document.

Each pass reads its own snapshot of the document independently:

    PrePass        - narrow probes for image URLs, fallback source only
    MainPass       - authoritative read of every field, each with a locator ladder
    LastResortPass - loosely scoped probes to fill whatever is still missing

A failure on one field never stops the others: every field read goes
through _safe(), which records the failure and yields the default.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from .. import locators
from ..errors import ExtractionError
from ..logger import get_logger
from ..models import DetailPass, ExtractionTier, SocialLink, StaffFields
from .text import (
    clean_text, absolute_url, image_source, split_address_phone,
    normalize_activity, network_type, normalize_label,
)

log = get_logger('passes')

# Heading the address block carries before the address itself
_INFORMATION_LABEL = re.compile(r'^\s*information\s*:?\s*', re.IGNORECASE)


def first_text(scope, selectors: List[str]) -> str:
    """Text of the first locator in the ladder that yields non-empty text."""
    for sel in selectors:
        el = scope.select_one(sel)
        if el is not None:
            text = clean_text(el.get_text())
            if text:
                return text
    return ''


def first_image(scope, selectors: List[str], base_url: str) -> str:
    """Source of the first image in the ladder that has one."""
    for sel in selectors:
        for img in scope.select(sel):
            url = image_source(img, base_url)
            if url:
                return url
    return ''


def text_of(scope, selector: str) -> str:
    el = scope.select_one(selector)
    return clean_text(el.get_text()) if el is not None else ''


class BasePass(ABC):
    """Base class for extraction tiers."""

    tier: ExtractionTier

    @abstractmethod
    def read(self, soup: BeautifulSoup, base_url: str) -> DetailPass:
        """
        Read this tier's fields from a parsed detail document.

        Args:
            soup: Parsed snapshot of the document
            base_url: Document address, for resolving relative URLs

        Returns:
            DetailPass with found values; missing ones left at their defaults
        """

    def read_html(self, html: str, base_url: str) -> DetailPass:
        return self.read(BeautifulSoup(html or '', 'html.parser'), base_url)

    def _safe(self, detail: DetailPass, field_name: str, reader: Callable[[], Any], default: Any = '') -> Any:
        """Run one field reader in isolation."""
        try:
            value = reader()
        except Exception as e:
            error = ExtractionError(field_name, e)
            log.debug(f"[{self.tier.value}] {error}")
            detail.failed_fields.append(field_name)
            return default
        return value if value is not None else default


    def _read_staff(
        self,
        soup: BeautifulSoup,
        detail: DetailPass,
        reader: Callable[[Tag, int], Optional[StaffFields]],
    ) -> List[StaffFields]:
        """Read every staff item; one broken item never drops the others."""
        staff = []
        for position, item in enumerate(soup.select(locators.STAFF_ITEM)):
            member = self._safe(detail, f'staff[{position}]',
                                lambda: reader(item, position), None)
            if member is not None:
                staff.append(member)
        return staff


class PrePass(BasePass):
    """Cheap probes for logo and staff images, used only as a fallback source."""

    tier = ExtractionTier.PRE_PASS

    def read(self, soup: BeautifulSoup, base_url: str) -> DetailPass:
        detail = DetailPass(tier=self.tier)
        detail.thumbnail_logo_url = self._safe(
            detail, 'thumbnail_logo_url',
            lambda: first_image(soup, locators.PRE_PASS_LOGO, base_url))

        def member(item: Tag, position: int) -> StaffFields:
            return StaffFields(
                position=position,
                name=text_of(item, locators.STAFF_NAME),
                image_url=image_source(item.select_one(locators.PRE_PASS_STAFF_IMAGE), base_url),
            )

        detail.staff = self._read_staff(soup, detail, member)
        return detail


class MainPass(BasePass):
    """Authoritative read of every field."""

    tier = ExtractionTier.MAIN

    def read(self, soup: BeautifulSoup, base_url: str) -> DetailPass:
        detail = DetailPass(tier=self.tier)

        detail.name = self._safe(detail, 'name', lambda: first_text(soup, locators.COMPANY_NAME))
        detail.thumbnail_logo_url = self._safe(
            detail, 'thumbnail_logo_url',
            lambda: first_image(soup, locators.COMPANY_LOGO, base_url))
        detail.background_image_url = self._safe(
            detail, 'background_image_url',
            lambda: first_image(soup, locators.COMPANY_BACKGROUND, base_url))
        detail.activity = self._safe(detail, 'activity', lambda: self._activity(soup))

        address, contact = self._safe(detail, 'address', lambda: self._address(soup), ('', ''))
        detail.address = address
        detail.contact_number = contact

        paragraphs = self._safe(detail, 'description', lambda: self._paragraphs(soup), [])
        detail.description = paragraphs[0] if len(paragraphs) > 0 else ''
        detail.objective = paragraphs[1] if len(paragraphs) > 1 else ''

        detail.links = self._safe(detail, 'links', lambda: self._links(soup, base_url), [])
        detail.social_links = self._safe(
            detail, 'social_links', lambda: self._social_links(soup, base_url), [])
        detail.extra = self._safe(detail, 'extra', lambda: self._extra(soup), {})

        detail.staff = self._read_staff(
            soup, detail, lambda item, position: self._member(item, position, detail, base_url))

        if detail.failed_fields:
            log.debug(f"Main pass on {base_url} missed: {', '.join(detail.failed_fields)}")
        return detail

    def _activity(self, soup: BeautifulSoup) -> str:
        block = soup.select_one(locators.ACTIVITY_BLOCK)
        if block is None:
            return ''
        labels = [clean_text(label.get_text()) for label in block.select(locators.ACTIVITY_LABEL)]
        labels = [label for label in labels if label]
        return normalize_activity(labels, block.get_text('\n'))

    def _address(self, soup: BeautifulSoup) -> Tuple[str, str]:
        block = soup.select_one(locators.ADDRESS_BLOCK)
        if block is None:
            return '', ''

        contact = text_of(block, locators.ADDRESS_PHONE)

        # Work on a detached copy so the phone element can be dropped
        block = BeautifulSoup(str(block), 'html.parser')
        for phone in block.select(locators.ADDRESS_PHONE):
            phone.decompose()
        text = _INFORMATION_LABEL.sub('', clean_text(block.get_text(' ')), count=1)

        return split_address_phone(text, contact)

    def _paragraphs(self, soup: BeautifulSoup) -> List[str]:
        texts = [clean_text(p.get_text()) for p in soup.select(locators.DESCRIPTION_PARAGRAPHS)]
        return [t for t in texts if t]

    def _links(self, soup: BeautifulSoup, base_url: str) -> List[str]:
        links = []
        for anchor in soup.select(locators.LINKS):
            text = clean_text(anchor.get_text())
            href = absolute_url(anchor.get('href'), base_url)
            for value in (text, href if href.startswith(('http://', 'https://')) else ''):
                if value and value not in links:
                    links.append(value)
        return links

    def _social_links(self, soup: BeautifulSoup, base_url: str) -> List[SocialLink]:
        found = []
        seen = set()
        for anchor in soup.select(locators.SOCIAL_LINKS):
            url = absolute_url(anchor.get('href'), base_url)
            if url and url not in seen:
                seen.add(url)
                found.append(SocialLink(url=url, network_type=network_type(url)))
        return found

    def _extra(self, soup: BeautifulSoup) -> Dict[str, str]:
        extra = {}
        for item in soup.select(locators.INFO_ITEM):
            label = normalize_label(text_of(item, locators.INFO_LABEL))
            value = text_of(item, locators.INFO_DATA)
            if label and value and label not in extra:
                extra[label] = value
        return extra

    def _member(self, item: Tag, position: int, detail: DetailPass, base_url: str) -> StaffFields:
        prefix = f'staff[{position}]'
        member = StaffFields(position=position)

        name_link = item.select_one(locators.STAFF_NAME)
        if name_link is not None:
            member.name = clean_text(name_link.get_text())
            member.profile_link = absolute_url(name_link.get('href'), base_url)

        member.image_url = self._safe(
            detail, f'{prefix}.image_url',
            lambda: first_image(item, locators.STAFF_IMAGE, base_url))
        member.role = self._safe(detail, f'{prefix}.role', lambda: text_of(item, locators.STAFF_ROLE))
        member.phone = self._safe(detail, f'{prefix}.phone', lambda: text_of(item, locators.STAFF_PHONE))
        member.mobile = self._safe(detail, f'{prefix}.mobile', lambda: text_of(item, locators.STAFF_MOBILE))
        member.email = self._safe(detail, f'{prefix}.email', lambda: self._email(item))
        return member

    @staticmethod
    def _email(item: Tag) -> str:
        for sel in locators.STAFF_EMAIL:
            anchor = item.select_one(sel)
            if anchor is None:
                continue
            href = (anchor.get('href') or '').strip()
            if href.lower().startswith('mailto:'):
                return href[len('mailto:'):].split('?')[0].strip()
            text = clean_text(anchor.get_text())
            if text:
                return text
        return ''


class LastResortPass(BasePass):
    """Loose probes run only when images are still missing after the other passes."""

    tier = ExtractionTier.LAST_RESORT

    def read(self, soup: BeautifulSoup, base_url: str) -> DetailPass:
        detail = DetailPass(tier=self.tier)
        detail.thumbnail_logo_url = self._safe(
            detail, 'thumbnail_logo_url',
            lambda: first_image(soup, [locators.LAST_RESORT_HEADER_IMAGES], base_url))

        def member(item: Tag, position: int) -> StaffFields:
            return StaffFields(
                position=position,
                name=text_of(item, locators.STAFF_NAME),
                image_url=first_image(item, [locators.LAST_RESORT_STAFF_IMAGE], base_url),
            )

        detail.staff = self._read_staff(soup, detail, member)
        return detail
