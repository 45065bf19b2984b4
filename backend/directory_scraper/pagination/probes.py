"""
Current-page detection and visible item identifiers.
"""

import re
from typing import Optional, Tuple
from urllib.parse import urlparse, parse_qs

from .. import locators, scripts
from ..errors import SessionError
from ..extraction.listing import listing_urls
from ..logger import get_logger
from ..models import PageCursor
from ..session.driver import SessionDriver

log = get_logger('probes')

_DIGITS = re.compile(r'\d+')


def parse_page_number(value) -> Optional[int]:
    """First positive integer in a probe value, or None."""
    if value is None:
        return None
    match = _DIGITS.search(str(value))
    if not match:
        return None
    number = int(match.group())
    return number if number >= 1 else None


def page_from_address(address: str, page_param: str = 'page') -> Optional[int]:
    values = parse_qs(urlparse(address or '').query).get(page_param)
    if not values:
        return None
    return parse_page_number(values[0])


async def detect_page(driver: SessionDriver, page_param: str = 'page') -> PageCursor:
    """
    Probe the live session for the current listing page.

    Order: page indicator element, page-number input, URL parameter, default 1.
    The first probe that resolves wins.
    """
    state = {}
    try:
        state = await driver.query(scripts.PAGE_STATE, {
            'indicator': locators.PAGE_INDICATOR,
            'input': locators.PAGE_INPUT,
        }) or {}
    except SessionError as e:
        log.debug(f"Page state probe failed: {e}")

    for probe in ('indicator', 'input'):
        number = parse_page_number(state.get(probe))
        if number is not None:
            return PageCursor(number)

    number = page_from_address(await driver.current_address(), page_param)
    if number is not None:
        return PageCursor(number)

    return PageCursor(1)


async def visible_item_ids(driver: SessionDriver) -> Tuple[str, ...]:
    """Detail URLs of the items currently listed, in document order."""
    html = await driver.query(scripts.DOCUMENT_HTML)
    return tuple(listing_urls(html or '', await driver.current_address()))
