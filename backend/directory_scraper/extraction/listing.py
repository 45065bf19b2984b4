"""
Listing page parsing.
"""

from typing import List

from bs4 import BeautifulSoup

from .. import locators
from ..logger import get_logger
from ..models import ListItem
from .text import clean_text, absolute_url, image_source

log = get_logger('listing')


def parse_listing(html: str, base_url: str) -> List[ListItem]:
    """
    Read every directory entry on a listing page, in document order.

    Items without a logo are kept with an empty logo_url.
    """
    soup = BeautifulSoup(html or '', 'html.parser')
    results = []

    name_elements = soup.select(locators.LISTING_ITEM_NAME)
    item_elements = soup.select(locators.LISTING_ITEM)

    for index, element in enumerate(name_elements):
        link = element.select_one('a')
        if link is None:
            continue
        url = absolute_url(link.get('href'), base_url)
        if not url:
            log.debug(f"Listing entry {index} has no link target")
            continue

        item = ListItem(
            name=clean_text(link.get_text()),
            url=url,
            title=link.get('title') or '',
        )

        # Logo lives on the enclosing item; fall back to the item at the same position
        container = element.find_parent(class_='item-comp')
        if container is None and index < len(item_elements):
            container = item_elements[index]
        if container is not None:
            item.logo_url = image_source(container.select_one(locators.LISTING_ITEM_LOGO), base_url)

        results.append(item)

    return results


def listing_urls(html: str, base_url: str) -> List[str]:
    """Identifiers (detail URLs) of the items visible on a listing page."""
    return [item.url for item in parse_listing(html, base_url)]
