"""
Text and URL cleanup shared by the extraction passes.
"""

import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

_WHITESPACE = re.compile(r'\s+')

# Trailing phone-like number at the end of an address block
_PHONE_TAIL = re.compile(r'\s+(\+?\d+[\s\d]+\d+)\s*$')

# Fewer digits than this is a postcode or street number, not a phone
_MIN_PHONE_DIGITS = 7

_ACTIVITY_HEADING = re.compile(r'^\s*activit(?:y|ies)\s*:?', re.IGNORECASE)
_ACTIVITY_RUNS = re.compile(r'\s{2,}|\n')

# Network type by host domain, first match wins
SOCIAL_NETWORKS = [
    ('facebook', ['facebook.com', 'fb.com']),
    ('twitter', ['twitter.com', 'x.com']),
    ('instagram', ['instagram.com']),
    ('linkedin', ['linkedin.com']),
    ('youtube', ['youtube.com', 'youtu.be']),
    ('vimeo', ['vimeo.com']),
]


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs and trim."""
    if not text:
        return ''
    return _WHITESPACE.sub(' ', text).strip()


def absolute_url(href: Optional[str], base_url: str) -> str:
    """Resolve href against the document address. Empty for empty input."""
    if not href:
        return ''
    href = href.strip()
    if not href or href.startswith(('javascript:', '#')):
        return ''
    return urljoin(base_url, href)


def image_source(img, base_url: str) -> str:
    """Image URL from src, falling back to the lazy-load data-src."""
    if img is None:
        return ''
    for attr in ('src', 'data-src'):
        url = absolute_url(img.get(attr), base_url)
        if url:
            return url
    return ''


def split_address_phone(address: str, contact_number: str = '') -> Tuple[str, str]:
    """
    Pull a trailing phone number out of an address block.

    The number moves to the contact field only if that field is empty; it is
    stripped from the address either way.

    Returns:
        (address, contact_number)
    """
    text = (address or '').strip()
    match = _PHONE_TAIL.search(text)
    if match and len(re.sub(r'\D', '', match.group(1))) >= _MIN_PHONE_DIGITS:
        if not contact_number:
            contact_number = match.group(1).strip()
        text = text[:match.start()]
    return clean_text(text), contact_number


def split_activity(labels: List[str], block_text: str = '') -> List[str]:
    """
    Split an activity block into distinct category labels.

    Uses explicit sub-labels when present, else commas, else whitespace runs.
    """
    if labels:
        parts = labels
    else:
        text = _ACTIVITY_HEADING.sub('', block_text or '', count=1).strip()
        if ',' in text:
            parts = text.split(',')
        else:
            parts = _ACTIVITY_RUNS.split(text)

    distinct = []
    for part in parts:
        label = clean_text(part)
        if label and label not in distinct:
            distinct.append(label)
    return distinct


def normalize_activity(labels: List[str], block_text: str = '') -> str:
    """Activity labels rejoined as one comma-separated string."""
    return ', '.join(split_activity(labels, block_text))


def network_type(url: str) -> str:
    """Identify the social network a profile URL belongs to."""
    try:
        host = (urlparse(url.strip()).hostname or '').lower()
    except ValueError:
        return 'other'
    for name, domains in SOCIAL_NETWORKS:
        if any(host == domain or host.endswith('.' + domain) for domain in domains):
            return name
    return 'other'


def normalize_label(label: str) -> str:
    """Key for an uncategorized label/value pair."""
    return clean_text(label.replace(':', '')).lower()
