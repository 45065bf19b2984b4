"""
Extraction: listing parsing, tiered detail passes and the pipeline driving them.
"""

from .listing import parse_listing, listing_urls
from .passes import BasePass, PrePass, MainPass, LastResortPass
from .pipeline import ExtractionPipeline, needs_last_resort

__all__ = [
    'parse_listing',
    'listing_urls',
    'BasePass',
    'PrePass',
    'MainPass',
    'LastResortPass',
    'ExtractionPipeline',
    'needs_last_resort',
]
