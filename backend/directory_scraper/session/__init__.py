"""
Remote session: the driver capability, its Playwright adapter and
session bring-up helpers (overlays, sign-in, listing filter).
"""

from .driver import SessionDriver, WaitPolicy, Interaction
from .overlays import dismiss_overlays
from .auth import login
from .listing import apply_category_filter, open_listing, ensure_listing

__all__ = [
    'SessionDriver',
    'WaitPolicy',
    'Interaction',
    'dismiss_overlays',
    'login',
    'apply_category_filter',
    'open_listing',
    'ensure_listing',
]
