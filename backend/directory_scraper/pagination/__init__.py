"""
Pagination: page detection, navigation strategies and the controller.
"""

from .probes import detect_page, visible_item_ids, page_from_address
from .strategies import (
    NavigationContext, NavigationStrategy, NextControlClick, SyntheticEvents,
    DirectAddress, default_strategies, page_address,
)
from .controller import PaginationController, NavigationState

__all__ = [
    'detect_page',
    'visible_item_ids',
    'page_from_address',
    'NavigationContext',
    'NavigationStrategy',
    'NextControlClick',
    'SyntheticEvents',
    'DirectAddress',
    'default_strategies',
    'page_address',
    'PaginationController',
    'NavigationState',
]
