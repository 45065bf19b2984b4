"""
Exceptions raised by the directory scraper.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class DirectoryScraperError(Exception):
    """Base exception for directory scraper failures."""


class NavigationFailure(Enum):
    """Why the pagination controller could not settle on a page."""
    TIMEOUT = "timeout"
    EMPTY_PAGE = "empty_page"
    STUCK_CURSOR = "stuck_cursor"


class NavigationError(DirectoryScraperError):
    """Raised when a listing page cannot be reached. Recoverable at page level."""

    def __init__(self, kind: NavigationFailure, target_page: int,
                 reached_page: Optional[int] = None, message: str = ""):
        self.kind = kind
        self.target_page = target_page
        self.reached_page = reached_page
        detail = message or kind.value
        super().__init__(
            f"Navigation to page {target_page} failed ({detail}); reached page {reached_page}"
        )


class ExtractionError(DirectoryScraperError):
    """Raised when a single field or sub-entity cannot be read. Always recovered locally."""

    def __init__(self, field: str, cause: Optional[BaseException] = None):
        self.field = field
        self.cause = cause
        super().__init__(f"Could not extract '{field}': {cause}")


class ClassificationAmbiguous(DirectoryScraperError):
    """Raised when a record carries no text to classify. Such records are excluded."""


class PersistenceError(DirectoryScraperError):
    """Raised when a checkpoint cannot be read or published. Fatal for the run."""


class SessionError(DirectoryScraperError):
    """Raised when the remote session fails outside any recoverable boundary."""


class SessionTimeout(SessionError):
    """Raised when a load or reload does not complete in time."""


class AuthenticationError(SessionError):
    """Raised when signing in to the directory fails."""
