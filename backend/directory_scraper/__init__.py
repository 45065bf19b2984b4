"""
Directory Scraper - resumable crawler for a paginated company directory.

Pagination controller, tiered extraction pipeline, record normalizer,
dedup filter and checkpoint store, driven by DirectoryCrawler.
"""

from .checkpoint import CheckpointStore
from .classifier import CategoryClassifier
from .crawler import DirectoryCrawler
from .dedup import DedupFilter, Admission, Verdict
from .errors import (
    DirectoryScraperError, NavigationError, NavigationFailure, ExtractionError,
    ClassificationAmbiguous, PersistenceError, SessionError, SessionTimeout,
    AuthenticationError,
)
from .extraction import ExtractionPipeline
from .models import ScrapeSession, CompanyRecord, StaffRecord, Progress, RunSummary
from .normalizer import RecordNormalizer
from .pagination import PaginationController

__version__ = "0.1.0"

__all__ = [
    'CheckpointStore',
    'CategoryClassifier',
    'DirectoryCrawler',
    'DedupFilter',
    'Admission',
    'Verdict',
    'DirectoryScraperError',
    'NavigationError',
    'NavigationFailure',
    'ExtractionError',
    'ClassificationAmbiguous',
    'PersistenceError',
    'SessionError',
    'SessionTimeout',
    'AuthenticationError',
    'ExtractionPipeline',
    'ScrapeSession',
    'CompanyRecord',
    'StaffRecord',
    'Progress',
    'RunSummary',
    'RecordNormalizer',
    'PaginationController',
]
