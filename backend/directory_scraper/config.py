"""
Configuration Management
=======================

Centralized configuration for the directory scraper.
Values come from the environment, optionally seeded from a .env file.
"""

import os
from pathlib import Path
from typing import Dict, Any

from dotenv import load_dotenv

# Load environment variables from .env file at the project root
project_root = Path(__file__).resolve().parents[2]
load_dotenv(project_root / '.env')


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Scraper configuration"""

    # Directory site
    BASE_URL = os.getenv('DIRECTORY_BASE_URL', 'https://cinando.com')
    LISTING_PATH = os.getenv('DIRECTORY_LISTING_PATH', '/en/Search/Companies')
    LOGIN_PATH = os.getenv('DIRECTORY_LOGIN_PATH', '/')
    TARGET_CATEGORY = os.getenv('DIRECTORY_TARGET_CATEGORY', 'Production Company')

    # Credentials (never exported by to_dict)
    EMAIL = os.getenv('DIRECTORY_EMAIL', '')
    PASSWORD = os.getenv('DIRECTORY_PASSWORD', '')

    # Browser
    HEADLESS = _env_bool('HEADLESS', 'true')
    BROWSER_EXECUTABLE = os.getenv('BROWSER_EXECUTABLE') or None

    # Timeouts (ms)
    NAVIGATION_TIMEOUT_MS = int(os.getenv('NAVIGATION_TIMEOUT_MS', 120000))
    LOCATOR_TIMEOUT_MS = int(os.getenv('LOCATOR_TIMEOUT_MS', 10000))
    NAVIGATION_SIGNAL_TIMEOUT_MS = int(os.getenv('NAVIGATION_SIGNAL_TIMEOUT_MS', 15000))
    LISTING_TIMEOUT_MS = int(os.getenv('LISTING_TIMEOUT_MS', 30000))

    # Delays (seconds)
    SETTLE_DELAY = float(os.getenv('SETTLE_DELAY', 5.0))
    DETAIL_SETTLE_DELAY = float(os.getenv('DETAIL_SETTLE_DELAY', 3.0))
    RECORD_DELAY = float(os.getenv('RECORD_DELAY', 1.0))

    # Pagination
    MAX_NAVIGATION_ATTEMPTS = int(os.getenv('MAX_NAVIGATION_ATTEMPTS', 5))
    PAGE_PARAM = os.getenv('PAGE_PARAM', 'page')

    # Output
    OUTPUT_DIR = os.getenv('OUTPUT_DIR', 'output')
    COMPANIES_SNAPSHOT = os.getenv('COMPANIES_SNAPSHOT', 'directory_companies')
    STAFF_SNAPSHOT = os.getenv('STAFF_SNAPSHOT', 'directory_staff')
    PARTIAL_SUFFIX = os.getenv('PARTIAL_SUFFIX', '_partial')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def listing_url(cls) -> str:
        """Absolute URL of the directory listing page"""
        return f"{cls.BASE_URL.rstrip('/')}{cls.LISTING_PATH}"

    @classmethod
    def login_url(cls) -> str:
        """Absolute URL of the sign-in page"""
        return f"{cls.BASE_URL.rstrip('/')}{cls.LOGIN_PATH}"

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Export configuration as dictionary"""
        return {
            'base_url': cls.BASE_URL,
            'listing_url': cls.listing_url(),
            'target_category': cls.TARGET_CATEGORY,
            'headless': cls.HEADLESS,
            'navigation_timeout_ms': cls.NAVIGATION_TIMEOUT_MS,
            'locator_timeout_ms': cls.LOCATOR_TIMEOUT_MS,
            'navigation_signal_timeout_ms': cls.NAVIGATION_SIGNAL_TIMEOUT_MS,
            'max_navigation_attempts': cls.MAX_NAVIGATION_ATTEMPTS,
            'page_param': cls.PAGE_PARAM,
            'output_dir': cls.OUTPUT_DIR,
            'log_level': cls.LOG_LEVEL,
        }

# Global config instance
config = Config()
