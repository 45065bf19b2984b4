"""
Logging configuration for the directory scraper.
"""

import logging
import sys

# Create logger
logger = logging.getLogger('directory_scraper')
logger.setLevel(logging.DEBUG)

if not logger.handlers:
    # Console handler with formatting
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-5s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )
    console.setFormatter(formatter)

    logger.addHandler(console)


def set_level(level):
    """Set the console verbosity ('DEBUG', 'INFO', ... or a logging constant)."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    for handler in logger.handlers:
        handler.setLevel(level)


# Component loggers
def get_logger(name):
    """Get a child logger for a specific component."""
    return logger.getChild(name)
