"""
Category classification heuristic.

A record matches when its activity text (or, failing that, its name)
contains the category phrase, a known abbreviation, or the bare category
word, once near-miss qualifiers such as "post-production" are removed.

This is a substring heuristic, not an exact rule: categories that merely
contain the word (or localized labels that don't) can be misclassified.
"""

import re
from typing import Iterable, Optional

from .errors import ClassificationAmbiguous
from .logger import get_logger
from .models import NormalizedCompany

log = get_logger('classifier')

DEFAULT_PHRASE = 'production company'
DEFAULT_WORD = 'production'
DEFAULT_ABBREVIATIONS = ('prod',)

# Qualified forms that must not count as a match
DEFAULT_NEAR_MISSES = (
    'post-production',
    'post production',
    'postproduction',
    'post-prod',
)


class CategoryClassifier:
    """
    Accept/deny substring rule for the target category.

    Args:
        phrase: Full category phrase, e.g. 'production company'
        word: Bare category word, e.g. 'production'
        abbreviations: Short forms matched on word boundaries
        near_misses: Qualified forms stripped before matching
    """

    def __init__(
        self,
        phrase: str = DEFAULT_PHRASE,
        word: str = DEFAULT_WORD,
        abbreviations: Iterable[str] = DEFAULT_ABBREVIATIONS,
        near_misses: Iterable[str] = DEFAULT_NEAR_MISSES,
    ):
        self.phrase = phrase.lower()
        self.word = word.lower()
        self._abbreviations = [
            re.compile(r'\b' + re.escape(a.lower()) + r'\b') for a in abbreviations
        ]
        # Longest first so 'post-production' is removed before 'post-prod'
        self._near_misses = sorted((n.lower() for n in near_misses), key=len, reverse=True)

    @classmethod
    def for_category(cls, category: str) -> 'CategoryClassifier':
        """Classifier for a category label such as 'Production Company'."""
        phrase = category.strip().lower()
        word = phrase.split()[0] if phrase else DEFAULT_WORD
        if phrase == DEFAULT_PHRASE:
            return cls()
        return cls(phrase=phrase, word=word, abbreviations=(), near_misses=())

    def matches(self, text: str) -> bool:
        """Apply the accept/deny rule to one piece of text."""
        text = (text or '').lower()
        for near_miss in self._near_misses:
            text = text.replace(near_miss, ' ')

        if self.phrase and self.phrase in text:
            return True
        if any(pattern.search(text) for pattern in self._abbreviations):
            return True
        return bool(self.word) and self.word in text

    def classify(self, company: NormalizedCompany) -> bool:
        """
        True if the company belongs to the target category.

        Activity is checked first; the name only when activity gives no match.

        Raises:
            ClassificationAmbiguous: neither activity nor name carries any text
        """
        activity = (company.activity or '').strip()
        name = (company.name or '').strip()
        if not activity and not name:
            raise ClassificationAmbiguous(f"No activity or name to classify {company.url}")

        if activity and self.matches(activity):
            return True
        return bool(name) and self.matches(name)

    def describe(self, company: NormalizedCompany) -> Optional[str]:
        """Which text produced the match, for logging."""
        if company.activity and self.matches(company.activity):
            return 'activity'
        if company.name and self.matches(company.name):
            return 'name'
        return None
