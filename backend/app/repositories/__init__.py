"""Read-only data access repositories."""

from .search import SearchRepository
from .translations import TranslationRepository
from .verses import VerseRepository

__all__ = [
    "SearchRepository",
    "TranslationRepository",
    "VerseRepository",
]
