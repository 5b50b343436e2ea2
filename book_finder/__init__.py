"""Concurrent book search and enrichment against a catalog website."""

from .config import FinderConfig
from .errors import BookFinderError, ExtractionError, FetchError, ValidationError
from .models import Book, BookOptions, Rating, SearchQuery
from .orchestrator import BookFinder, find_books

__all__ = [
    "Book",
    "BookFinder",
    "BookFinderError",
    "BookOptions",
    "ExtractionError",
    "FetchError",
    "FinderConfig",
    "Rating",
    "SearchQuery",
    "ValidationError",
    "find_books",
]

__version__ = "0.1.0"
