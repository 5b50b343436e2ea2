"""Exception hierarchy shared by the search pipeline."""

from __future__ import annotations


class BookFinderError(Exception):
    """Base class for all book_finder failures."""


class ValidationError(BookFinderError, ValueError):
    """Raised synchronously for unusable search input."""


class FetchError(BookFinderError):
    """Transport failure or non-2xx status on a single request."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{message}: {url}")
        self.url = url
        self.status_code = status_code


class ExtractionError(BookFinderError):
    """Required data missing or malformed in a fetched document."""


__all__ = ["BookFinderError", "ExtractionError", "FetchError", "ValidationError"]
