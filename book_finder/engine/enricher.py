"""Detail page enrichment of stub books."""

from __future__ import annotations

import structlog

from ..errors import ExtractionError, FetchError
from ..models import Book
from .fetcher import NetworkFetcher
from .parser import DetailParser


class DetailEnricher:
    """Fetch a stub's detail page and fill its remaining fields in place."""

    def __init__(
        self,
        fetcher: NetworkFetcher,
        parser: DetailParser | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.parser = parser or DetailParser()
        self.logger = logger or structlog.get_logger("book_finder.enricher")

    def enrich(self, book: Book) -> Book:
        """Mutate ``book`` with detail page data and return it.

        Raises ``ExtractionError`` when the detail document cannot be fetched
        or does not look like a detail page at all.
        """

        try:
            response = self.fetcher.fetch(book.url)
        except FetchError as exc:
            raise ExtractionError(f"detail fetch failed for book {book.id}: {exc}") from exc
        outcome = self.parser.apply(book, response.text)
        if outcome.failed:
            self.logger.debug(
                "detail_fields_degraded",
                book_id=book.id,
                failed=outcome.failed,
            )
        return book


__all__ = ["DetailEnricher"]
