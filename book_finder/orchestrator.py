"""Search orchestrator wiring extraction, bounded enrichment and aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Event, Lock, Thread
from typing import Sequence
from urllib.parse import urlencode, urlsplit

import structlog

from .config import FinderConfig
from .engine import (
    CandidateExtractor,
    Deduplicator,
    DetailEnricher,
    HttpFetcher,
    NetworkFetcher,
    QualityFilter,
    ResultAggregator,
    ResultStream,
    WorkerPool,
)
from .errors import BookFinderError, FetchError
from .models import Book, BookOptions, SearchQuery


@dataclass(slots=True)
class RunSummary:
    """Counters for one enrichment run, updated from worker threads."""

    candidates: int = 0
    admitted: int = 0
    duplicates: int = 0
    failed: int = 0
    filtered: int = 0
    published: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def bump(self, name: str) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + 1)

    def as_dict(self) -> dict[str, int]:
        with self._lock:
            return {
                "candidates": self.candidates,
                "admitted": self.admitted,
                "duplicates": self.duplicates,
                "failed": self.failed,
                "filtered": self.filtered,
                "published": self.published,
            }


class BookFinder:
    """Central coordinator for one search → enrich → filter → collect cycle."""

    def __init__(
        self,
        fetcher: NetworkFetcher,
        config: FinderConfig | None = None,
        extractor: CandidateExtractor | None = None,
        enricher: DetailEnricher | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.config = config or FinderConfig()
        self.extractor = extractor or CandidateExtractor(urlsplit(self.config.base_url).netloc)
        self.enricher = enricher or DetailEnricher(fetcher)
        self.logger = structlog.get_logger("book_finder").bind(component="orchestrator")
        self._dispatchers: list[Thread] = []
        self._dispatchers_lock = Lock()

    # ------------------------------------------------------------------
    def search_url(self, search_string: str) -> str:
        return f"{self.config.search_url}?{urlencode({self.config.search_param: search_string})}"

    def find_books(
        self, search_string: str, limit: int, options: BookOptions | None = None
    ) -> list[Book]:
        """Return up to ``limit`` enriched books matching ``search_string``.

        Raises ``ValidationError`` for an empty query or non-positive limit,
        before any request is made. Every other failure only shortens the list.
        """

        query = SearchQuery.build(search_string, limit, options or self.config.default_options)
        log = self.logger.bind(query=query.search_string, limit=query.limit)
        url = self.search_url(query.search_string)
        try:
            response = self.fetcher.fetch(url)
        except FetchError as exc:
            log.error("search_fetch_failed", url=url, error=str(exc))
            return []
        stubs = self.extractor.extract(response.text)
        log.info("candidates_extracted", count=len(stubs))
        books = self.collect(stubs, query)
        log.info("search_completed", returned=len(books))
        return books

    def fetch_limit(self, query: SearchQuery) -> int:
        return query.limit * self.config.multiplier_for(query.options)

    def collect(self, stubs: Sequence[Book], query: SearchQuery) -> list[Book]:
        """Enrich ``stubs`` concurrently and return the first ``limit`` accepted books."""

        stop = Event()
        stream = ResultStream()
        aggregator = ResultAggregator(query.limit, stop_event=stop)
        summary = RunSummary(candidates=len(stubs))
        dispatcher = Thread(
            target=self._dispatch,
            args=(list(stubs), query, stop, stream, summary),
            name="book-finder-dispatch",
            daemon=True,
        )
        with self._dispatchers_lock:
            self._dispatchers = [t for t in self._dispatchers if t.is_alive()]
            self._dispatchers.append(dispatcher)
        dispatcher.start()
        return aggregator.collect(stream)

    def wait_drained(self, timeout: float | None = None) -> bool:
        """Block until work dispatched by earlier calls has finished.

        Returns ``False`` if ``timeout`` expired first.
        """

        with self._dispatchers_lock:
            dispatchers = list(self._dispatchers)
        for dispatcher in dispatchers:
            dispatcher.join(timeout)
            if dispatcher.is_alive():
                return False
        return True

    # ------------------------------------------------------------------
    def _dispatch(
        self,
        stubs: list[Book],
        query: SearchQuery,
        stop: Event,
        stream: ResultStream,
        summary: RunSummary,
    ) -> None:
        fetch_limit = self.fetch_limit(query)
        dedup = Deduplicator()
        quality = QualityFilter(query.options)
        pool = WorkerPool(self.config.pool_size)

        def admitting() -> bool:
            # Published books are counted before their slot is released, so a
            # freed slot never outruns the consumer noticing the limit.
            return not stop.is_set() and summary.published < query.limit

        try:
            for stub in stubs:
                if not admitting() or summary.admitted >= fetch_limit:
                    break
                if query.options.remove_dups and not dedup.check_and_mark(stub.id):
                    summary.bump("duplicates")
                    self.logger.debug("duplicate_skipped", book_id=stub.id)
                    continue
                future = pool.submit(
                    self._process, stub.snapshot(), quality, stream, summary, should_admit=admitting
                )
                if future is None:
                    self.logger.debug("admission_closed", book_id=stub.id)
                    break
                summary.bump("admitted")
        finally:
            pool.drain()
            pool.shutdown()
            stream.close()
            self.logger.info("enrichment_drained", fetch_limit=fetch_limit, **summary.as_dict())

    def _process(
        self,
        book: Book,
        quality: QualityFilter,
        stream: ResultStream,
        summary: RunSummary,
    ) -> None:
        try:
            self.enricher.enrich(book)
        except BookFinderError as exc:
            summary.bump("failed")
            self.logger.warning("enrich_failed", book_id=book.id, url=book.url, error=str(exc))
            return
        except Exception as exc:  # noqa: BLE001
            summary.bump("failed")
            self.logger.error("enrich_crashed", book_id=book.id, url=book.url, error=str(exc))
            return
        reason = quality.rejection_reason(book)
        if reason is not None:
            summary.bump("filtered")
            self.logger.debug("book_filtered", book_id=book.id, reason=reason)
            return
        summary.bump("published")
        stream.publish(book)


def find_books(
    search_string: str,
    limit: int,
    options: BookOptions | None = None,
    config: FinderConfig | None = None,
) -> list[Book]:
    """Run one search with a fresh HTTP fetcher.

    Unlike ``BookFinder.find_books`` this waits for in-flight enrichment to
    drain so the HTTP client can be closed.
    """

    config = config or FinderConfig()
    SearchQuery.build(search_string, limit, options)
    with HttpFetcher(config) as fetcher:
        finder = BookFinder(fetcher, config)
        books = finder.find_books(search_string, limit, options)
        finder.wait_drained()
    return books


__all__ = ["BookFinder", "RunSummary", "find_books"]
