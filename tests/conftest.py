"""Shared fixtures: HTML builders and an in-memory fetcher."""

from __future__ import annotations

import time
from types import SimpleNamespace
from threading import Lock
from typing import Callable, Iterable, Iterator

import pytest

from book_finder import BookFinder, FinderConfig
from book_finder.engine.fetcher import FetchResponse
from book_finder.engine.parser import parse_book_id
from book_finder.errors import FetchError


def search_row(book_id: int, title: str, author: str = "Jane Author", slug: str | None = None) -> str:
    slug = slug or title.lower().replace(" ", "-")
    return f"""
    <tr itemscope="" itemtype="http://schema.org/Book">
      <td width="100%" valign="top">
        <a class="bookTitle" itemprop="url" href="/book/show/{book_id}-{slug}?from_search=true&amp;rank=1">
          <span itemprop="name" role="heading" aria-level="4">{title}</span>
        </a>
        <span class="by">by</span>
        <span itemprop="author" itemscope="" itemtype="http://schema.org/Person">
          <div class="authorName__container">
            <a class="authorName" itemprop="url" href="https://www.goodreads.com/author/show/1.x"><span itemprop="name">{author}</span></a>
          </div>
        </span>
      </td>
    </tr>
    """


def search_page(rows: Iterable[str]) -> str:
    return "<html><body><table><tbody>" + "".join(rows) + "</tbody></table></body></html>"


def detail_page(
    title: str = "A Book",
    author: str = "Jane Author",
    rating_avg: str = "4.00",
    rating_count: str = "1,234\u00a0ratings",
    publication: str = "First published June 26, 1997",
    description: str = "A fine story.",
    pages: str = "309 pages, Hardcover",
    poster: str = "https://images.example.com/cover.jpg",
) -> str:
    return f"""
    <html><body>
      <div class="BookCover"><img class="ResponsiveImage" src="{poster}" alt="cover"></div>
      <div class="BookPageTitleSection"><h1 data-testid="bookTitle" aria-label="Book title: {title}">{title}</h1></div>
      <div class="ContributorLinksList">
        <a class="ContributorLink" href="/author/show/1"><span class="ContributorLink__name" data-testid="name">{author}</span></a>
        <a class="ContributorLink" href="/author/show/2"><span class="ContributorLink__name" data-testid="name">Second Person</span></a>
      </div>
      <div class="RatingStatistics__column"><div class="RatingStatistics__rating" aria-hidden="true">{rating_avg}</div></div>
      <div class="RatingStatistics__meta"><span data-testid="ratingsCount">{rating_count}</span></div>
      <div class="BookPageMetadataSection__description">
        <div class="TruncatedContent"><span class="Formatted">{description}</span></div>
      </div>
      <div class="FeaturedDetails">
        <p data-testid="pagesFormat">{pages}</p>
        <p data-testid="publicationInfo">{publication}</p>
      </div>
    </body></html>
    """


class FakeFetcher:
    """Serve a search page and per-id detail pages from memory."""

    def __init__(
        self,
        search_html: str | Exception,
        details: dict[int, str | Exception] | None = None,
        delay: float = 0.0,
        delays: dict[int, float] | None = None,
    ) -> None:
        self.search_html = search_html
        self.details = details or {}
        self.delay = delay
        self.delays = delays or {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = Lock()

    def fetch(self, url: str) -> FetchResponse:
        with self._lock:
            self.calls.append(url)
        if "/search" in url:
            if isinstance(self.search_html, Exception):
                raise self.search_html
            return FetchResponse(url=url, status_code=200, text=self.search_html)
        book_id = parse_book_id(url)
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            pause = self.delays.get(book_id, self.delay)
            if pause:
                time.sleep(pause)
            payload = self.details.get(book_id)
            if payload is None:
                raise FetchError(url, "Unexpected status 404", status_code=404)
            if isinstance(payload, Exception):
                raise payload
            return FetchResponse(url=url, status_code=200, text=payload)
        finally:
            with self._lock:
                self.in_flight -= 1

    @property
    def detail_calls(self) -> list[str]:
        with self._lock:
            return [url for url in self.calls if "/search" not in url]


@pytest.fixture
def make_finder() -> Iterator[Callable[..., BookFinder]]:
    """Build finders and make sure their background work drains at teardown."""

    finders: list[BookFinder] = []

    def _builder(fetcher: FakeFetcher, **config_overrides) -> BookFinder:
        finder = BookFinder(fetcher, FinderConfig(**config_overrides))
        finders.append(finder)
        return finder

    yield _builder
    for finder in finders:
        finder.wait_drained(timeout=10)


@pytest.fixture
def pages() -> SimpleNamespace:
    return SimpleNamespace(row=search_row, search=search_page, detail=detail_page)


@pytest.fixture
def fake_fetcher() -> type[FakeFetcher]:
    return FakeFetcher
