"""DOM parsing for search result rows and book detail pages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable
from urllib.parse import urlsplit

import structlog
from selectolax.parser import HTMLParser, Node

from ..errors import ExtractionError
from ..models import Book

BOOK_ROW_SELECTOR = 'tr[itemtype="http://schema.org/Book"]'
TITLE_SELECTOR = ".bookTitle"
AUTHOR_SELECTOR = ".authorName"
# /book/show/<id>-<slug>
ID_SEGMENT_INDEX = 3

DETAIL_TITLE = 'h1[data-testid="bookTitle"]'
DETAIL_AUTHOR = ".ContributorLink__name"
DETAIL_RATING_AVG = ".RatingStatistics__rating"
DETAIL_RATING_COUNT = '[data-testid="ratingsCount"]'
DETAIL_PUBLICATION = '[data-testid="publicationInfo"]'
DETAIL_DESCRIPTION = ".BookPageMetadataSection__description .Formatted"
DETAIL_PAGES = '[data-testid="pagesFormat"]'
DETAIL_POSTER = "img.ResponsiveImage"

_LEADING_DIGITS = re.compile(r"^\d+")
NBSP = "\u00a0"

logger = structlog.get_logger("book_finder.parser")


def _clean(node: Node | None) -> str:
    if node is None:
        return ""
    return " ".join(node.text(separator=" ").split())


DEFAULT_SITE_HOST = "www.goodreads.com"


def relative_url(href: str, site_host: str = DEFAULT_SITE_HOST) -> str:
    """Reduce an absolute same-site link to its path and query.

    Links to any other host raise ``ExtractionError``.
    """

    parts = urlsplit(href.strip())
    if not parts.netloc:
        return href.strip()
    if parts.netloc.lower() != site_host.lower():
        raise ExtractionError(f"off-site link: {href.strip()}")
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


def parse_book_id(url: str) -> int:
    """Return the longest leading digit run of the id path segment.

    ``/book/show/42844155-harry-potter`` -> ``42844155``.
    """

    segments = urlsplit(url).path.split("/")
    if len(segments) <= ID_SEGMENT_INDEX:
        raise ExtractionError(f"No id segment in url: {url}")
    match = _LEADING_DIGITS.match(segments[ID_SEGMENT_INDEX])
    if match is None:
        raise ExtractionError(f"Id segment has no leading digits: {url}")
    book_id = int(match.group())
    if book_id <= 0:
        raise ExtractionError(f"Non-positive id in url: {url}")
    return book_id


def parse_rating_avg(text: str) -> float:
    # The first five characters hold the value ("4.47 ..."); anything after
    # is layout noise.
    value = float(text.strip()[:5])
    if not 0.0 <= value <= 5.0:
        raise ValueError(f"rating average out of range: {value}")
    return value


def parse_rating_count(text: str) -> int:
    cleaned = text.replace("ratings", "").replace("rating", "").replace(",", "")
    return int(cleaned.strip(" \t\r\n").split(NBSP)[0])


def parse_publication_year(text: str) -> int:
    # "First published June 26, 1997" -> ["June", "26,", "1997"]
    remainder = text.replace("First published", "", 1)
    return int(remainder.split()[2])


def parse_page_count(text: str) -> int:
    return int(text.split()[0])


class CandidateExtractor:
    """Turn a search result page into ordered stub books."""

    def __init__(self, site_host: str = DEFAULT_SITE_HOST) -> None:
        self.site_host = site_host

    def extract(self, html: str) -> list[Book]:
        parser = HTMLParser(html)
        stubs: list[Book] = []
        for position, row in enumerate(parser.css(BOOK_ROW_SELECTOR)):
            try:
                stubs.append(self.parse_row(row))
            except ExtractionError as exc:
                logger.info("candidate_skipped", position=position, reason=str(exc))
        return stubs

    def parse_row(self, row: Node) -> Book:
        title_node = row.css_first(TITLE_SELECTOR)
        title = _clean(title_node)
        if not title:
            raise ExtractionError("missing title")
        href = (title_node.attributes.get("href") or "").strip()
        if not href:
            raise ExtractionError(f"missing url for {title!r}")
        author = _clean(row.css_first(AUTHOR_SELECTOR))
        if not author:
            raise ExtractionError(f"missing author for {title!r}")
        url = relative_url(href, self.site_host)
        return Book(id=parse_book_id(url), title=title, author=author, url=url)


@dataclass
class DetailFields:
    """Outcome of applying the detail page rules to a book."""

    filled: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


class DetailParser:
    """Field extraction rules for a book detail page.

    Each field is independent: a missing node or unparsable value leaves the
    book's current value in place and is reported in ``DetailFields.failed``.
    """

    def apply(self, book: Book, html: str) -> DetailFields:
        if not html or not html.strip():
            raise ExtractionError(f"empty detail document for book {book.id}")
        parser = HTMLParser(html)
        outcome = DetailFields()
        rules: list[tuple[str, str, Callable[[Node], None]]] = [
            ("title", DETAIL_TITLE, lambda node: self._set_text(book, "title", node)),
            ("author", DETAIL_AUTHOR, lambda node: self._set_text(book, "author", node)),
            (
                "rating_avg",
                DETAIL_RATING_AVG,
                lambda node: setattr(book.rating, "avg", parse_rating_avg(node.text())),
            ),
            (
                "rating_count",
                DETAIL_RATING_COUNT,
                lambda node: setattr(book.rating, "count", parse_rating_count(node.text())),
            ),
            (
                "publisher_year",
                DETAIL_PUBLICATION,
                lambda node: setattr(book, "publisher_year", parse_publication_year(node.text())),
            ),
            ("description", DETAIL_DESCRIPTION, lambda node: self._set_text(book, "description", node)),
            (
                "page_count",
                DETAIL_PAGES,
                lambda node: setattr(book, "page_count", parse_page_count(node.text())),
            ),
            ("poster_url", DETAIL_POSTER, lambda node: self._set_attr(book, "poster_url", node, "src")),
        ]
        for name, selector, apply_rule in rules:
            node = parser.css_first(selector)
            if node is None:
                outcome.failed[name] = "missing"
                continue
            try:
                apply_rule(node)
            except (ValueError, IndexError) as exc:
                outcome.failed[name] = str(exc) or exc.__class__.__name__
            else:
                outcome.filled.append(name)
        if not outcome.filled:
            raise ExtractionError(f"no detail fields found for book {book.id}")
        return outcome

    @staticmethod
    def _set_text(book: Book, attribute: str, node: Node) -> None:
        value = _clean(node)
        if not value:
            raise ValueError("empty text")
        setattr(book, attribute, value)

    @staticmethod
    def _set_attr(book: Book, attribute: str, node: Node, name: str) -> None:
        value = (node.attributes.get(name) or "").strip()
        if not value:
            raise ValueError(f"missing {name} attribute")
        setattr(book, attribute, value)


__all__ = [
    "CandidateExtractor",
    "DetailFields",
    "DetailParser",
    "parse_book_id",
    "parse_page_count",
    "parse_publication_year",
    "parse_rating_avg",
    "parse_rating_count",
    "relative_url",
]
