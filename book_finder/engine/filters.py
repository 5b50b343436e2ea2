"""Post-enrichment quality gates."""

from __future__ import annotations

from ..models import Book, BookOptions

PLACEHOLDER_AUTHORS = frozenset({"", "Unknown", "Anonymous"})


class QualityFilter:
    """Predicate bundle over an enriched book; all active checks must pass."""

    def __init__(self, options: BookOptions) -> None:
        self.options = options

    def rejection_reason(self, book: Book) -> str | None:
        options = self.options
        if options.min_ratings > 0 and book.rating.count < options.min_ratings:
            return "min_ratings"
        if options.min_rating_avg > 0 and book.rating.avg < options.min_rating_avg:
            return "min_rating_avg"
        if options.require_author and book.author.strip() in PLACEHOLDER_AUTHORS:
            return "require_author"
        return None

    def accepts(self, book: Book) -> bool:
        return self.rejection_reason(book) is None

    __call__ = accepts


__all__ = ["PLACEHOLDER_AUTHORS", "QualityFilter"]
