from __future__ import annotations

import pytest

from book_finder import Book, BookOptions, Rating, SearchQuery, ValidationError


def test_search_query_strips_and_defaults() -> None:
    query = SearchQuery.build("  dune  ", 3)
    assert query.search_string == "dune"
    assert query.options == BookOptions()
    assert query.options.remove_dups is True


@pytest.mark.parametrize(("search", "limit"), [("", 1), ("\t", 1), ("dune", 0)])
def test_search_query_validation_error(search: str, limit: int) -> None:
    with pytest.raises(ValidationError) as excinfo:
        SearchQuery.build(search, limit)
    assert isinstance(excinfo.value, ValueError)


def test_book_invariants() -> None:
    with pytest.raises(ValueError):
        Book(id=0, title="t", author="a", url="/book/show/0")
    with pytest.raises(ValueError):
        Book(id=1, title="t", author="a", url="")


def test_snapshot_is_independent() -> None:
    original = Book(id=1, title="t", author="a", url="/book/show/1", rating=Rating(3, 4.5))
    copy = original.snapshot()
    copy.rating.count = 99
    copy.title = "changed"
    assert original.rating.count == 3
    assert original.title == "t"
    assert copy.to_dict()["rating"] == {"count": 99, "avg": 4.5}
