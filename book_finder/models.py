"""Book records and search query models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError


@dataclass(slots=True)
class Rating:
    count: int = 0
    avg: float = 0.0


@dataclass(slots=True)
class Book:
    """A catalog entry.

    Created as a stub (id, title, author, url) from a search row, then filled
    in place exactly once from the detail page.
    """

    id: int
    title: str
    author: str
    url: str
    rating: Rating = field(default_factory=Rating)
    poster_url: str = ""
    publisher_year: int = 0
    description: str = ""
    page_count: int = 0

    def __post_init__(self) -> None:
        if self.id <= 0:
            raise ValueError("Book id must be positive")
        if not self.url:
            raise ValueError("Book url cannot be empty")

    def snapshot(self) -> "Book":
        """Return an independent copy, including the nested rating."""

        return Book(
            id=self.id,
            title=self.title,
            author=self.author,
            url=self.url,
            rating=Rating(self.rating.count, self.rating.avg),
            poster_url=self.poster_url,
            publisher_year=self.publisher_year,
            description=self.description,
            page_count=self.page_count,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BookOptions(BaseModel):
    """Quality gates applied after enrichment."""

    model_config = ConfigDict(frozen=True)

    min_ratings: int = 0
    min_rating_avg: float = 0.0
    require_author: bool = False
    remove_dups: bool = True


class SearchQuery(BaseModel):
    """One search invocation; read-only for the duration of a run."""

    model_config = ConfigDict(frozen=True)

    search_string: str
    limit: int = Field(gt=0)
    options: BookOptions = Field(default_factory=BookOptions)

    @field_validator("search_string")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("search string cannot be empty")
        return value

    @classmethod
    def build(
        cls, search_string: str, limit: int, options: BookOptions | None = None
    ) -> "SearchQuery":
        """Validate input and translate pydantic errors into ``ValidationError``."""

        try:
            return cls(
                search_string=search_string,
                limit=limit,
                options=options or BookOptions(),
            )
        except PydanticValidationError as exc:
            messages = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise ValidationError(messages) from exc


__all__ = ["Book", "BookOptions", "Rating", "SearchQuery"]
