"""Pydantic models describing book_finder runtime configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import BookOptions


class FinderConfig(BaseModel):
    """Site endpoints, transport settings and admission policy."""

    base_url: str = "https://www.goodreads.com"
    search_path: str = "/search"
    search_param: str = "q"
    user_agent_list: list[str] | Path | None = None
    request_timeout: float = 15.0
    pool_size: int = 10
    fetch_multiplier: int = 2
    # Stricter quality gates drop more candidates, so more are admitted.
    strict_fetch_multiplier: int = 4
    strict_min_ratings: int = 100
    strict_min_rating_avg: float = 4.0
    default_options: BookOptions = Field(default_factory=BookOptions)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return value

    @field_validator("search_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        value = value.strip()
        return value if value.startswith("/") else f"/{value}"

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout must be > 0")
        return value

    @field_validator("pool_size", "fetch_multiplier", "strict_fetch_multiplier")
    @classmethod
    def _positive_int(cls, value: int) -> int:
        if value < 1:
            raise ValueError("value must be >= 1")
        return value

    @model_validator(mode="after")
    def _apply_user_agents(self) -> "FinderConfig":
        if isinstance(self.user_agent_list, Path):
            if not self.user_agent_list.exists():
                raise ValueError(f"UA file not found: {self.user_agent_list}")
            content = self.user_agent_list.read_text(encoding="utf-8").splitlines()
            self.user_agent_list = [line.strip() for line in content if line.strip()]
        return self

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{self.search_path}"

    def multiplier_for(self, options: BookOptions) -> int:
        if (
            options.min_ratings > self.strict_min_ratings
            or options.min_rating_avg > self.strict_min_rating_avg
        ):
            return self.strict_fetch_multiplier
        return self.fetch_multiplier

    def merged(self, **overrides: Any) -> "FinderConfig":
        """Return a copy with non-``None`` overrides applied and re-validated."""

        payload = self.model_dump()
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return FinderConfig.model_validate(payload)


__all__ = ["FinderConfig"]
