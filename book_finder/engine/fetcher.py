"""HTTP fetching capability used for search and detail pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol

import httpx
import structlog

from ..config import FinderConfig
from ..errors import FetchError
from ..infra import UserAgentPool


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)


class NetworkFetcher(Protocol):
    """Anything able to GET a URL and return its body.

    Implementations raise ``FetchError`` for transport failures and non-2xx
    statuses, and release the underlying response before returning.
    """

    def fetch(self, url: str) -> FetchResponse: ...


class HttpFetcher:
    """httpx-backed fetcher with a per-call deadline and identifying User-Agent."""

    def __init__(
        self,
        config: FinderConfig,
        ua_pool: UserAgentPool | None = None,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.ua_pool = ua_pool or UserAgentPool(
            config.user_agent_list if isinstance(config.user_agent_list, list) else None
        )
        self.logger = logger or structlog.get_logger("book_finder.fetcher")
        self._client = client or httpx.Client(
            base_url=config.base_url,
            follow_redirects=True,
            timeout=config.request_timeout,
        )

    def fetch(self, url: str) -> FetchResponse:
        headers = {"User-Agent": self.ua_pool.get()}
        try:
            response = self._client.get(url, headers=headers, timeout=self.config.request_timeout)
        except httpx.HTTPError as exc:
            self.logger.warning("fetch_error", url=url, error=str(exc))
            raise FetchError(url, f"Request failed ({exc.__class__.__name__})") from exc
        if not response.is_success:
            self.logger.warning("fetch_status", url=url, status=response.status_code)
            raise FetchError(
                url, f"Unexpected status {response.status_code}", status_code=response.status_code
            )
        return FetchResponse(
            url=str(response.url),
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()


__all__ = ["FetchResponse", "HttpFetcher", "NetworkFetcher"]
