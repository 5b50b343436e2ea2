"""User-Agent selection for outgoing requests."""

from __future__ import annotations

import random
from typing import Iterable

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36 book-finder"
)


class UserAgentPool:
    """Pick one of the configured agents per request, or the built-in one."""

    def __init__(self, user_agents: Iterable[str] | None = None) -> None:
        # Fixed after construction, so worker threads can read it unlocked.
        self._agents = tuple(ua.strip() for ua in user_agents or () if ua.strip())

    def get(self) -> str:
        if not self._agents:
            return DEFAULT_USER_AGENT
        return random.choice(self._agents)


__all__ = ["DEFAULT_USER_AGENT", "UserAgentPool"]
