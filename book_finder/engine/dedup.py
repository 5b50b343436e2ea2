"""Per-run identity deduplication."""

from __future__ import annotations

from threading import Lock


class Deduplicator:
    """Track book ids seen during one run."""

    def __init__(self) -> None:
        self._seen: set[int] = set()
        self._lock = Lock()

    def check_and_mark(self, book_id: int) -> bool:
        """Return ``True`` and mark ``book_id`` if it was not seen before."""

        with self._lock:
            if book_id in self._seen:
                return False
            self._seen.add(book_id)
            return True

    def __contains__(self, book_id: object) -> bool:
        with self._lock:
            return book_id in self._seen

    @property
    def seen(self) -> int:
        with self._lock:
            return len(self._seen)

    def reset(self) -> None:
        with self._lock:
            self._seen.clear()


__all__ = ["Deduplicator"]
