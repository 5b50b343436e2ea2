"""Result stream and early-stop collection."""

from __future__ import annotations

import queue
from threading import Event

from ..models import Book

_CLOSED = object()


class ResultStream:
    """Unordered, thread-safe channel of accepted books with a close marker."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._closed = Event()

    def publish(self, book: Book) -> None:
        self._queue.put(book)

    def close(self) -> None:
        if not self._closed.is_set():
            self._closed.set()
            self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __iter__(self):
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item


class ResultAggregator:
    """Collect up to ``limit`` books, returning as soon as the target is met.

    Work still in flight when the target is reached keeps running; its output
    stays in the stream and is never read.
    """

    def __init__(self, limit: int, stop_event: Event | None = None) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.limit = limit
        self.stop_event = stop_event or Event()

    def collect(self, stream: ResultStream) -> list[Book]:
        books: list[Book] = []
        for book in stream:
            books.append(book)
            if len(books) >= self.limit:
                self.stop_event.set()
                break
        return books


__all__ = ["ResultAggregator", "ResultStream"]
