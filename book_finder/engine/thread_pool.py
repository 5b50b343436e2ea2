"""Bounded worker pool used for the enrichment phase."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import BoundedSemaphore, Lock
from typing import Any, Callable, List, Optional, TypeVar

T = TypeVar("T")


class WorkerPool:
    """Thread pool with an explicit admission gate and completion tracking.

    ``submit`` blocks while ``size`` tasks are in flight. Each slot is released
    when its task returns or raises. ``drain`` waits for every submitted task.
    An optional ``should_admit`` check runs once a slot is held; when it says
    no, the slot is handed back and nothing is scheduled.
    """

    def __init__(self, size: int = 10, name: str = "enrich") -> None:
        if size < 1:
            raise ValueError("pool size must be >= 1")
        self.size = size
        self._slots = BoundedSemaphore(size)
        self._executor = ThreadPoolExecutor(max_workers=size, thread_name_prefix=f"book-finder-{name}")
        self._futures: List[Future[Any]] = []
        self._lock = Lock()

    def submit(
        self,
        fn: Callable[..., T],
        *args: Any,
        should_admit: Optional[Callable[[], bool]] = None,
    ) -> Optional[Future[T]]:
        self._slots.acquire()
        if should_admit is not None and not should_admit():
            self._slots.release()
            return None
        try:
            future = self._executor.submit(self._run, fn, args)
        except BaseException:
            self._slots.release()
            raise
        with self._lock:
            self._futures.append(future)
        return future

    def _run(self, fn: Callable[..., T], args: tuple[Any, ...]) -> T:
        try:
            return fn(*args)
        finally:
            self._slots.release()

    @property
    def submitted(self) -> int:
        with self._lock:
            return len(self._futures)

    def drain(self) -> None:
        with self._lock:
            pending = list(self._futures)
        wait(pending)

    def shutdown(self, wait_for_tasks: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_tasks)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.drain()
        self.shutdown()


__all__ = ["WorkerPool"]
