"""Concurrency throttling helpers."""

from __future__ import annotations

import threading


class PermitPool:
    """A counting pool of worker permits.

    ``acquire`` blocks until a permit is free; every acquire must be paired
    with exactly one ``release``. The pool also records how many permits are
    held right now and the highest number ever held at once.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("size must be >= 1")
        self.size = size
        self._sem = threading.BoundedSemaphore(size)
        self._lock = threading.Lock()
        self._active = 0
        self._peak = 0

    def acquire(self) -> None:
        self._sem.acquire()
        with self._lock:
            self._active += 1
            self._peak = max(self._peak, self._active)

    def release(self) -> None:
        with self._lock:
            if self._active == 0:
                raise ValueError("release() without a matching acquire()")
            self._active -= 1
        self._sem.release()

    @property
    def active(self) -> int:
        return self._active

    @property
    def peak(self) -> int:
        return self._peak

    def __enter__(self) -> PermitPool:
        self.acquire()
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()
