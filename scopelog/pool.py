"""Freelist of scratch objects reused across log calls."""

import threading
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


class Pool(Generic[T]):
    """
    A small thread-safe freelist.

    Objects are handed out by :meth:`acquire` and always reset before they go
    back, on normal exit and on error alike. Nothing handed out may be kept
    after the ``with`` block ends.

    Parameters
    - factory: builds a new object when the freelist is empty.
    - reset: clears an object before it is returned to the freelist.
    - max_size: objects beyond this many idle ones are dropped.
    """

    def __init__(self, factory: Callable[[], T], reset: Callable[[T], None], *, max_size: int = 16):
        self._factory = factory
        self._reset = reset
        self._max_size = max_size
        self._free: list[T] = []
        self._lock = threading.Lock()

    @contextmanager
    def acquire(self) -> Iterator[T]:
        with self._lock:
            obj = self._free.pop() if self._free else None
        if obj is None:
            obj = self._factory()
        try:
            yield obj
        finally:
            self._reset(obj)
            with self._lock:
                if len(self._free) < self._max_size:
                    self._free.append(obj)

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)


def _clear_dict(d: dict) -> None:
    d.clear()


record_pool: Pool[dict] = Pool(dict, _clear_dict)
