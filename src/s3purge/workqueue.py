"""Closeable blocking work queue shared by the worker pools."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable
from typing import Generic, TypeVar

T = TypeVar("T")


class _Closed:
    """Sentinel returned by :meth:`WorkQueue.get` once the queue is drained."""

    _instance: _Closed | None = None

    def __new__(cls) -> _Closed:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CLOSED"

    def __bool__(self) -> bool:
        return False


CLOSED: _Closed = _Closed()


class QueueClosedError(RuntimeError):
    """Raised when putting an item into a closed queue."""
    pass


class WorkQueue(Generic[T]):
    """Multi-producer/multi-consumer queue with an explicit close.

    ``get`` blocks until an item is available or the queue is closed and
    empty, in which case it returns :data:`CLOSED`. Consumers loop until they
    see the sentinel; the "drained" decision is taken under the same lock as
    the dequeue, so no consumer can observe a non-empty queue and then block
    on an empty one.
    """

    def __init__(self, items: Iterable[T] | None = None, *, close: bool = False) -> None:
        """Initialize the queue.

        Parameters
        ----------
        items : Iterable[T] | None, optional
            Items to enqueue up front.
        close : bool, optional
            Close the queue right after enqueuing *items*. Defaults to False.
        """
        self._items: deque[T] = deque(items or ())
        self._closed = False
        self._cond = threading.Condition()
        if close:
            self.close()

    def put(self, item: T) -> None:
        with self._cond:
            if self._closed:
                raise QueueClosedError("put() on a closed WorkQueue")
            self._items.append(item)
            self._cond.notify()

    def close(self) -> None:
        """Stop accepting items and wake every waiting consumer."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def get(self, timeout: float | None = None) -> T | _Closed:
        """Take the next item, or return :data:`CLOSED` once drained.

        Parameters
        ----------
        timeout : float | None, optional
            Seconds to wait. When it elapses while the queue is still open,
            :data:`CLOSED` is not returned; ``TimeoutError`` is raised instead.

        Returns
        -------
        T | _Closed
        """
        with self._cond:
            ready = self._cond.wait_for(lambda: self._items or self._closed, timeout=timeout)
            if not ready:
                raise TimeoutError("WorkQueue.get() timed out")
            if self._items:
                return self._items.popleft()
            return CLOSED

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)
