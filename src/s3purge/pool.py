"""Bounded worker pool draining a :class:`WorkQueue`."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from .exceptions import ConfigurationError, DeleteError, ShardListError
from .types import PoolOutcome, WorkerOutcome
from .workqueue import CLOSED, WorkQueue

T = TypeVar("T")

# Handles one item; raises ShardListError or DeleteError to record a failure.
ItemHandler = Callable[[int, T], None]


def drain(
    worker_id: int,
    queue: WorkQueue[T],
    handle: ItemHandler,
    cancel: threading.Event,
) -> WorkerOutcome:
    """Process items from *queue* until it is closed and drained or *cancel* is set."""
    outcome = WorkerOutcome(worker_id=worker_id)
    while not cancel.is_set():
        item = queue.get()
        if item is CLOSED:
            break
        try:
            handle(worker_id, item)
        except (ShardListError, DeleteError) as exc:
            outcome.failures.append(exc)
        else:
            outcome.succeeded += 1
    return outcome


def run_pool(
    items: Sequence[T],
    handle: ItemHandler,
    *,
    threads: int,
    name: str,
    cancel: threading.Event | None = None,
    sequential: bool = False,
) -> PoolOutcome:
    """Run *handle* over every item with at most *threads* workers.

    Parameters
    ----------
    items : Sequence[T]
        Work items. Each one is handed to exactly one worker.
    handle : ItemHandler
        Called as ``handle(worker_id, item)``.
    threads : int
        Configured thread count. The pool never starts more workers than items.
    name : str
        Thread name prefix, used in log records.
    cancel : threading.Event | None
        When set, workers stop taking new items.
    sequential : bool
        Drain the queue on the calling thread instead of a pool.

    Returns
    -------
    PoolOutcome
        One :class:`WorkerOutcome` per worker, returned after all have joined.
    """
    if threads < 1:
        raise ConfigurationError("threads must be >= 1")
    cancel = cancel or threading.Event()
    queue: WorkQueue[T] = WorkQueue(items, close=True)

    if not items:
        return PoolOutcome()

    if sequential:
        outcome = drain(0, queue, handle, cancel)
        return PoolOutcome(workers=[outcome], cancelled=cancel.is_set())

    size = min(threads, len(items))
    with ThreadPoolExecutor(max_workers=size, thread_name_prefix=name) as executor:
        futures = [executor.submit(drain, worker_id, queue, handle, cancel) for worker_id in range(size)]
        try:
            workers = [future.result() for future in futures]
        except BaseException:
            # Let the remaining workers stop before the executor joins them.
            cancel.set()
            raise
    return PoolOutcome(workers=workers, cancelled=cancel.is_set())
