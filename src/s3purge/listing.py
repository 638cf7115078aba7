"""Listing pool: list every shard into a shared result set."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .exceptions import ShardListError
from .observability import log_event
from .pool import run_pool
from .types import ObjectRecord, PoolOutcome, ResultSet

logger = logging.getLogger(__name__)


class ListCapable(Protocol):
    """Protocol for stores that can list objects under a prefix."""

    def list_objects(self, prefix: str = "") -> Iterator[ObjectRecord]: ...


def shard_label(shard: str) -> str:
    return shard if shard else "<all>"


class ListingCounter:
    """Running total of listed objects, safe to update from many workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._by_shard: dict[str, int] = {}

    def add(self, shard: str, count: int) -> int:
        """Record *count* objects for *shard* and return the new total."""
        with self._lock:
            self._by_shard[shard] = self._by_shard.get(shard, 0) + count
            self._total += count
            return self._total

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    def by_shard(self) -> dict[str, int]:
        with self._lock:
            return dict(self._by_shard)


@dataclass
class ListingResult:
    """Everything the listing phase produced."""

    results: ResultSet
    counts_by_shard: dict[str, int]
    outcome: PoolOutcome = field(default_factory=PoolOutcome)

    @property
    def listed(self) -> int:
        return len(self.results)

    @property
    def failed_shards(self) -> list[str]:
        return [f.shard for f in self.outcome.failures if isinstance(f, ShardListError)]


def run_listing(
    store: ListCapable,
    shards: Sequence[str],
    *,
    threads: int = 4,
    multi_read: bool = True,
    cancel: threading.Event | None = None,
    log: logging.Logger | None = None,
) -> ListingResult:
    """List every shard and collect the objects into one :class:`ResultSet`.

    A shard whose listing fails keeps whatever it produced before the error;
    the failure is logged and reported in the outcome, and the worker goes on
    with its next shard.

    Parameters
    ----------
    store : ListCapable
        Store providing ``list_objects(prefix)``.
    shards : Sequence[str]
        Shard prefixes, as returned by :func:`s3purge.shards.plan_shards`.
    threads : int
        Maximum number of listing workers.
    multi_read : bool
        When False, shards are listed one after another on the calling thread.
    cancel : threading.Event | None
        Stops the listing between shards and between objects.
    log : logging.Logger | None
        Logger to use instead of the module logger.

    Returns
    -------
    ListingResult
    """
    log = log or logger
    cancel = cancel or threading.Event()
    results = ResultSet()
    counter = ListingCounter()

    def list_shard(worker_id: int, shard: str) -> None:
        count = 0
        try:
            for record in store.list_objects(shard):
                if cancel.is_set():
                    break
                results.add(record)
                count += 1
        except Exception as exc:
            log_event(
                log,
                "shard listing failed",
                level=logging.ERROR,
                shard=shard_label(shard),
                worker=worker_id,
                collected=count,
                error=exc,
            )
            raise ShardListError(shard, exc) from exc
        finally:
            total = counter.add(shard, count)
        log_event(log, "shard listed", level=logging.DEBUG, shard=shard_label(shard), worker=worker_id, objects=count, total=total)

    outcome = run_pool(
        shards,
        list_shard,
        threads=threads,
        name="s3purge-list",
        cancel=cancel,
        sequential=not multi_read,
    )
    return ListingResult(results=results, counts_by_shard=counter.by_shard(), outcome=outcome)
