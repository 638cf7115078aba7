"""Type definitions for s3purge."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Union

from .exceptions import DeleteError, ShardListError


class DeleteCapable(Protocol):
    """Protocol for anything that can delete an object by key."""

    def delete_key(self, key: str) -> None: ...


@dataclass(frozen=True)
class ObjectRecord:
    """A listed object, bound to the store that listed it."""

    key: str
    store: DeleteCapable = field(repr=False, compare=False)
    size: int | None = None
    etag: str | None = None

    def delete(self) -> None:
        """Delete this object through the store it was listed from."""
        self.store.delete_key(self.key)


class ResultSet:
    """Append-only, thread-safe multiset of listed objects.

    Records from overlapping shards are kept as-is; deduplication happens
    when candidates are selected.
    """

    def __init__(self) -> None:
        self._records: list[ObjectRecord] = []
        self._lock = threading.Lock()

    def add(self, record: ObjectRecord) -> None:
        with self._lock:
            self._records.append(record)

    def snapshot(self) -> tuple[ObjectRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ObjectRecord]:
        return iter(self.snapshot())


class CandidateSet:
    """Objects selected for deletion, unique by key.

    Adding a record whose key is already present is a no-op, so an object
    matching several patterns is still processed only once.
    """

    def __init__(self) -> None:
        self._by_key: dict[str, ObjectRecord] = {}

    def add(self, record: ObjectRecord) -> bool:
        """Add *record* unless its key is present. Returns True if it was added."""
        if record.key in self._by_key:
            return False
        self._by_key[record.key] = record
        return True

    def keys(self) -> list[str]:
        return list(self._by_key)

    def snapshot(self) -> tuple[ObjectRecord, ...]:
        """Immutable view in insertion order."""
        return tuple(self._by_key.values())

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)

    def __iter__(self) -> Iterator[ObjectRecord]:
        return iter(self.snapshot())


Failure = Union[ShardListError, DeleteError]


@dataclass
class WorkerOutcome:
    """What a single pool worker reports back when it exits."""

    worker_id: int
    succeeded: int = 0
    failures: list[Failure] = field(default_factory=list)


@dataclass
class PoolOutcome:
    """Aggregate of every worker outcome in one pool phase."""

    workers: list[WorkerOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> int:
        return sum(w.succeeded for w in self.workers)

    @property
    def failures(self) -> list[Failure]:
        return [f for w in self.workers for f in w.failures]

    @property
    def ok(self) -> bool:
        return not self.failures


class PipelineState(str, Enum):
    """Stages of a purge run, in the order they are entered."""

    PLANNED = "planned"
    LISTED = "listed"
    FILTERED = "filtered"
    DELETED = "deleted"
    DRY_RUN_REPORTED = "dry_run_reported"
    DONE = "done"


@dataclass
class RunSummary:
    """Counts reported at the end of a purge run.

    ``processed`` is the number of objects deleted, or that would have been
    deleted when ``dry_run`` is set.
    """

    listed: int = 0
    matched: int = 0
    processed: int = 0
    failed: int = 0
    failed_shards: list[str] = field(default_factory=list)
    dry_run: bool = False
    aborted: bool = False
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        """True when no shard listing and no delete failed."""
        return not self.failed and not self.failed_shards and not self.aborted
