"""Shared fixtures: an in-memory store standing in for a bucket."""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import Iterable, Iterator

import pytest

from s3purge.types import ObjectRecord


class FakeStore:
    """In-memory bucket with the listing/delete surface of ``BucketStore``.

    ``fail_prefixes`` maps a shard prefix to the number of objects it yields
    before raising; ``fail_keys`` are keys whose delete raises.
    """

    def __init__(
        self,
        keys: Iterable[str],
        *,
        fail_prefixes: dict[str, int] | None = None,
        fail_keys: Iterable[str] = (),
    ) -> None:
        self.keys = sorted(keys)
        self.fail_prefixes = dict(fail_prefixes or {})
        self.fail_keys = set(fail_keys)
        self.deleted: Counter[str] = Counter()
        self.list_calls: list[str] = []
        self._lock = threading.Lock()

    def list_objects(self, prefix: str = "") -> Iterator[ObjectRecord]:
        with self._lock:
            self.list_calls.append(prefix)
        limit = self.fail_prefixes.get(prefix)
        yielded = 0
        for key in self.keys:
            if not key.startswith(prefix):
                continue
            if limit is not None and yielded >= limit:
                break
            yield ObjectRecord(key=key, store=self)
            yielded += 1
        if limit is not None:
            raise RuntimeError(f"listing {prefix!r} broke")

    def delete_key(self, key: str) -> None:
        if key in self.fail_keys:
            raise RuntimeError(f"delete {key!r} refused")
        with self._lock:
            self.deleted[key] += 1

    @property
    def delete_calls(self) -> int:
        with self._lock:
            return sum(self.deleted.values())


SCENARIO_KEYS = ["img-800x600.png", "img-1024x800.jpg", "readme.txt"]


@pytest.fixture
def scenario_store() -> FakeStore:
    return FakeStore(SCENARIO_KEYS)


@pytest.fixture
def make_store():
    def _make(keys: Iterable[str], **kwargs) -> FakeStore:
        return FakeStore(keys, **kwargs)

    return _make
