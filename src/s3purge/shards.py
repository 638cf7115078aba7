"""Shard planning for the listing phase."""

from __future__ import annotations

from collections.abc import Iterable

# One shard per printable ASCII character, "!" (33) through "~" (126).
DEFAULT_SHARDS: tuple[str, ...] = tuple(chr(code) for code in range(33, 127))


def plan_shards(prefixes: Iterable[str] | None, multi_read: bool) -> tuple[str, ...]:
    """Compute the listing shards for a run.

    Parameters
    ----------
    prefixes : Iterable[str] | None
        Explicit prefixes given by the caller. Blank entries are ignored.
    multi_read : bool
        Whether listing is spread over a worker pool.

    Returns
    -------
    tuple[str, ...]
        Unique shard prefixes in first-seen order. ``("",)`` stands for the
        whole bucket.
    """
    explicit = tuple(dict.fromkeys(p for p in (prefixes or ()) if p))
    if explicit:
        return explicit
    if multi_read:
        return DEFAULT_SHARDS
    return ("",)
