"""Filter stage: select listed objects whose key matches any pattern."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from .exceptions import PatternCompileError
from .observability import log_event
from .types import CandidateSet, ObjectRecord

logger = logging.getLogger(__name__)


def parse_csv(value: str | None) -> list[str]:
    """Split a comma-separated option into its non-blank, stripped parts."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def compile_patterns(
    patterns: Iterable[str],
    *,
    log: logging.Logger | None = None,
) -> tuple[list[re.Pattern[str]], list[PatternCompileError]]:
    """Compile filter patterns, dropping the ones that are not valid regexes.

    Returns
    -------
    tuple[list[re.Pattern[str]], list[PatternCompileError]]
        The compiled patterns, in input order, and one error per dropped pattern.
    """
    log = log or logger
    compiled: list[re.Pattern[str]] = []
    errors: list[PatternCompileError] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            error = PatternCompileError(pattern, exc)
            errors.append(error)
            log_event(log, "dropping invalid filter pattern", level=logging.WARNING, pattern=pattern, error=exc)
    return compiled, errors


def filter_candidates(
    records: Iterable[ObjectRecord],
    patterns: Sequence[re.Pattern[str]],
) -> CandidateSet:
    """Collect records whose key matches at least one pattern.

    Patterns use search semantics. A key is selected once no matter how many
    patterns match it, and duplicate listings of the same key collapse to the
    first record seen. No patterns selects nothing.
    """
    candidates = CandidateSet()
    if not patterns:
        return candidates
    for record in records:
        if record.key in candidates:
            continue
        if any(p.search(record.key) for p in patterns):
            candidates.add(record)
    return candidates
