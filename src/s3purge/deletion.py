"""Deletion pool: delete (or report) every candidate exactly once."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from .exceptions import DeleteError
from .observability import log_event
from .pool import run_pool
from .types import ObjectRecord, PoolOutcome

logger = logging.getLogger(__name__)


def run_deletion(
    candidates: Sequence[ObjectRecord],
    *,
    threads: int = 4,
    dry_run: bool = False,
    cancel: threading.Event | None = None,
    log: logging.Logger | None = None,
) -> PoolOutcome:
    """Delete every candidate, or only log it when *dry_run* is set.

    This is the only place where the dry-run flag is consulted: with it set,
    no candidate's ``delete()`` is ever called and a ``would delete`` line is
    logged per object instead.

    Parameters
    ----------
    candidates : Sequence[ObjectRecord]
        Immutable snapshot of the candidate set.
    threads : int
        Maximum number of deletion workers.
    dry_run : bool
        Report instead of deleting.
    cancel : threading.Event | None
        Stops workers from taking further candidates.
    log : logging.Logger | None
        Logger to use instead of the module logger.

    Returns
    -------
    PoolOutcome
        Per-worker success counts and :class:`DeleteError` failures.
    """
    log = log or logger

    def delete_one(worker_id: int, record: ObjectRecord) -> None:
        if dry_run:
            log_event(log, "would delete", key=record.key, worker=worker_id)
            return
        try:
            record.delete()
        except Exception as exc:
            log_event(log, "delete failed", level=logging.ERROR, key=record.key, worker=worker_id, error=exc)
            raise DeleteError(record.key, worker_id, exc) from exc
        log_event(log, "deleted", key=record.key, worker=worker_id)

    return run_pool(
        candidates,
        delete_one,
        threads=threads,
        name="s3purge-delete",
        cancel=cancel,
    )
