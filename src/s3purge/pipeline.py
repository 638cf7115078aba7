"""PurgePipeline: plan, list, filter and delete, one stage after the other."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from .deletion import run_deletion
from .exceptions import ConfigurationError
from .filtering import compile_patterns, filter_candidates
from .listing import ListCapable, ListingResult, run_listing, shard_label
from .observability import log_event
from .shards import plan_shards
from .types import CandidateSet, PipelineState, RunSummary

logger = logging.getLogger(__name__)


class PurgePipeline:
    """Delete the objects of one bucket whose keys match any filter pattern.

    Stages run strictly in sequence; deletion only starts once the complete
    listing has been filtered. Dry-run changes nothing but the final stage.
    """

    def __init__(
        self,
        store: ListCapable,
        *,
        patterns: Iterable[str] = (),
        prefixes: Iterable[str] | None = None,
        multi_read: bool = False,
        threads: int = 4,
        dry_run: bool = False,
        fail_fast: bool = False,
        cancel: threading.Event | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the pipeline.

        Parameters
        ----------
        store : ListCapable
            Store the objects are listed from; listed records delete through it.
        patterns : Iterable[str]
            Regular expressions matched against object keys. An empty list selects nothing.
        prefixes : Iterable[str] | None
            Explicit listing prefixes.
        multi_read : bool
            List shards in parallel, defaulting to the printable-ASCII split.
        threads : int
            Worker count for both pools.
        dry_run : bool
            Log intended deletions without deleting.
        fail_fast : bool
            Skip deletion when any shard failed to list.
        cancel : threading.Event | None
            Shared cancel signal for both pools.
        log : logging.Logger | None
            Logger to use instead of the module logger.
        """
        if threads < 1:
            raise ConfigurationError("threads must be >= 1")
        self.store = store
        self.patterns = list(patterns)
        self.prefixes = list(prefixes or ())
        self.multi_read = multi_read
        self.threads = threads
        self.dry_run = dry_run
        self.fail_fast = fail_fast
        self.cancel = cancel or threading.Event()
        self.log = log or logger
        self.state = PipelineState.PLANNED
        self.listing: ListingResult | None = None
        self.candidates: CandidateSet | None = None

    def run(self) -> RunSummary:
        summary = RunSummary(dry_run=self.dry_run)

        shards = plan_shards(self.prefixes, self.multi_read)
        log_event(self.log, "planned shards", shards=len(shards), multi_read=self.multi_read, threads=self.threads)

        self.listing = run_listing(
            self.store,
            shards,
            threads=self.threads,
            multi_read=self.multi_read,
            cancel=self.cancel,
            log=self.log,
        )
        self.state = PipelineState.LISTED
        summary.listed = self.listing.listed
        summary.failed_shards = self.listing.failed_shards
        log_event(self.log, "listing complete", listed=summary.listed, failed_shards=len(summary.failed_shards) or None)

        if self.cancel.is_set():
            summary.cancelled = True
            return self._finish(summary)

        if not self.patterns:
            log_event(self.log, "no filter patterns given, nothing will be deleted", level=logging.WARNING)
        compiled, _ = compile_patterns(self.patterns, log=self.log)
        self.candidates = filter_candidates(self.listing.results, compiled)
        self.state = PipelineState.FILTERED
        summary.matched = len(self.candidates)
        log_event(self.log, "filter complete", matched=summary.matched, patterns=len(compiled))

        if self.fail_fast and summary.failed_shards:
            log_event(
                self.log,
                "skipping deletion after listing failures",
                level=logging.ERROR,
                failed_shards=",".join(shard_label(s) for s in summary.failed_shards),
            )
            summary.aborted = True
            return self._finish(summary)

        snapshot = self.candidates.snapshot()
        if self.log.isEnabledFor(logging.DEBUG):
            for record in snapshot:
                log_event(self.log, "candidate", level=logging.DEBUG, key=record.key, size=record.size)

        outcome = run_deletion(
            snapshot,
            threads=self.threads,
            dry_run=self.dry_run,
            cancel=self.cancel,
            log=self.log,
        )
        self.state = PipelineState.DRY_RUN_REPORTED if self.dry_run else PipelineState.DELETED
        summary.processed = outcome.succeeded
        summary.failed = len(outcome.failures)
        summary.cancelled = outcome.cancelled
        log_event(
            self.log,
            "dry run complete" if self.dry_run else "deletion complete",
            processed=summary.processed,
            failed=summary.failed or None,
        )
        return self._finish(summary)

    def _finish(self, summary: RunSummary) -> RunSummary:
        self.state = PipelineState.DONE
        log_event(
            self.log,
            "run finished",
            listed=summary.listed,
            matched=summary.matched,
            processed=summary.processed,
            dry_run=summary.dry_run,
            ok=summary.ok,
        )
        return summary
