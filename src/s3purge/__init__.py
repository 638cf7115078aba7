"""S3 Purge - concurrent, regex-driven bulk deletion for object-storage buckets."""

from __future__ import annotations

from .deletion import run_deletion
from .exceptions import (
    ConfigurationError,
    DeleteError,
    PatternCompileError,
    S3PurgeError,
    ShardListError,
)
from .filtering import compile_patterns, filter_candidates, parse_csv
from .listing import ListingCounter, ListingResult, run_listing
from .pipeline import PurgePipeline
from .settings import PurgeSettings
from .shards import DEFAULT_SHARDS, plan_shards
from .store import BucketStore
from .types import (
    CandidateSet,
    ObjectRecord,
    PipelineState,
    PoolOutcome,
    ResultSet,
    RunSummary,
    WorkerOutcome,
)
from .workqueue import CLOSED, QueueClosedError, WorkQueue

__all__ = [
    # Main classes
    "PurgePipeline",
    "BucketStore",
    "PurgeSettings",
    # Stages
    "plan_shards",
    "run_listing",
    "compile_patterns",
    "filter_candidates",
    "run_deletion",
    "DEFAULT_SHARDS",
    # Types
    "ObjectRecord",
    "ResultSet",
    "CandidateSet",
    "RunSummary",
    "WorkerOutcome",
    "PoolOutcome",
    "PipelineState",
    "ListingCounter",
    "ListingResult",
    # Work queue
    "WorkQueue",
    "CLOSED",
    "QueueClosedError",
    # Exceptions
    "S3PurgeError",
    "ConfigurationError",
    "ShardListError",
    "PatternCompileError",
    "DeleteError",
    # Utils
    "parse_csv",
]
