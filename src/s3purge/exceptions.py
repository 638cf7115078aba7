"""Domain-specific exceptions for s3purge."""

from __future__ import annotations


class S3PurgeError(Exception):
    """Base exception for s3purge errors."""
    pass


class ConfigurationError(S3PurgeError):
    """Raised when settings or run options are invalid."""
    pass


class ShardListError(S3PurgeError):
    """Raised when listing the objects of one shard fails."""
    def __init__(self, shard: str, cause: BaseException | None = None) -> None:
        self.shard = shard
        self.cause = cause
        super().__init__(f"Listing shard {shard!r} failed: {cause}")


class PatternCompileError(S3PurgeError):
    """Raised when a filter pattern is not a valid regular expression."""
    def __init__(self, pattern: str, cause: BaseException | None = None) -> None:
        self.pattern = pattern
        self.cause = cause
        super().__init__(f"Invalid filter pattern {pattern!r}: {cause}")


class DeleteError(S3PurgeError):
    """Raised when deleting a single object fails."""
    def __init__(self, key: str, worker_id: int | None = None, cause: BaseException | None = None) -> None:
        self.key = key
        self.worker_id = worker_id
        self.cause = cause
        super().__init__(f"Deleting {key!r} failed (worker {worker_id}): {cause}")
