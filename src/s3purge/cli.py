"""Command line entry point: ``s3purge``."""

from __future__ import annotations

import logging
import sys
import threading

import click
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .filtering import parse_csv
from .logging_setup import LOG_LEVELS, configure_logging
from .observability import log_event
from .pipeline import PurgePipeline
from .settings import PROVIDER_ENDPOINTS, PurgeSettings
from .store import BucketStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_CANCELLED = 130


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--access-key", "-a", default=None, help="Access key (falls back to S3PURGE_ACCESS_KEY / AWS_ACCESS_KEY_ID).")
@click.option("--secret-key", "-s", default=None, help="Secret key (falls back to S3PURGE_SECRET_KEY / AWS_SECRET_ACCESS_KEY).")
@click.option("--bucket", "-b", required=True, help="Bucket to purge.")
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(sorted(LOG_LEVELS), case_sensitive=False),
    default="info",
    show_default=True,
)
@click.option("--multi-read/--no-multi-read", "-m", default=False, help="List shards in parallel.")
@click.option("--dry-run", "-d", is_flag=True, default=False, help="Only log what would be deleted.")
@click.option("--prefixes", "-p", default=None, help="Comma-separated listing prefixes.")
@click.option("--threads", "-t", type=click.IntRange(min=1), default=None, help="Worker count per pool [default: 4, or S3PURGE_THREADS].")
@click.option("--filters", "-f", default=None, help="Comma-separated regular expressions matched against keys.")
@click.option(
    "--provider",
    type=click.Choice(sorted(PROVIDER_ENDPOINTS), case_sensitive=False),
    default=None,
    help="Storage provider [default: aws, or S3PURGE_PROVIDER].",
)
@click.option("--region", default=None, help="Region, defaults per provider.")
@click.option("--endpoint-url", default=None, help="Explicit endpoint, overrides the provider endpoint.")
@click.option("--fail-fast", is_flag=True, default=False, help="Skip deletion if any shard failed to list.")
def main(
    access_key: str | None,
    secret_key: str | None,
    bucket: str,
    log_level: str,
    multi_read: bool,
    dry_run: bool,
    prefixes: str | None,
    threads: int | None,
    filters: str | None,
    provider: str | None,
    region: str | None,
    endpoint_url: str | None,
    fail_fast: bool,
) -> None:
    """Delete objects from BUCKET whose keys match any of the --filters patterns."""
    configure_logging(log_level)

    overrides = {
        "access_key": access_key,
        "secret_key": secret_key,
        "provider": provider,
        "region": region,
        "endpoint_url": endpoint_url,
        "threads": threads,
    }
    try:
        settings = PurgeSettings(**{k: v for k, v in overrides.items() if v is not None})
        store = BucketStore(settings, bucket)
    except (ValidationError, ConfigurationError) as exc:
        log_event(logger, "invalid configuration", level=logging.ERROR, error=exc)
        sys.exit(EXIT_CONFIG_ERROR)

    patterns = parse_csv(filters)

    cancel = threading.Event()
    pipeline = PurgePipeline(
        store,
        patterns=patterns,
        prefixes=parse_csv(prefixes),
        multi_read=multi_read,
        threads=settings.threads,
        dry_run=dry_run,
        fail_fast=fail_fast,
        cancel=cancel,
    )
    try:
        summary = pipeline.run()
    except KeyboardInterrupt:
        cancel.set()
        log_event(logger, "interrupted", level=logging.WARNING, state=pipeline.state.value)
        sys.exit(EXIT_CANCELLED)

    if summary.cancelled:
        sys.exit(EXIT_CANCELLED)
    if not summary.ok:
        log_event(
            logger,
            "run finished with failures",
            level=logging.ERROR,
            failed_deletes=summary.failed,
            failed_shards=len(summary.failed_shards),
        )
        sys.exit(EXIT_PARTIAL_FAILURE)
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
