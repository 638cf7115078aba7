"""BucketStore: the listing and delete capability the purge pipeline consumes."""

from __future__ import annotations

from collections.abc import Iterator

from botocore.client import BaseClient

from .settings import PurgeSettings
from .types import ObjectRecord


class BucketStore:
    """Thin wrapper around a boto3 S3 client bound to one bucket.

    Every :class:`ObjectRecord` produced by :meth:`list_objects` keeps a
    reference back to the store, so deleting a record never needs the client
    or bucket passed around again.
    """

    def __init__(
        self,
        s3_client_or_settings: BaseClient | PurgeSettings,
        bucket: str,
        *,
        page_size: int = 1000,
    ) -> None:
        """Initialize bucket store.

        Parameters
        ----------
        s3_client_or_settings : BaseClient | PurgeSettings
            Boto3 S3 client or :class:`PurgeSettings` (which creates one).
        bucket : str
            Target S3 bucket.
        page_size : int
            Keys requested per ``list_objects_v2`` page (max 1000).
        """
        if isinstance(s3_client_or_settings, PurgeSettings):
            s3_client = s3_client_or_settings.create_client()
        elif not isinstance(s3_client_or_settings, BaseClient):
            raise ValueError("s3_client must be a boto3.client or PurgeSettings instance")
        else:
            s3_client = s3_client_or_settings

        if not bucket:
            raise ValueError("bucket must be a non-empty string")

        self.s3_client: BaseClient = s3_client
        self.bucket = bucket
        self.page_size = min(page_size, 1000)

    def __repr__(self) -> str:
        return f"BucketStore(bucket={self.bucket!r})"

    # ------------------------------------------------------------------ #
    #  List APIs                                                          #
    # ------------------------------------------------------------------ #

    def list_objects(self, prefix: str = "") -> Iterator[ObjectRecord]:
        """List every object under *prefix*, following pagination.

        Parameters
        ----------
        prefix : str
            S3 prefix. ``""`` lists the whole bucket.

        Yields
        ------
        ObjectRecord
        """
        paginator = self.s3_client.get_paginator("list_objects_v2")
        pages = paginator.paginate(
            Bucket=self.bucket,
            Prefix=prefix,
            PaginationConfig={"PageSize": self.page_size},
        )
        for page in pages:
            if "Contents" not in page:
                continue
            for obj in page["Contents"]:
                yield ObjectRecord(
                    key=obj["Key"],
                    store=self,
                    size=obj.get("Size"),
                    etag=obj.get("ETag"),
                )

    # ------------------------------------------------------------------ #
    #  Delete APIs                                                        #
    # ------------------------------------------------------------------ #

    def delete_key(self, key: str) -> None:
        """Delete a single object key.

        Parameters
        ----------
        key : str
            S3 object key.
        """
        self.s3_client.delete_object(Bucket=self.bucket, Key=key)
