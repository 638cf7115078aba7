from __future__ import annotations

from typing import TYPE_CHECKING

from botocore.config import Config
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from botocore.client import BaseClient

# Endpoint templates per storage provider; ``None`` lets boto3 pick the AWS endpoint.
PROVIDER_ENDPOINTS: dict[str, str | None] = {
    "aws": None,
    "wasabi": "https://s3.{region}.wasabisys.com",
    "digitalocean": "https://{region}.digitaloceanspaces.com",
    "garage": "http://127.0.0.1:3900",
    "minio": "http://127.0.0.1:9000",
}

PROVIDER_DEFAULT_REGIONS: dict[str, str] = {
    "aws": "us-east-1",
    "wasabi": "us-east-1",
    "digitalocean": "nyc3",
    "garage": "garage",
    "minio": "us-east-1",
}


class PurgeSettings(BaseSettings):
    """Settings for the object-store client used by a purge run.

    You can adapt the following settings in your environment variables (or using an .env file):
    - S3PURGE_ACCESS_KEY (or AWS_ACCESS_KEY_ID): The access key for the S3 client
    - S3PURGE_SECRET_KEY (or AWS_SECRET_ACCESS_KEY): The secret key for the S3 client
    - S3PURGE_PROVIDER: One of aws, wasabi, digitalocean, garage, minio
    - S3PURGE_REGION: The region of the S3 server
    - S3PURGE_ENDPOINT_URL: Explicit endpoint, overrides the provider endpoint
    - S3PURGE_THREADS: Worker count for the listing and deletion pools

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="S3PURGE_",
        extra="ignore",
        populate_by_name=True,
    )

    # Credentials; when both are missing boto3 falls back to its default chain
    access_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("S3PURGE_ACCESS_KEY", "AWS_ACCESS_KEY_ID"),
    )
    secret_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("S3PURGE_SECRET_KEY", "AWS_SECRET_ACCESS_KEY"),
    )

    provider: str = "aws"
    region: str | None = None
    endpoint_url: str | None = None

    # Per-call limits on backend operations
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    max_attempts: int = Field(default=5, ge=1)

    threads: int = Field(default=4, ge=1)

    @field_validator("provider")
    @classmethod
    def _known_provider(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in PROVIDER_ENDPOINTS:
            raise ValueError(f"unknown provider {value!r}, expected one of {sorted(PROVIDER_ENDPOINTS)}")
        return value

    def resolved_region(self) -> str:
        return self.region or PROVIDER_DEFAULT_REGIONS[self.provider]

    def resolved_endpoint(self) -> str | None:
        """Endpoint URL for the configured provider, or the explicit override."""
        if self.endpoint_url:
            return self.endpoint_url
        template = PROVIDER_ENDPOINTS[self.provider]
        if template is None:
            return None
        return template.format(region=self.resolved_region())

    def client_config(self) -> Config:
        return Config(
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            retries={"max_attempts": self.max_attempts, "mode": "standard"},
            max_pool_connections=max(10, self.threads * 2),
        )

    def create_client(self) -> BaseClient:
        """Create a S3 client from the settings."""

        import boto3

        if bool(self.access_key) != bool(self.secret_key):
            raise ConfigurationError("access key and secret key must be given together")

        return boto3.client(
            "s3",
            endpoint_url=self.resolved_endpoint(),
            region_name=self.resolved_region(),
            aws_access_key_id=self.access_key,
            aws_secret_access_key=self.secret_key,
            config=self.client_config(),
        )
