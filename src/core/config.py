"""Runtime settings for the photo lifecycle service.

Settings are read once from the environment and cached. Every numeric
option must be positive and the content-type allow-list must not be empty.
"""

import os
from collections.abc import Mapping
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, field_validator

from core.utils.constants import (
    DEFAULT_ALLOWED_CONTENT_TYPES,
    DEFAULT_AWS_REGION,
    DEFAULT_BACKEND_TIMEOUT,
    DEFAULT_BACKGROUND_QUEUE_SIZE,
    DEFAULT_BACKGROUND_WORKERS,
    DEFAULT_DOWNLOAD_URL_TTL,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_PHOTOS_PER_OWNER,
    DEFAULT_UPLOAD_URL_TTL,
    ENV_ALLOWED_CONTENT_TYPES,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_BACKEND_TIMEOUT,
    ENV_BACKGROUND_QUEUE_SIZE,
    ENV_BACKGROUND_WORKERS,
    ENV_DOWNLOAD_URL_TTL,
    ENV_MAX_FILE_SIZE,
    ENV_MAX_PHOTOS_PER_OWNER,
    ENV_PHOTO_S3_BUCKET_NAME,
    ENV_PHOTO_TABLE_NAME,
    ENV_PUBLIC_BASE_URL,
    ENV_UPLOAD_URL_TTL,
)


class PhotoSettings(BaseModel):
    """Validated configuration surface of the service."""

    model_config = ConfigDict(frozen=True)

    bucket_name: str | None = Field(None, description="S3 bucket holding photo objects")
    table_name: str | None = Field(None, description="DynamoDB table holding photo records")
    aws_endpoint_url: str | None = Field(None, description="Endpoint override (LocalStack)")
    aws_region: str = DEFAULT_AWS_REGION

    max_file_size: PositiveInt = DEFAULT_MAX_FILE_SIZE
    allowed_content_types: tuple[str, ...] = DEFAULT_ALLOWED_CONTENT_TYPES
    max_photos_per_owner: PositiveInt = DEFAULT_MAX_PHOTOS_PER_OWNER
    upload_url_ttl: PositiveInt = DEFAULT_UPLOAD_URL_TTL
    download_url_ttl: PositiveInt = DEFAULT_DOWNLOAD_URL_TTL

    backend_timeout: PositiveFloat = DEFAULT_BACKEND_TIMEOUT
    background_workers: PositiveInt = DEFAULT_BACKGROUND_WORKERS
    background_queue_size: PositiveInt = DEFAULT_BACKGROUND_QUEUE_SIZE

    public_base_url: str | None = None

    @field_validator("allowed_content_types", mode="before")
    @classmethod
    def split_content_types(cls, value: object) -> object:
        """Accept a comma-separated string as well as a sequence."""
        if isinstance(value, str):
            value = [item.strip().lower() for item in value.split(",")]
        if isinstance(value, (list, tuple)):
            cleaned = tuple(dict.fromkeys(str(item).strip().lower() for item in value if str(item).strip()))
            if not cleaned:
                raise ValueError("allowed_content_types must not be empty")
            return cleaned
        return value

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        return value.rstrip("/") if value else None

    def is_content_type_allowed(self, content_type: str) -> bool:
        return content_type.strip().lower() in self.allowed_content_types

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PhotoSettings":
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        mapping = {
            "bucket_name": ENV_PHOTO_S3_BUCKET_NAME,
            "table_name": ENV_PHOTO_TABLE_NAME,
            "aws_endpoint_url": ENV_AWS_ENDPOINT_URL,
            "aws_region": ENV_AWS_REGION,
            "max_file_size": ENV_MAX_FILE_SIZE,
            "allowed_content_types": ENV_ALLOWED_CONTENT_TYPES,
            "max_photos_per_owner": ENV_MAX_PHOTOS_PER_OWNER,
            "upload_url_ttl": ENV_UPLOAD_URL_TTL,
            "download_url_ttl": ENV_DOWNLOAD_URL_TTL,
            "backend_timeout": ENV_BACKEND_TIMEOUT,
            "background_workers": ENV_BACKGROUND_WORKERS,
            "background_queue_size": ENV_BACKGROUND_QUEUE_SIZE,
            "public_base_url": ENV_PUBLIC_BASE_URL,
        }

        values = {field: env[name] for field, name in mapping.items() if env.get(name)}
        return cls.model_validate(values)


@lru_cache
def get_settings() -> PhotoSettings:
    return PhotoSettings.from_env()
