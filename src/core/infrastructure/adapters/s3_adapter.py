"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
from typing import Any, Protocol

import boto3
from botocore.config import Config

from core.config import PhotoSettings, get_settings
from core.utils.constants import ENV_PHOTO_S3_BUCKET_NAME


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
        Metadata: Mapping[str, str],
    ) -> Any: ...

    def head_object(self, *, Bucket: str, Key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, Bucket: str, Key: str) -> Any: ...

    def copy_object(
        self,
        *,
        Bucket: str,
        Key: str,
        CopySource: Mapping[str, str],
    ) -> Any: ...

    def generate_presigned_url(
        self,
        ClientMethod: str,
        Params: Mapping[str, Any],
        ExpiresIn: int,
    ) -> str: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (gateway-facing)."""

    bucket: str

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str) -> None: ...

    def copy_object(self, *, source_key: str, destination_key: str) -> None: ...

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, settings: PhotoSettings | None = None) -> None:
        """Create S3 client from settings (environment by default)."""
        settings = settings or get_settings()
        if not settings.bucket_name:
            raise RuntimeError(f"{ENV_PHOTO_S3_BUCKET_NAME} environment variable is not set")

        self.bucket = settings.bucket_name
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=settings.aws_endpoint_url,
            region_name=settings.aws_region,
            config=Config(
                connect_timeout=settings.backend_timeout,
                read_timeout=settings.backend_timeout,
                retries={"max_attempts": 2, "mode": "standard"},
            ),
        )

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata,
        )

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object metadata from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.head_object(Bucket=self.bucket, Key=key)

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(Bucket=self.bucket, Key=key)

    def copy_object(self, *, source_key: str, destination_key: str) -> None:
        """Copy an object within the bucket.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.copy_object(
            Bucket=self.bucket,
            Key=destination_key,
            CopySource={"Bucket": self.bucket, "Key": source_key},
        )

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str:
        """Generate a pre-signed S3 URL."""
        return self._client.generate_presigned_url(
            ClientMethod=method,
            Params={**params, "Bucket": self.bucket},
            ExpiresIn=expires_in,
        )
