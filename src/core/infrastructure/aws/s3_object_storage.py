"""S3-backed implementation of ObjectStorageGateway."""

import os
from datetime import datetime
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.config import PhotoSettings, get_settings
from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import (
    BackendUnavailableError,
    NotFoundError,
    StorageWriteFailedError,
)
from core.models.storage import ObjectMetadata
from core.repositories.storage_repository import ObjectStorageGateway
from core.utils.constants import ENV_APP_RUNTIME, LOCALHOST_URL, LOCALSTACK_URL

logger = Logger(UTC=True)

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "NotFound", "404"})


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ObjectStorage(ObjectStorageGateway):
    """Object storage implementation backed by Amazon S3.

    All boto3 errors are caught and translated into domain errors.
    Raw backend messages are logged, never propagated.
    """

    def __init__(
        self,
        adapter: S3AdapterProtocol | None = None,
        settings: PhotoSettings | None = None,
    ) -> None:
        """Create storage using the provided S3 adapter."""
        self._settings = settings or get_settings()
        self._s3: S3AdapterProtocol = adapter or S3Adapter(self._settings)

    def issue_upload_url(self, *, key: str, content_type: str, expires_in: int) -> str:
        """Generate a pre-signed PUT URL for a direct client upload."""
        return self._presign(
            method="put_object",
            params={"Key": key, "ContentType": content_type},
            key=key,
            expires_in=expires_in,
        )

    def issue_download_url(self, *, key: str, expires_in: int) -> str:
        """Generate a pre-signed GET URL for reading an object."""
        return self._presign(
            method="get_object",
            params={"Key": key},
            key=key,
            expires_in=expires_in,
        )

    def put(self, *, key: str, body: bytes, content_type: str) -> None:
        """Upload bytes to S3 under `key`."""
        logger.debug("Uploading object", extra={"key": key, "size": len(body)})

        try:
            self._s3.put_object(key=key, body=body, content_type=content_type, metadata={})
        except ClientError as exc:
            logger.error(
                "S3 upload failed",
                extra={"key": key, "error_code": _error_code(exc)},
            )
            raise StorageWriteFailedError(
                message="Unable to store photo at this time",
                details={"key": key},
            ) from exc
        except BotoCoreError as exc:
            logger.error("S3 unreachable during upload", extra={"key": key})
            raise BackendUnavailableError(
                message="Photo storage is temporarily unavailable",
                details={"key": key},
            ) from exc

        logger.info("Object uploaded", extra={"key": key})

    def delete(self, *, key: str) -> None:
        """Delete an object; a missing key counts as already deleted."""
        logger.debug("Deleting object", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                logger.info("Object already absent", extra={"key": key})
                return

            logger.error(
                "S3 deletion failed",
                extra={"key": key, "error_code": _error_code(exc)},
            )
            raise StorageWriteFailedError(
                message="Unable to delete photo object at this time",
                details={"key": key},
            ) from exc
        except BotoCoreError as exc:
            logger.error("S3 unreachable during delete", extra={"key": key})
            raise BackendUnavailableError(
                message="Photo storage is temporarily unavailable",
                details={"key": key},
            ) from exc

        logger.info("Object deleted", extra={"key": key})

    def exists(self, *, key: str) -> bool:
        try:
            self._s3.head_object(key=key)
            return True
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                return False
            logger.error("S3 head_object failed", extra={"key": key})
            raise BackendUnavailableError(
                message="Photo storage is temporarily unavailable",
                details={"key": key},
            ) from exc
        except BotoCoreError as exc:
            raise BackendUnavailableError(
                message="Photo storage is temporarily unavailable",
                details={"key": key},
            ) from exc

    def copy(self, *, source_key: str, destination_key: str) -> None:
        """Copy an object server-side within the bucket."""
        details = {"source_key": source_key, "destination_key": destination_key}

        try:
            self._s3.copy_object(source_key=source_key, destination_key=destination_key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                raise NotFoundError(message="Source object not found", details=details) from exc

            logger.error("S3 copy failed", extra=details)
            raise StorageWriteFailedError(
                message="Unable to copy photo object at this time",
                details=details,
            ) from exc
        except BotoCoreError as exc:
            raise BackendUnavailableError(
                message="Photo storage is temporarily unavailable",
                details=details,
            ) from exc

        logger.info("Object copied", extra=details)

    def stat(self, *, key: str) -> ObjectMetadata:
        try:
            response = self._s3.head_object(key=key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                raise NotFoundError(message="Object not found", details={"key": key}) from exc
            raise BackendUnavailableError(
                message="Photo storage is temporarily unavailable",
                details={"key": key},
            ) from exc
        except BotoCoreError as exc:
            raise BackendUnavailableError(
                message="Photo storage is temporarily unavailable",
                details={"key": key},
            ) from exc

        last_modified = response.get("LastModified")
        etag = response.get("ETag")

        return ObjectMetadata(
            key=key,
            size=int(response.get("ContentLength", 0)),
            content_type=response.get("ContentType"),
            etag=etag.strip('"') if isinstance(etag, str) else None,
            last_modified=last_modified.isoformat() if isinstance(last_modified, datetime) else None,
        )

    def public_url(self, key: str) -> str:
        if self._settings.public_base_url:
            return f"{self._settings.public_base_url}/{key}"
        return f"https://{self._s3.bucket}.s3.{self._settings.aws_region}.amazonaws.com/{key}"

    def _presign(
        self,
        *,
        method: str,
        params: dict[str, Any],
        key: str,
        expires_in: int,
    ) -> str:
        logger.debug(
            "Generating pre-signed S3 URL",
            extra={"key": key, "method": method, "expires_in": expires_in},
        )

        try:
            url = self._s3.generate_presigned_url(
                method=method,
                params=params,
                expires_in=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to generate pre-signed URL", extra={"key": key, "method": method})
            raise BackendUnavailableError(
                message="Unable to generate photo transfer URL",
                details={"key": key},
            ) from exc

        if os.getenv(ENV_APP_RUNTIME) == "localstack":
            # internal LocalStack hostname is not reachable from the host machine
            url = url.replace(LOCALSTACK_URL, LOCALHOST_URL, 1)

        return url
