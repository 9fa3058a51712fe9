"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from http import HTTPStatus
from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Client-correctable errors
ERROR_CODE_INVALID_INPUT = "INVALID_INPUT"

# Business rules
ERROR_CODE_QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
ERROR_CODE_NOT_APPROVED = "NOT_APPROVED"
ERROR_CODE_LAST_PHOTO_UNDELETABLE = "LAST_PHOTO_UNDELETABLE"
ERROR_CODE_INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"

# Visibility
ERROR_CODE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_ACCESS_DENIED = "ACCESS_DENIED"

# Pipeline / infrastructure
ERROR_CODE_PROCESSING_FAILED = "PROCESSING_FAILED"
ERROR_CODE_STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"
ERROR_CODE_RECORD_CREATION_FAILED = "RECORD_CREATION_FAILED"
ERROR_CODE_INVARIANT_UPDATE_FAILED = "INVARIANT_UPDATE_FAILED"
ERROR_CODE_BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"


ERROR_STATUS_MAP: Final[dict[str, HTTPStatus]] = {
    ERROR_CODE_INVALID_INPUT: HTTPStatus.BAD_REQUEST,
    ERROR_CODE_QUOTA_EXCEEDED: HTTPStatus.CONFLICT,
    ERROR_CODE_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ERROR_CODE_ACCESS_DENIED: HTTPStatus.FORBIDDEN,
    ERROR_CODE_NOT_APPROVED: HTTPStatus.CONFLICT,
    ERROR_CODE_LAST_PHOTO_UNDELETABLE: HTTPStatus.CONFLICT,
    ERROR_CODE_INVALID_STATE_TRANSITION: HTTPStatus.CONFLICT,
    ERROR_CODE_PROCESSING_FAILED: HTTPStatus.UNPROCESSABLE_ENTITY,
    ERROR_CODE_STORAGE_WRITE_FAILED: HTTPStatus.INTERNAL_SERVER_ERROR,
    ERROR_CODE_RECORD_CREATION_FAILED: HTTPStatus.INTERNAL_SERVER_ERROR,
    ERROR_CODE_INVARIANT_UPDATE_FAILED: HTTPStatus.INTERNAL_SERVER_ERROR,
    ERROR_CODE_BACKEND_UNAVAILABLE: HTTPStatus.SERVICE_UNAVAILABLE,
}

# Errors whose details are safe to echo back to the caller
CLIENT_ERROR_CODES: Final[frozenset[str]] = frozenset(
    {
        ERROR_CODE_INVALID_INPUT,
        ERROR_CODE_QUOTA_EXCEEDED,
        ERROR_CODE_NOT_APPROVED,
        ERROR_CODE_LAST_PHOTO_UNDELETABLE,
        ERROR_CODE_INVALID_STATE_TRANSITION,
    }
)


# ============================================================================
# File Upload Constraints
# ============================================================================

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB in bytes
DEFAULT_MAX_PHOTOS_PER_OWNER = 6

MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/webp": ("webp",),
}

DEFAULT_ALLOWED_CONTENT_TYPES: Final[tuple[str, ...]] = (
    "image/jpeg",
    "image/png",
    "image/webp",
)


# ============================================================================
# Transfer URL Lifetimes (seconds)
# ============================================================================

DEFAULT_UPLOAD_URL_TTL = 15 * 60
DEFAULT_DOWNLOAD_URL_TTL = 60 * 60


# ============================================================================
# Image Processing Options
# ============================================================================

PROCESS_RESIZE_WIDTH = 1200
PROCESS_RESIZE_HEIGHT = 1200
PROCESS_QUALITY = 85
PROCESS_THUMB_WIDTH = 300
PROCESS_THUMB_HEIGHT = 300

# outside these bounds an image is accepted with a warning
IMAGE_MIN_DIMENSION = 100
IMAGE_MAX_DIMENSION = 4096
IMAGE_MIN_ASPECT_RATIO = 0.3
IMAGE_MAX_ASPECT_RATIO = 3.0


# ============================================================================
# Storage Layout
# ============================================================================

PHOTO_KEY_PREFIX = "photos"
PROCESSED_FOLDER = "processed"
THUMBNAIL_FOLDER = "thumbnails"
TEMP_FOLDER = "temp"


# ============================================================================
# Photo Record Store (DynamoDB)
# ============================================================================

OWNER_CREATED_INDEX = "owner-created-index"
OWNER_LEDGER_PREFIX = "owner#"
LEDGER_MAX_RETRIES = 3


# ============================================================================
# Identifier Constraints
# ============================================================================

OWNER_ID_PATTERN = r"^[a-zA-Z0-9_-]+$"
REVIEW_REASON_MAX_LENGTH = 500


# ============================================================================
# Background Work
# ============================================================================

DEFAULT_BACKEND_TIMEOUT = 10.0
DEFAULT_BACKGROUND_WORKERS = 4
DEFAULT_BACKGROUND_QUEUE_SIZE = 64
# time kept back from the invocation deadline when draining background work
BACKGROUND_DRAIN_RESERVE_MS = 500


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

METRICS_NAMESPACE = "PhotoLifecycle"
SERVICE_NAME = "photo-lifecycle"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
DEFAULT_AWS_REGION = "us-east-1"
ENV_PHOTO_S3_BUCKET_NAME = "PHOTO_S3_BUCKET_NAME"
ENV_PHOTO_TABLE_NAME = "PHOTO_TABLE_NAME"
ENV_MAX_FILE_SIZE = "PHOTO_MAX_FILE_SIZE"
ENV_ALLOWED_CONTENT_TYPES = "PHOTO_ALLOWED_CONTENT_TYPES"
ENV_MAX_PHOTOS_PER_OWNER = "PHOTO_MAX_PER_OWNER"
ENV_UPLOAD_URL_TTL = "PHOTO_UPLOAD_URL_TTL_SECONDS"
ENV_DOWNLOAD_URL_TTL = "PHOTO_DOWNLOAD_URL_TTL_SECONDS"
ENV_BACKEND_TIMEOUT = "PHOTO_BACKEND_TIMEOUT_SECONDS"
ENV_BACKGROUND_WORKERS = "PHOTO_BACKGROUND_WORKERS"
ENV_BACKGROUND_QUEUE_SIZE = "PHOTO_BACKGROUND_QUEUE_SIZE"
ENV_PUBLIC_BASE_URL = "PHOTO_PUBLIC_BASE_URL"
ENV_APP_RUNTIME = "APP_RUNTIME"
LOCALSTACK_URL = "http://localstack"
LOCALHOST_URL = "http://localhost"


# ============================================================================
# Helper Functions
# ============================================================================


def extension_for(content_type: str) -> str:
    """Return the canonical file extension for a content type."""
    extensions = MIME_TYPE_EXTENSION_MAP.get(content_type)
    return extensions[0] if extensions else "bin"


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
