"""Custom exception classes for the photo service."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_ACCESS_DENIED,
    ERROR_CODE_BACKEND_UNAVAILABLE,
    ERROR_CODE_INVALID_INPUT,
    ERROR_CODE_INVALID_STATE_TRANSITION,
    ERROR_CODE_INVARIANT_UPDATE_FAILED,
    ERROR_CODE_LAST_PHOTO_UNDELETABLE,
    ERROR_CODE_NOT_APPROVED,
    ERROR_CODE_NOT_FOUND,
    ERROR_CODE_PROCESSING_FAILED,
    ERROR_CODE_QUOTA_EXCEEDED,
    ERROR_CODE_RECORD_CREATION_FAILED,
    ERROR_CODE_STORAGE_WRITE_FAILED,
)


class PhotoServiceError(Exception):
    """
    Base exception for all photo service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message; subclasses supply a
    stable error code. Optional contextual information can be supplied
    via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class InvalidInputError(PhotoServiceError):
    """Raised when the caller supplied a bad size, type, or identifier."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_INPUT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class QuotaExceededError(PhotoServiceError):
    """Raised when an owner already holds the maximum number of photos."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_QUOTA_EXCEEDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class NotFoundError(PhotoServiceError):
    """Raised when a photo does not exist or is deleted."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class AccessDeniedError(PhotoServiceError):
    """Raised when a photo exists but is not visible to the requester."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_ACCESS_DENIED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class NotApprovedError(PhotoServiceError):
    """Raised when promoting a photo that has not been approved."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_NOT_APPROVED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class LastPhotoUndeletableError(PhotoServiceError):
    """Raised when deleting the owner's last remaining photo."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_LAST_PHOTO_UNDELETABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class InvalidStateTransitionError(PhotoServiceError):
    """Raised when a verification status change is not allowed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_STATE_TRANSITION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ProcessingFailedError(PhotoServiceError):
    """Raised when the image transformer rejects or fails on the input."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_PROCESSING_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class StorageWriteFailedError(PhotoServiceError):
    """Raised when an object storage write or delete fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE_WRITE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class RecordCreationFailedError(PhotoServiceError):
    """Raised when the photo record cannot be persisted."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RECORD_CREATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class InvariantUpdateFailedError(PhotoServiceError):
    """Raised when a primary-flag update cannot be applied."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVARIANT_UPDATE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class BackendUnavailableError(PhotoServiceError):
    """Raised when the storage or record backend cannot be reached."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_BACKEND_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)
