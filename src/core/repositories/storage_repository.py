"""Abstract contract for object storage."""

from abc import ABC, abstractmethod

from core.models.storage import ObjectMetadata


class ObjectStorageGateway(ABC):
    """Contract for storing objects and issuing transfer URLs.

    Every operation is keyed by an opaque string; implementations know
    nothing about photos or owners. Implementations could be S3, GCS,
    local disk, etc. Services depend on this interface, not the
    implementation.
    """

    @abstractmethod
    def issue_upload_url(self, *, key: str, content_type: str, expires_in: int) -> str:
        """Return a time-boxed URL the client can PUT bytes to.

        Raises:
            BackendUnavailableError: If the backend cannot be reached
        """

    @abstractmethod
    def issue_download_url(self, *, key: str, expires_in: int) -> str:
        """Return a time-boxed URL for retrieving an object.

        Raises:
            BackendUnavailableError: If the backend cannot be reached
        """

    @abstractmethod
    def put(self, *, key: str, body: bytes, content_type: str) -> None:
        """Store bytes under `key`.

        Raises:
            StorageWriteFailedError: If the write fails
            BackendUnavailableError: If the backend cannot be reached
        """

    @abstractmethod
    def delete(self, *, key: str) -> None:
        """Delete the object under `key`.

        Deleting a key that does not exist succeeds.

        Raises:
            StorageWriteFailedError: If the delete fails
        """

    @abstractmethod
    def exists(self, *, key: str) -> bool:
        """Return True when an object is stored under `key`."""

    @abstractmethod
    def copy(self, *, source_key: str, destination_key: str) -> None:
        """Copy an object server-side.

        Raises:
            NotFoundError: If the source does not exist
            StorageWriteFailedError: If the copy fails
        """

    @abstractmethod
    def stat(self, *, key: str) -> ObjectMetadata:
        """Return metadata for the object under `key`.

        Raises:
            NotFoundError: If the object does not exist
        """

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Return the stable public reference for `key` (no network call)."""
