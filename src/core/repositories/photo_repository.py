"""Abstract contract for photo record persistence."""

from abc import ABC, abstractmethod

from core.models.photo import DeletedPhoto, Photo, VerificationStatus


class PhotoRecordStore(ABC):
    """Contract for storing and mutating photo records.

    Implementations must serialize mutations of one owner's photo set so
    that the per-owner rules hold under concurrent requests:

    - at most `max_photos` non-deleted photos per owner
    - at most one non-deleted primary photo per owner
    - only approved, non-deleted photos can be primary
    - an owner's last non-deleted photo cannot be soft-deleted

    Deleted records are retained and never mutated again.
    """

    @abstractmethod
    def create_photo(self, *, photo: Photo, max_photos: int) -> None:
        """Persist a new photo record.

        Raises:
            QuotaExceededError: If the owner already holds `max_photos` photos
            RecordCreationFailedError: If the record cannot be written
        """

    @abstractmethod
    def fetch_photo(self, *, photo_id: str) -> Photo | None:
        """Fetch a photo (deleted or not) by id, or None if unknown."""

    @abstractmethod
    def list_photos(self, *, owner_id: str, include_deleted: bool = False) -> list[Photo]:
        """List an owner's photos, oldest first. May lag behind the latest writes."""

    @abstractmethod
    def count_photos(self, *, owner_id: str) -> int:
        """Count an owner's non-deleted photos."""

    @abstractmethod
    def primary_photo_id(self, *, owner_id: str) -> str | None:
        """Return the id of the owner's current primary photo, if any.

        Reads the same state that primary mutations are serialized on, so a
        change acknowledged by `set_primary`, `unset_primary` or
        `soft_delete_photo` is always visible here.
        """

    @abstractmethod
    def soft_delete_photo(self, *, owner_id: str, photo_id: str) -> DeletedPhoto:
        """Mark a photo deleted and return the deleted record.

        Clears the owner's primary reference when the photo was primary;
        `was_primary` reports that from the state the delete was applied to.

        Raises:
            NotFoundError: If the photo is unknown, not the owner's, or already deleted
            LastPhotoUndeletableError: If it is the owner's last non-deleted photo
        """

    @abstractmethod
    def set_primary(self, *, owner_id: str, photo_id: str) -> None:
        """Atomically unset any other primary and set `photo_id` primary.

        Raises:
            NotFoundError: If the photo is unknown, not the owner's, or deleted
            NotApprovedError: If the photo is not approved
            InvariantUpdateFailedError: If the update cannot be applied
        """

    @abstractmethod
    def unset_primary(self, *, owner_id: str) -> str | None:
        """Clear the owner's primary photo and return its id, if any.

        Raises:
            InvariantUpdateFailedError: If the update cannot be applied
        """

    @abstractmethod
    def update_verification(
        self,
        *,
        photo: Photo,
        status: VerificationStatus,
        reason: str | None = None,
    ) -> Photo:
        """Move a photo to a new verification status and return it.

        The write is conditioned on the status read in `photo`.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed or
                the stored status changed concurrently
            NotFoundError: If the photo no longer exists or is deleted
        """
