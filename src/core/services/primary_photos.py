"""Keeps each owner at no more than one primary photo, and only an approved one."""

from enum import Enum

from aws_lambda_powertools import Logger

from core.models.errors import NotApprovedError, NotFoundError
from core.models.photo import Photo
from core.repositories.photo_repository import PhotoRecordStore

logger = Logger(UTC=True)


class PromotionResult(str, Enum):
    PROMOTED = "promoted"
    ALREADY_PRIMARY = "already_primary"


class PrimaryPhotoManager:
    """Primary-flag operations on top of a PhotoRecordStore.

    The store applies each flag change (unset old, set new) atomically
    and serialized per owner; this class decides *which* change to make.
    """

    def __init__(self, store: PhotoRecordStore) -> None:
        self._store = store

    def promote(self, *, owner_id: str, photo_id: str) -> PromotionResult:
        """Make `photo_id` the owner's primary photo.

        Raises:
            NotFoundError: If the photo is missing, deleted, or not owned by `owner_id`
            NotApprovedError: If the photo is not approved
            InvariantUpdateFailedError: If the store could not apply the change
        """
        photo = self._store.fetch_photo(photo_id=photo_id)

        if photo is None or photo.is_deleted or photo.owner_id != owner_id:
            raise NotFoundError(message="Photo not found", details={"photo_id": photo_id})

        if not photo.is_approved:
            raise NotApprovedError(
                message="Photo must be approved to be set as primary",
                details={
                    "photo_id": photo_id,
                    "verification_status": photo.verification_status.value,
                },
            )

        if photo.is_primary:
            logger.info("Photo is already primary", extra={"owner_id": owner_id, "photo_id": photo_id})
            return PromotionResult.ALREADY_PRIMARY

        self._store.set_primary(owner_id=owner_id, photo_id=photo_id)

        logger.info("Photo promoted to primary", extra={"owner_id": owner_id, "photo_id": photo_id})
        return PromotionResult.PROMOTED

    def demote_current(self, *, owner_id: str) -> str | None:
        """Clear the owner's primary flag; returns the previous primary id."""
        previous = self._store.unset_primary(owner_id=owner_id)

        if previous:
            logger.info("Primary photo demoted", extra={"owner_id": owner_id, "photo_id": previous})
        return previous

    def current_primary(self, *, owner_id: str) -> Photo | None:
        photo_id = self._store.primary_photo_id(owner_id=owner_id)
        return self._store.fetch_photo(photo_id=photo_id) if photo_id else None

    def promote_if_vacant(self, *, owner_id: str, photo_id: str) -> bool:
        """Promote `photo_id` only when the owner currently has no primary photo."""
        if self._store.primary_photo_id(owner_id=owner_id) is not None:
            return False

        return self.promote(owner_id=owner_id, photo_id=photo_id) is PromotionResult.PROMOTED

    def reassign_after_removal(self, *, owner_id: str, removed_photo_id: str) -> str | None:
        """Promote the oldest remaining approved photo, if the owner has none primary.

        The owner listing can trail recent writes, so candidates that turn
        out to be gone or unapproved when promoted are skipped.

        Returns the id of the newly promoted photo, or None when the owner
        already has a primary or has no approved candidate left.
        """
        current = self._store.primary_photo_id(owner_id=owner_id)
        if current is not None and current != removed_photo_id:
            logger.info("Owner already has a primary photo", extra={"owner_id": owner_id, "photo_id": current})
            return None

        candidates = sorted(
            (
                photo
                for photo in self._store.list_photos(owner_id=owner_id)
                if photo.photo_id != removed_photo_id and photo.is_approved
            ),
            key=lambda photo: photo.creation_order,
        )

        for candidate in candidates:
            try:
                self._store.set_primary(owner_id=owner_id, photo_id=candidate.photo_id)
            except (NotFoundError, NotApprovedError):
                logger.info(
                    "Skipping stale primary candidate",
                    extra={"owner_id": owner_id, "photo_id": candidate.photo_id},
                )
                continue

            logger.info(
                "Primary photo reassigned",
                extra={
                    "owner_id": owner_id,
                    "removed_photo_id": removed_photo_id,
                    "photo_id": candidate.photo_id,
                },
            )
            return candidate.photo_id

        logger.info(
            "No approved photo available for primary reassignment",
            extra={"owner_id": owner_id, "removed_photo_id": removed_photo_id},
        )
        return None
