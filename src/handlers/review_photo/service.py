"""Business logic for moderation decisions on photos.

Applies the verification state machine. Approving a photo the owner asked
to make primary at upload promotes it, replacing any current primary.
Approving any other photo promotes it only when the owner has no primary,
which is how an owner left without one (no approved candidate at
reassignment time) gets one back.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_photo_store import DynamoDBPhotoStore
from core.models.errors import NotFoundError, PhotoServiceError
from core.models.photo import Photo, VerificationStatus
from core.repositories.photo_repository import PhotoRecordStore
from core.services.primary_photos import PrimaryPhotoManager

logger = Logger(UTC=True)


class ReviewService:
    def __init__(self, *, store: PhotoRecordStore | None = None) -> None:
        self.store = store or DynamoDBPhotoStore()
        self.primary = PrimaryPhotoManager(self.store)

    def review_photo(
        self,
        *,
        photo_id: str,
        status: VerificationStatus,
        reason: str | None = None,
    ) -> Photo:
        """Move a photo to `status` and return the updated record.

        Raises:
            NotFoundError: If the photo is missing or deleted
            InvalidStateTransitionError: If the transition is not allowed
        """
        photo = self.store.fetch_photo(photo_id=photo_id)
        if photo is None or photo.is_deleted:
            raise NotFoundError(message="Photo not found", details={"photo_id": photo_id})

        updated = self.store.update_verification(photo=photo, status=status, reason=reason)

        logger.info(
            "Photo reviewed",
            extra={
                "photo_id": photo_id,
                "owner_id": photo.owner_id,
                "from": photo.verification_status.value,
                "to": status.value,
            },
        )

        if status is VerificationStatus.APPROVED:
            updated = self._promote_approved(updated)

        return updated

    def _promote_approved(self, photo: Photo) -> Photo:
        try:
            if photo.primary_requested:
                self.primary.promote(owner_id=photo.owner_id, photo_id=photo.photo_id)
                promoted = True
            else:
                promoted = self.primary.promote_if_vacant(owner_id=photo.owner_id, photo_id=photo.photo_id)
        except PhotoServiceError as exc:
            # the approval itself already succeeded
            logger.warning(
                "Could not promote newly approved photo",
                extra={"photo_id": photo.photo_id, "error_code": exc.error_code},
            )
            return photo

        return photo.model_copy(update={"is_primary": True}) if promoted else photo
