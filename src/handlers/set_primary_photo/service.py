"""Business logic for explicitly choosing an owner's primary photo."""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_photo_store import DynamoDBPhotoStore
from core.repositories.photo_repository import PhotoRecordStore
from core.services.primary_photos import PrimaryPhotoManager, PromotionResult

logger = Logger(UTC=True)


class SetPrimaryService:
    def __init__(self, *, store: PhotoRecordStore | None = None) -> None:
        self.store = store or DynamoDBPhotoStore()
        self.primary = PrimaryPhotoManager(self.store)

    def set_primary(self, *, owner_id: str, photo_id: str) -> dict[str, object]:
        """Promote `photo_id`; calling it on the current primary is a successful no-op.

        Raises:
            NotFoundError: If the photo is missing, deleted, or not owned by `owner_id`
            NotApprovedError: If the photo is not approved
            InvariantUpdateFailedError: If the store could not apply the change
        """
        result = self.primary.promote(owner_id=owner_id, photo_id=photo_id)

        return {
            "photo_id": photo_id,
            "is_primary": True,
            "already_primary": result is PromotionResult.ALREADY_PRIMARY,
        }
