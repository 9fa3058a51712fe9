"""Business logic for photo deletion.

Deletion is a synchronous soft delete of the record. Removing the stored
objects and handing the primary slot to another photo happen afterwards
in the background; their failures are logged, never returned to the
caller.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_photo_store import DynamoDBPhotoStore
from core.infrastructure.aws.s3_object_storage import S3ObjectStorage
from core.models.errors import NotFoundError
from core.repositories.photo_repository import PhotoRecordStore
from core.repositories.storage_repository import ObjectStorageGateway
from core.services.background import BackgroundTaskRunner, get_background_runner
from core.services.primary_photos import PrimaryPhotoManager

logger = Logger(UTC=True)


class DeleteService:
    """Application service responsible for deleting photos."""

    def __init__(
        self,
        *,
        storage: ObjectStorageGateway | None = None,
        store: PhotoRecordStore | None = None,
        runner: BackgroundTaskRunner | None = None,
    ) -> None:
        self.storage = storage or S3ObjectStorage()
        self.store = store or DynamoDBPhotoStore()
        self.runner = runner or get_background_runner()
        self.primary = PrimaryPhotoManager(self.store)

    def delete_photo(self, *, owner_id: str, photo_id: str) -> dict[str, str]:
        """Soft-delete a photo owned by `owner_id`.

        The deletion flow is:
        1. Confirm the photo exists, is live and belongs to the owner
        2. Soft-delete the record (refused for the owner's last photo)
        3. Schedule object removal and, if the photo held the primary slot, reassignment

        Raises:
            NotFoundError: If the photo does not belong to the owner or is gone
            LastPhotoUndeletableError: If it is the owner's only remaining photo
            InvariantUpdateFailedError: If the store could not apply the delete
        """
        logger.debug("Starting photo deletion", extra={"owner_id": owner_id, "photo_id": photo_id})

        photo = self.store.fetch_photo(photo_id=photo_id)
        if photo is None or photo.is_deleted or photo.owner_id != owner_id:
            logger.warning("Photo not found for deletion", extra={"owner_id": owner_id, "photo_id": photo_id})
            raise NotFoundError(message="Photo not found", details={"photo_id": photo_id})

        result = self.store.soft_delete_photo(owner_id=owner_id, photo_id=photo_id)
        deleted = result.photo

        self.runner.spawn("delete_photo_objects", self._remove_objects, keys=deleted.storage_keys)

        # primary status as of the delete itself, not the fetch above
        if result.was_primary:
            self.runner.spawn(
                "reassign_primary_photo",
                self.primary.reassign_after_removal,
                owner_id=owner_id,
                removed_photo_id=photo_id,
            )

        logger.info("Photo deleted", extra={"owner_id": owner_id, "photo_id": photo_id})

        return {
            "photo_id": deleted.photo_id,
            "deleted_at": deleted.deleted_at or "",
        }

    def _remove_objects(self, *, keys: list[str]) -> None:
        for key in keys:
            self.storage.delete(key=key)
