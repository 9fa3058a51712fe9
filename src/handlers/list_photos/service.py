"""Business logic for listing an owner's photos."""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_photo_store import DynamoDBPhotoStore
from core.models.photo import Photo
from core.repositories.photo_repository import PhotoRecordStore

logger = Logger(UTC=True)


class ListService:
    def __init__(self, *, store: PhotoRecordStore | None = None) -> None:
        self.store = store or DynamoDBPhotoStore()

    def list_photos(self, *, owner_id: str, include_deleted: bool = False) -> list[Photo]:
        """Return the owner's photos, oldest first."""
        photos = self.store.list_photos(owner_id=owner_id, include_deleted=include_deleted)

        logger.debug(
            "Listed owner photos",
            extra={"owner_id": owner_id, "count": len(photos), "include_deleted": include_deleted},
        )
        return photos
