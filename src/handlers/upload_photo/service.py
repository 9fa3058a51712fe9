"""Business logic for the mediated photo upload pipeline.

The coordinator validates, transforms and stores the image, then creates
the photo record. Every storage write registers an undo action, so a
failure (or cancellation) at any later step removes what was already
written before the error propagates.
"""

import time
from typing import Any

from aws_lambda_powertools import Logger

from core.config import PhotoSettings, get_settings
from core.infrastructure.aws.dynamodb_photo_store import DynamoDBPhotoStore
from core.infrastructure.aws.s3_object_storage import S3ObjectStorage
from core.infrastructure.processing.pillow_transformer import PillowImageTransformer
from core.models.errors import (
    InvalidInputError,
    InvariantUpdateFailedError,
    PhotoServiceError,
    ProcessingFailedError,
    QuotaExceededError,
    RecordCreationFailedError,
    StorageWriteFailedError,
)
from core.models.photo import Photo, VerificationStatus
from core.models.processing import ProcessOptions, ProcessResult
from core.repositories.image_transformer import ImageTransformer
from core.repositories.photo_repository import PhotoRecordStore
from core.repositories.storage_repository import ObjectStorageGateway
from core.services.primary_photos import PrimaryPhotoManager
from core.services.rollback import RollbackPlan
from core.utils.constants import format_file_size
from core.utils.storage_keys import processed_key, thumbnail_key
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class UploadCoordinator:
    """Application service for mediated uploads.

    This service orchestrates:
    - Size, type and quota checks
    - Image transformation
    - Storage of the processed image and optional thumbnail
    - Primary flag handoff and record creation
    """

    def __init__(
        self,
        *,
        storage: ObjectStorageGateway | None = None,
        store: PhotoRecordStore | None = None,
        transformer: ImageTransformer | None = None,
        settings: PhotoSettings | None = None,
        options: ProcessOptions | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.storage = storage or S3ObjectStorage(settings=self.settings)
        self.store = store or DynamoDBPhotoStore()
        self.transformer = transformer or PillowImageTransformer(self.settings.allowed_content_types)
        self.primary = PrimaryPhotoManager(self.store)
        self.options = options or ProcessOptions()

    def upload(
        self,
        *,
        owner_id: str,
        data: bytes,
        content_type: str,
        declared_size: int | None = None,
        is_primary: bool = False,
    ) -> dict[str, Any]:
        """Run the upload pipeline for one image.

        The new record always starts pending and non-primary. When
        `is_primary` is requested the owner's current primary is cleared
        first and the request is kept on the record; the photo takes the
        primary slot once it is approved.

        Returns:
            Summary of the created photo and the elapsed processing time

        Raises:
            InvalidInputError: If the size or type is not acceptable
            QuotaExceededError: If the owner already holds the maximum number of photos
            ProcessingFailedError: If the transformer rejects the image
            StorageWriteFailedError: If an object cannot be stored
            InvariantUpdateFailedError: If the current primary cannot be cleared
            RecordCreationFailedError: If the record cannot be persisted
        """
        started = time.perf_counter()
        content_type = content_type.strip().lower()

        logger.debug(
            "Starting mediated upload",
            extra={"owner_id": owner_id, "size": len(data), "is_primary": is_primary},
        )

        # Step 1: Size and type
        self._check_input(owner_id=owner_id, data=data, content_type=content_type, declared_size=declared_size)

        # Step 2: Quota
        if self.store.count_photos(owner_id=owner_id) >= self.settings.max_photos_per_owner:
            logger.info("Upload refused: photo quota reached", extra={"owner_id": owner_id})
            raise QuotaExceededError(
                message=f"Maximum photo limit reached ({self.settings.max_photos_per_owner} photos)",
                details={"owner_id": owner_id, "max_photos": self.settings.max_photos_per_owner},
            )

        # Step 3: Transform
        result = self._transform(owner_id=owner_id, data=data)

        photo_id = Photo.generate_photo_id()
        main_key = processed_key(owner_id, photo_id, result.content_type)
        thumb_key: str | None = None

        with RollbackPlan("upload_photo", owner_id=owner_id, photo_id=photo_id) as plan:
            # Step 4: Canonical representation
            self._store_object(key=main_key, body=result.processed_bytes, content_type=result.content_type)
            plan.add("delete processed object", self.storage.delete, key=main_key)

            # Step 5: Thumbnail
            if result.has_thumbnail and result.thumbnail_bytes:
                thumb_key = thumbnail_key(owner_id, photo_id, result.content_type)
                self._store_object(key=thumb_key, body=result.thumbnail_bytes, content_type=result.content_type)
                plan.add("delete thumbnail object", self.storage.delete, key=thumb_key)

            # Step 6: Release the primary slot
            if is_primary:
                previous = self._demote_current(owner_id=owner_id)
                if previous:
                    plan.add(
                        "restore previous primary",
                        self.primary.promote,
                        owner_id=owner_id,
                        photo_id=previous,
                    )

            # Step 7: Record
            now = utc_now_iso()
            photo = Photo(
                photo_id=photo_id,
                owner_id=owner_id,
                storage_key=main_key,
                public_url=self.storage.public_url(main_key),
                thumbnail_key=thumb_key,
                thumbnail_url=self.storage.public_url(thumb_key) if thumb_key else None,
                content_type=result.content_type,
                file_size=len(result.processed_bytes),
                is_primary=False,
                primary_requested=is_primary,
                verification_status=VerificationStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            self._create_record(photo)

            plan.commit()

        elapsed_ms = int((time.perf_counter() - started) * 1000)

        logger.info(
            "Photo uploaded successfully",
            extra={"owner_id": owner_id, "photo_id": photo_id, "processing_time_ms": elapsed_ms},
        )

        return {
            "photo_id": photo.photo_id,
            "url": photo.public_url,
            "thumbnail_url": photo.thumbnail_url,
            "is_primary": photo.is_primary,
            "status": photo.verification_status.value,
            "processing_time_ms": elapsed_ms,
        }

    def _check_input(
        self,
        *,
        owner_id: str,
        data: bytes,
        content_type: str,
        declared_size: int | None,
    ) -> None:
        if not data:
            raise InvalidInputError(message="Image data is empty")

        size = max(len(data), declared_size or 0)
        if size > self.settings.max_file_size:
            logger.warning("Upload refused: file too large", extra={"owner_id": owner_id, "size": size})
            raise InvalidInputError(
                message=f"File size exceeds {format_file_size(self.settings.max_file_size)} limit",
                details={"file_size": size, "max_size": self.settings.max_file_size},
            )

        if not self.settings.is_content_type_allowed(content_type):
            logger.warning(
                "Upload refused: content type not allowed",
                extra={"owner_id": owner_id, "content_type": content_type},
            )
            raise InvalidInputError(
                message=f"Invalid content type. Allowed: {', '.join(self.settings.allowed_content_types)}",
                details={"content_type": content_type},
            )

    def _transform(self, *, owner_id: str, data: bytes) -> ProcessResult:
        try:
            validation = self.transformer.validate(data)
            if not validation.is_valid:
                raise ProcessingFailedError(
                    message="Image could not be processed",
                    details={"errors": validation.errors},
                )
            return self.transformer.process(data, self.options)
        except ProcessingFailedError:
            logger.warning("Image rejected by transformer", extra={"owner_id": owner_id})
            raise
        except Exception as exc:
            logger.exception("Image transformer failed", extra={"owner_id": owner_id})
            raise ProcessingFailedError(message="Image could not be processed") from exc

    def _store_object(self, *, key: str, body: bytes, content_type: str) -> None:
        try:
            self.storage.put(key=key, body=body, content_type=content_type)
        except StorageWriteFailedError:
            raise
        except PhotoServiceError as exc:
            raise StorageWriteFailedError(
                message="Unable to store photo at this time",
                details={"key": key},
            ) from exc

    def _demote_current(self, *, owner_id: str) -> str | None:
        try:
            return self.primary.demote_current(owner_id=owner_id)
        except InvariantUpdateFailedError:
            raise
        except PhotoServiceError as exc:
            raise InvariantUpdateFailedError(
                message="Unable to update primary photo at this time",
                details={"owner_id": owner_id},
            ) from exc

    def _create_record(self, photo: Photo) -> None:
        try:
            self.store.create_photo(photo=photo, max_photos=self.settings.max_photos_per_owner)
        except (QuotaExceededError, RecordCreationFailedError):
            raise
        except PhotoServiceError as exc:
            raise RecordCreationFailedError(
                message="Unable to save photo at this time",
                details={"photo_id": photo.photo_id},
            ) from exc
