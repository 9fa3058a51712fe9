"""Business logic for issuing photo download URLs."""

from typing import Any, cast

from aws_lambda_powertools import Logger

from core.config import PhotoSettings, get_settings
from core.infrastructure.analytics.log_view_recorder import LoggingViewRecorder
from core.infrastructure.aws.dynamodb_photo_store import DynamoDBPhotoStore
from core.infrastructure.aws.s3_object_storage import S3ObjectStorage
from core.models.photo import Photo, PhotoInfo
from core.repositories.photo_repository import PhotoRecordStore
from core.repositories.storage_repository import ObjectStorageGateway
from core.repositories.view_recorder import PhotoViewRecorder
from core.services import access_control
from core.services.access_control import AccessDecision
from core.services.background import BackgroundTaskRunner, get_background_runner
from core.utils.time import expires_at_iso, utc_now

logger = Logger(UTC=True)


class DownloadService:
    """Gates read access and signs download URLs."""

    def __init__(
        self,
        *,
        storage: ObjectStorageGateway | None = None,
        store: PhotoRecordStore | None = None,
        recorder: PhotoViewRecorder | None = None,
        runner: BackgroundTaskRunner | None = None,
        settings: PhotoSettings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.storage = storage or S3ObjectStorage(settings=self.settings)
        self.store = store or DynamoDBPhotoStore()
        self.recorder = recorder or LoggingViewRecorder()
        self.runner = runner or get_background_runner()

    def request_download_url(
        self,
        *,
        owner_id: str,
        photo_id: str,
        viewer_id: str | None = None,
    ) -> dict[str, Any]:
        """Return a time-boxed download URL plus a metadata snapshot.

        Raises:
            NotFoundError: If the photo is missing, deleted, or not owned by `owner_id`
            AccessDeniedError: If a non-owner asks for an unapproved photo
            BackendUnavailableError: If storage cannot sign the URL
        """
        requester_id = viewer_id or owner_id

        photo: Photo | None = self.store.fetch_photo(photo_id=photo_id)
        if photo is not None and photo.owner_id != owner_id:
            photo = None

        decision = access_control.enforce(photo, requester_id, photo_id=photo_id)
        photo = cast(Photo, photo)

        now = utc_now()
        url = self.storage.issue_download_url(
            key=photo.storage_key,
            expires_in=self.settings.download_url_ttl,
        )

        if decision is AccessDecision.ALLOW_APPROVED:
            self.runner.spawn(
                "record_photo_view",
                self.recorder.record_view,
                photo_id=photo.photo_id,
                owner_id=photo.owner_id,
                viewer_id=requester_id,
                viewed_at=now.isoformat(),
            )

        logger.info(
            "Download URL issued",
            extra={"photo_id": photo_id, "owner_id": owner_id, "decision": decision.value},
        )

        return {
            "url": url,
            "expires_at": expires_at_iso(self.settings.download_url_ttl, start=now),
            "photo_info": PhotoInfo.from_photo(photo),
        }
