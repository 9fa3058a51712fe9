"""Business logic for issuing direct-to-storage upload URLs.

The backend never touches the bytes on this path and no photo record is
created; the contract ends once the URL has been issued.
"""

from aws_lambda_powertools import Logger

from core.config import PhotoSettings, get_settings
from core.infrastructure.aws.dynamodb_photo_store import DynamoDBPhotoStore
from core.infrastructure.aws.s3_object_storage import S3ObjectStorage
from core.models.errors import InvalidInputError, QuotaExceededError
from core.repositories.photo_repository import PhotoRecordStore
from core.repositories.storage_repository import ObjectStorageGateway
from core.utils.constants import format_file_size
from core.utils.storage_keys import temp_upload_key
from core.utils.time import expires_at_iso, utc_now

logger = Logger(UTC=True)


class DirectTransferService:
    """Issues pre-signed upload URLs after checking limits and quota."""

    def __init__(
        self,
        *,
        storage: ObjectStorageGateway | None = None,
        store: PhotoRecordStore | None = None,
        settings: PhotoSettings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.storage = storage or S3ObjectStorage(settings=self.settings)
        self.store = store or DynamoDBPhotoStore()

    def request_upload_url(
        self,
        *,
        owner_id: str,
        file_name: str,
        content_type: str,
        file_size: int,
    ) -> dict[str, object]:
        """Issue an upload URL for a new photo of `owner_id`.

        Raises:
            InvalidInputError: If the type is not allowed or the size exceeds the maximum
            QuotaExceededError: If the owner already holds the maximum number of photos
            BackendUnavailableError: If storage cannot sign the URL
        """
        content_type = content_type.strip().lower()

        # Step 1: Validate declared type and size before any key is generated
        if not self.settings.is_content_type_allowed(content_type):
            logger.warning(
                "Rejected upload URL request: content type not allowed",
                extra={"owner_id": owner_id, "content_type": content_type},
            )
            raise InvalidInputError(
                message=f"Invalid content type. Allowed: {', '.join(self.settings.allowed_content_types)}",
                details={"content_type": content_type},
            )

        if file_size > self.settings.max_file_size:
            logger.warning(
                "Rejected upload URL request: file too large",
                extra={"owner_id": owner_id, "file_size": file_size},
            )
            raise InvalidInputError(
                message=f"File size exceeds {format_file_size(self.settings.max_file_size)} limit",
                details={"file_size": file_size, "max_size": self.settings.max_file_size},
            )

        # Step 2: Quota
        count = self.store.count_photos(owner_id=owner_id)
        if count >= self.settings.max_photos_per_owner:
            raise QuotaExceededError(
                message=f"Maximum photo limit reached ({self.settings.max_photos_per_owner} photos)",
                details={"owner_id": owner_id, "max_photos": self.settings.max_photos_per_owner},
            )

        # Step 3-4: Allocate key and sign
        now = utc_now()
        key = temp_upload_key(owner_id, file_name, now=now)
        url = self.storage.issue_upload_url(
            key=key,
            content_type=content_type,
            expires_in=self.settings.upload_url_ttl,
        )

        logger.info("Upload URL issued", extra={"owner_id": owner_id, "key": key})

        return {
            "url": url,
            "key": key,
            "expires_at": expires_at_iso(self.settings.upload_url_ttl, start=now),
            "max_size": self.settings.max_file_size,
            "allowed_types": list(self.settings.allowed_content_types),
        }
