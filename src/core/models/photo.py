"""Photo entity and its verification state machine."""

import uuid
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, StrictBool, StrictStr

from core.models.errors import InvalidStateTransitionError
from core.utils.time import utc_now_iso


class VerificationStatus(str, Enum):
    """Moderation state of a photo."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PhotoLifecycle(str, Enum):
    ACTIVE = "active"
    DELETED = "deleted"


# approved is terminal (administrative override lives outside this service)
ALLOWED_TRANSITIONS: dict[VerificationStatus, frozenset[VerificationStatus]] = {
    VerificationStatus.PENDING: frozenset({VerificationStatus.APPROVED, VerificationStatus.REJECTED}),
    VerificationStatus.REJECTED: frozenset({VerificationStatus.PENDING}),
    VerificationStatus.APPROVED: frozenset(),
}


class Photo(BaseModel):
    """A user's profile photo as persisted in the record store."""

    photo_id: StrictStr = Field(..., description="Unique photo identifier")
    owner_id: StrictStr = Field(..., description="Owning user identifier")

    storage_key: StrictStr = Field(..., description="Object key of the processed image")
    public_url: StrictStr = Field(..., description="Reference derived from storage_key")
    thumbnail_key: StrictStr | None = Field(None, description="Object key of the thumbnail")
    thumbnail_url: StrictStr | None = None

    content_type: StrictStr | None = None
    file_size: int | None = Field(None, description="Processed size in bytes")

    is_primary: StrictBool = False
    primary_requested: StrictBool = Field(
        False, description="Owner asked for this photo to become primary once approved"
    )
    verification_status: VerificationStatus = VerificationStatus.PENDING
    verification_reason: StrictStr | None = None

    is_deleted: StrictBool = False
    deleted_at: StrictStr | None = None

    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: StrictStr | None = Field(None, description="ISO-8601 last update timestamp (UTC)")

    @staticmethod
    def generate_photo_id() -> str:
        return f"pho_{uuid.uuid4().hex}"

    @property
    def lifecycle(self) -> PhotoLifecycle:
        return PhotoLifecycle.DELETED if self.is_deleted else PhotoLifecycle.ACTIVE

    @property
    def is_approved(self) -> bool:
        return self.verification_status is VerificationStatus.APPROVED

    @property
    def storage_keys(self) -> list[str]:
        """Every object key written for this photo, canonical first."""
        keys = [self.storage_key]
        if self.thumbnail_key:
            keys.append(self.thumbnail_key)
        return keys

    @property
    def creation_order(self) -> tuple[str, str]:
        return (self.created_at, self.photo_id)

    def can_transition_to(self, status: VerificationStatus) -> bool:
        if self.is_deleted:
            return False
        return status in ALLOWED_TRANSITIONS[self.verification_status]

    def with_verification(
        self,
        status: VerificationStatus,
        *,
        reason: str | None = None,
    ) -> "Photo":
        """Return a copy moved to `status`.

        Raises:
            InvalidStateTransitionError: If the move is not permitted
        """
        if not self.can_transition_to(status):
            raise InvalidStateTransitionError(
                message=(
                    f"Cannot change verification status from "
                    f"{self.verification_status.value} to {status.value}"
                ),
                details={
                    "photo_id": self.photo_id,
                    "from": self.verification_status.value,
                    "to": status.value,
                    "is_deleted": self.is_deleted,
                },
            )

        return self.model_copy(
            update={
                "verification_status": status,
                "verification_reason": reason if status is VerificationStatus.REJECTED else None,
                "updated_at": utc_now_iso(),
            }
        )

    def to_item(self) -> dict[str, Any]:
        """Serialize for persistence, dropping unset optional attributes."""
        return {key: value for key, value in self.model_dump(mode="json").items() if value is not None}

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Photo":
        """Build a Photo from a persisted item (DynamoDB numbers arrive as Decimal)."""
        data = {key: int(value) if isinstance(value, Decimal) else value for key, value in item.items()}
        return cls.model_validate(data)


class DeletedPhoto(BaseModel):
    """Result of a soft delete."""

    photo: Photo
    was_primary: bool = Field(False, description="Whether the photo held the owner's primary slot when deleted")


class PhotoInfo(BaseModel):
    """Metadata snapshot returned alongside a download URL."""

    photo_id: str
    owner_id: str
    verification_status: str
    is_primary: bool
    created_at: str

    @classmethod
    def from_photo(cls, photo: Photo) -> "PhotoInfo":
        return cls(
            photo_id=photo.photo_id,
            owner_id=photo.owner_id,
            verification_status=photo.verification_status.value,
            is_primary=photo.is_primary,
            created_at=photo.created_at,
        )
