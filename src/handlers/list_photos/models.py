"""Pydantic models for listing an owner's photos."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from core.models.photo import Photo
from core.utils.constants import OWNER_ID_PATTERN


class ListPhotosRequest(BaseModel):
    """Validation model for list photos request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_id: str = Field(..., min_length=1, max_length=64, pattern=OWNER_ID_PATTERN)
    include_deleted: StrictBool = Field(False, description="Include soft-deleted photos")


class PhotoSummary(BaseModel):
    """Owner-facing view of one photo."""

    photo_id: str
    url: str
    thumbnail_url: str | None = None
    is_primary: bool
    verification_status: str
    verification_reason: str | None = None
    is_deleted: bool
    created_at: str

    @classmethod
    def from_photo(cls, photo: Photo) -> "PhotoSummary":
        return cls(
            photo_id=photo.photo_id,
            url=photo.public_url,
            thumbnail_url=photo.thumbnail_url,
            is_primary=photo.is_primary,
            verification_status=photo.verification_status.value,
            verification_reason=photo.verification_reason,
            is_deleted=photo.is_deleted,
            created_at=photo.created_at,
        )


class ListPhotosResponse(BaseModel):
    owner_id: str
    photos: list[PhotoSummary]
    total_count: int = Field(..., description="Number of photos returned")
    primary_photo_id: str | None = None
