"""Pydantic models for delete photo request/response."""

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import OWNER_ID_PATTERN


class DeletePhotoRequest(BaseModel):
    """Validation model for delete photo request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_id: str = Field(..., min_length=1, max_length=64, pattern=OWNER_ID_PATTERN)
    photo_id: str = Field(..., min_length=1, max_length=100, description="Photo ID to delete")


class DeletePhotoResponse(BaseModel):
    """Response model for successful photo deletion."""

    photo_id: str = Field(..., description="Deleted photo ID")
    deleted_at: str = Field(..., description="Deletion timestamp")
