"""Pydantic models for the direct-transfer upload URL request/response."""

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from core.utils.constants import OWNER_ID_PATTERN


class UploadUrlRequest(BaseModel):
    """Validation model for an upload URL request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=OWNER_ID_PATTERN,
        description="Owner identifier (alphanumeric, underscore, hyphen)",
    )
    file_name: str = Field(..., min_length=1, max_length=255, description="Original file name")
    content_type: str = Field(..., min_length=1, max_length=100, description="Declared MIME type")
    file_size: PositiveInt = Field(..., description="Declared size in bytes")


class UploadUrlResponse(BaseModel):
    """Response model for an issued upload URL."""

    url: str = Field(..., description="Pre-signed PUT URL")
    key: str = Field(..., description="Object key the client must upload to")
    expires_at: str = Field(..., description="ISO-8601 expiry of the URL")
    max_size: int = Field(..., description="Maximum accepted size in bytes")
    allowed_types: list[str] = Field(..., description="Accepted MIME types")
