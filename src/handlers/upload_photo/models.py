"""Pydantic models for the mediated photo upload request/response."""

import base64
import binascii

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, StrictBool, field_validator

from core.utils.constants import OWNER_ID_PATTERN

logger = Logger(UTC=True)


class PhotoUploadRequest(BaseModel):
    """Validation model for a mediated photo upload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=OWNER_ID_PATTERN,
        description="Owner identifier (alphanumeric, underscore, hyphen)",
    )
    file: str = Field(..., description="Base64 encoded image file")
    content_type: str = Field(..., min_length=1, max_length=100, description="Declared MIME type")
    file_size: PositiveInt | None = Field(None, description="Declared size in bytes")
    is_primary: StrictBool = Field(False, description="Request this photo as the primary photo")

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.error("File validation error: invalid base64")
            raise ValueError("Invalid base64 encoded file") from exc

        return value

    def decoded_file(self) -> bytes:
        return base64.b64decode(self.file)


class PhotoUploadResponse(BaseModel):
    """Response model for a completed upload."""

    photo_id: str = Field(..., description="Unique photo ID")
    url: str = Field(..., description="Public reference of the processed image")
    thumbnail_url: str | None = Field(None, description="Public reference of the thumbnail")
    is_primary: bool = Field(..., description="Whether the photo is currently primary")
    status: str = Field(..., description="Verification status")
    processing_time_ms: int = Field(..., description="Time spent in the upload pipeline")
