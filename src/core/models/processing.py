"""Models exchanged with the image transform collaborator."""

from pydantic import BaseModel, Field

from core.utils.constants import (
    PROCESS_QUALITY,
    PROCESS_RESIZE_HEIGHT,
    PROCESS_RESIZE_WIDTH,
    PROCESS_THUMB_HEIGHT,
    PROCESS_THUMB_WIDTH,
)


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    content_type: str | None = None
    width: int | None = None
    height: int | None = None


class ProcessOptions(BaseModel):
    """Transcoding knobs passed to the transformer."""

    resize_w: int = PROCESS_RESIZE_WIDTH
    resize_h: int = PROCESS_RESIZE_HEIGHT
    quality: int = PROCESS_QUALITY
    thumb_w: int = PROCESS_THUMB_WIDTH
    thumb_h: int = PROCESS_THUMB_HEIGHT
    strip_metadata: bool = True
    optimize: bool = True


class ProcessResult(BaseModel):
    """Output of a successful transform."""

    processed_bytes: bytes
    content_type: str = Field(..., description="Normalized content type of processed_bytes")
    processed_key_hint: str | None = Field(None, description="Suggested object name")
    thumbnail_bytes: bytes | None = None

    @property
    def has_thumbnail(self) -> bool:
        return bool(self.thumbnail_bytes)
