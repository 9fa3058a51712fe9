"""Models exchanged with the object storage gateway."""

from pydantic import BaseModel, Field, StrictInt, StrictStr


class ObjectMetadata(BaseModel):
    """Metadata describing a stored object."""

    key: StrictStr = Field(..., description="Object key")
    size: StrictInt = Field(..., description="Object size in bytes")
    content_type: StrictStr | None = Field(None, description="Stored content type")
    etag: StrictStr | None = None
    last_modified: StrictStr | None = Field(None, description="ISO-8601 timestamp (UTC)")
