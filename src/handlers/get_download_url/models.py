from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.models.photo import PhotoInfo
from core.utils.constants import OWNER_ID_PATTERN


class DownloadUrlRequest(BaseModel):
    """Validation model for a download URL request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_id: StrictStr = Field(..., min_length=1, max_length=64, pattern=OWNER_ID_PATTERN)
    photo_id: StrictStr = Field(..., min_length=1, max_length=100, description="Photo to read")
    viewer_id: StrictStr | None = Field(
        None,
        min_length=1,
        max_length=64,
        pattern=OWNER_ID_PATTERN,
        description="Requesting user; the owner when omitted",
    )


class DownloadUrlResponse(BaseModel):
    url: str
    expires_at: str
    photo_info: PhotoInfo
