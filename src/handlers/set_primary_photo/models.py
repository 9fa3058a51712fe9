from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import OWNER_ID_PATTERN


class SetPrimaryRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    owner_id: str = Field(..., min_length=1, max_length=64, pattern=OWNER_ID_PATTERN)
    photo_id: str = Field(..., min_length=1, max_length=100)


class SetPrimaryResponse(BaseModel):
    photo_id: str
    is_primary: bool
    already_primary: bool = Field(False, description="True when the photo was primary before the call")
