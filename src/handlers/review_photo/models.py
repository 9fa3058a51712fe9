"""Pydantic models for the moderation review request/response."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.models.photo import VerificationStatus
from core.utils.constants import REVIEW_REASON_MAX_LENGTH

ReviewAction = Literal["approve", "reject", "resubmit"]

ACTION_TARGETS: dict[str, VerificationStatus] = {
    "approve": VerificationStatus.APPROVED,
    "reject": VerificationStatus.REJECTED,
    "resubmit": VerificationStatus.PENDING,
}


class ReviewPhotoRequest(BaseModel):
    """Validation model for a moderation decision."""

    model_config = ConfigDict(str_strip_whitespace=True)

    photo_id: str = Field(..., min_length=1, max_length=100)
    action: ReviewAction
    reason: str | None = Field(None, min_length=1, max_length=REVIEW_REASON_MAX_LENGTH)

    @model_validator(mode="after")
    def require_reason_for_rejection(self) -> "ReviewPhotoRequest":
        if self.action == "reject" and not self.reason:
            raise ValueError("A reason is required when rejecting a photo")
        return self

    @property
    def target_status(self) -> VerificationStatus:
        return ACTION_TARGETS[self.action]


class ReviewPhotoResponse(BaseModel):
    photo_id: str
    verification_status: str
    verification_reason: str | None = None
    is_primary: bool
