"""Read-access decisions for photo downloads."""

from enum import Enum

from core.models.errors import AccessDeniedError, NotFoundError
from core.models.photo import Photo


class AccessDecision(str, Enum):
    ALLOW_OWNER = "allow_owner"
    ALLOW_APPROVED = "allow_approved"
    DENY_NOT_FOUND = "deny_not_found"
    DENY_NOT_APPROVED = "deny_not_approved"

    @property
    def allowed(self) -> bool:
        return self in (AccessDecision.ALLOW_OWNER, AccessDecision.ALLOW_APPROVED)


def evaluate(photo: Photo | None, requester_id: str) -> AccessDecision:
    """Decide whether `requester_id` may read `photo`.

    Rules are checked in order and the first match wins: deleted (or
    missing) photos look absent to everyone, owners always see their own
    photos, everyone else sees approved photos only.
    """
    if photo is None or photo.is_deleted:
        return AccessDecision.DENY_NOT_FOUND

    if requester_id == photo.owner_id:
        return AccessDecision.ALLOW_OWNER

    if not photo.is_approved:
        return AccessDecision.DENY_NOT_APPROVED

    return AccessDecision.ALLOW_APPROVED


def enforce(photo: Photo | None, requester_id: str, *, photo_id: str) -> AccessDecision:
    """Like `evaluate`, but raise on a deny decision.

    Raises:
        NotFoundError: If the photo is missing or deleted
        AccessDeniedError: If a non-owner asks for an unapproved photo
    """
    decision = evaluate(photo, requester_id)

    if decision is AccessDecision.DENY_NOT_FOUND:
        raise NotFoundError(message="Photo not found", details={"photo_id": photo_id})

    if decision is AccessDecision.DENY_NOT_APPROVED:
        raise AccessDeniedError(
            message="Photo is not available for viewing",
            details={"photo_id": photo_id},
        )

    return decision
