import pytest
from fakes import make_photo

from core.models.errors import AccessDeniedError, NotFoundError
from core.models.photo import VerificationStatus
from core.services.access_control import AccessDecision, enforce, evaluate


@pytest.mark.parametrize(
    "status,requester,decision",
    [
        (VerificationStatus.PENDING, "owner_1", AccessDecision.ALLOW_OWNER),
        (VerificationStatus.REJECTED, "owner_1", AccessDecision.ALLOW_OWNER),
        (VerificationStatus.APPROVED, "owner_1", AccessDecision.ALLOW_OWNER),
        (VerificationStatus.APPROVED, "viewer_9", AccessDecision.ALLOW_APPROVED),
        (VerificationStatus.PENDING, "viewer_9", AccessDecision.DENY_NOT_APPROVED),
        (VerificationStatus.REJECTED, "viewer_9", AccessDecision.DENY_NOT_APPROVED),
    ],
)
def test_evaluate(status, requester, decision):
    photo = make_photo("pho_1", status=status)

    assert evaluate(photo, requester) is decision


def test_deleted_photo_is_hidden_from_owner():
    photo = make_photo("pho_1", is_deleted=True)

    assert evaluate(photo, "owner_1") is AccessDecision.DENY_NOT_FOUND
    assert not AccessDecision.DENY_NOT_FOUND.allowed


def test_missing_photo_is_not_found():
    assert evaluate(None, "owner_1") is AccessDecision.DENY_NOT_FOUND


def test_enforce_raises_not_found():
    with pytest.raises(NotFoundError):
        enforce(None, "owner_1", photo_id="pho_1")


def test_enforce_raises_access_denied():
    photo = make_photo("pho_1", status=VerificationStatus.PENDING)

    with pytest.raises(AccessDeniedError) as exc_info:
        enforce(photo, "viewer_9", photo_id="pho_1")

    assert exc_info.value.details == {"photo_id": "pho_1"}


def test_enforce_returns_allowing_decision():
    photo = make_photo("pho_1")

    decision = enforce(photo, "viewer_9", photo_id="pho_1")

    assert decision.allowed
