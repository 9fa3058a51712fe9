import pytest
from fakes import InMemoryPhotoStore, make_photo
from pydantic import ValidationError

from core.models.errors import InvalidStateTransitionError, InvariantUpdateFailedError, NotFoundError
from core.models.photo import VerificationStatus
from handlers.review_photo.models import ReviewPhotoRequest
from handlers.review_photo.service import ReviewService

PENDING = VerificationStatus.PENDING
APPROVED = VerificationStatus.APPROVED
REJECTED = VerificationStatus.REJECTED


def test_approval_fills_primary_vacancy():
    store = InMemoryPhotoStore([make_photo("pho_1", status=PENDING)])

    photo = ReviewService(store=store).review_photo(photo_id="pho_1", status=APPROVED)

    assert photo.verification_status is APPROVED
    assert photo.is_primary
    assert store.primaries("owner_1") == ["pho_1"]


def test_approval_keeps_existing_primary():
    store = InMemoryPhotoStore([make_photo("pho_0", is_primary=True), make_photo("pho_1", status=PENDING)])

    photo = ReviewService(store=store).review_photo(photo_id="pho_1", status=APPROVED)

    assert not photo.is_primary
    assert store.primaries("owner_1") == ["pho_0"]


def test_requested_primary_replaces_current_primary_on_approval():
    store = InMemoryPhotoStore(
        [make_photo("pho_0", is_primary=True), make_photo("pho_1", status=PENDING, primary_requested=True)]
    )

    photo = ReviewService(store=store).review_photo(photo_id="pho_1", status=APPROVED)

    assert photo.is_primary
    assert store.primaries("owner_1") == ["pho_1"]


def test_requested_primary_wins_over_earlier_approval():
    store = InMemoryPhotoStore(
        [make_photo("pho_1", status=PENDING), make_photo("pho_2", status=PENDING, primary_requested=True)]
    )
    service = ReviewService(store=store)

    service.review_photo(photo_id="pho_1", status=APPROVED)
    assert store.primaries("owner_1") == ["pho_1"]

    service.review_photo(photo_id="pho_2", status=APPROVED)
    assert store.primaries("owner_1") == ["pho_2"]


def test_rejection_records_reason():
    store = InMemoryPhotoStore([make_photo("pho_1", status=PENDING)])

    photo = ReviewService(store=store).review_photo(photo_id="pho_1", status=REJECTED, reason="blurry")

    assert photo.verification_reason == "blurry"
    assert store.photos["pho_1"].verification_status is REJECTED


def test_resubmission_after_rejection():
    store = InMemoryPhotoStore([make_photo("pho_1", status=REJECTED)])

    photo = ReviewService(store=store).review_photo(photo_id="pho_1", status=PENDING)

    assert photo.verification_status is PENDING


def test_approved_is_terminal():
    store = InMemoryPhotoStore([make_photo("pho_1", status=APPROVED)])

    with pytest.raises(InvalidStateTransitionError):
        ReviewService(store=store).review_photo(photo_id="pho_1", status=REJECTED, reason="late")


def test_deleted_photo_is_not_found():
    store = InMemoryPhotoStore([make_photo("pho_1", status=PENDING, is_deleted=True)])

    with pytest.raises(NotFoundError):
        ReviewService(store=store).review_photo(photo_id="pho_1", status=APPROVED)


def test_promotion_failure_does_not_undo_approval():
    store = InMemoryPhotoStore([make_photo("pho_1", status=PENDING)])
    store.fail_on["set_primary"] = InvariantUpdateFailedError(message="conflict")

    photo = ReviewService(store=store).review_photo(photo_id="pho_1", status=APPROVED)

    assert photo.verification_status is APPROVED
    assert not photo.is_primary


def test_requested_promotion_failure_does_not_undo_approval():
    store = InMemoryPhotoStore(
        [make_photo("pho_0", is_primary=True), make_photo("pho_1", status=PENDING, primary_requested=True)]
    )
    store.fail_on["set_primary"] = InvariantUpdateFailedError(message="conflict")

    photo = ReviewService(store=store).review_photo(photo_id="pho_1", status=APPROVED)

    assert photo.verification_status is APPROVED
    assert not photo.is_primary
    assert store.primaries("owner_1") == ["pho_0"]


class TestReviewPhotoRequest:
    def test_reject_requires_reason(self):
        with pytest.raises(ValidationError):
            ReviewPhotoRequest(photo_id="pho_1", action="reject")

    def test_unknown_action(self):
        with pytest.raises(ValidationError):
            ReviewPhotoRequest(photo_id="pho_1", action="delete")

    @pytest.mark.parametrize("action,status", [("approve", APPROVED), ("reject", REJECTED), ("resubmit", PENDING)])
    def test_target_status(self, action, status):
        request = ReviewPhotoRequest(photo_id="pho_1", action=action, reason="because")

        assert request.target_status is status
