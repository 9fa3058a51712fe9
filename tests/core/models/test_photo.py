from decimal import Decimal

import pytest
from fakes import make_photo

from core.models.errors import InvalidStateTransitionError
from core.models.photo import Photo, PhotoInfo, PhotoLifecycle, VerificationStatus


class TestVerificationTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (VerificationStatus.PENDING, VerificationStatus.APPROVED),
            (VerificationStatus.PENDING, VerificationStatus.REJECTED),
            (VerificationStatus.REJECTED, VerificationStatus.PENDING),
        ],
    )
    def test_allowed(self, current, target):
        photo = make_photo("pho_1", status=current)

        assert photo.can_transition_to(target)
        assert photo.with_verification(target).verification_status is target

    @pytest.mark.parametrize(
        "current,target",
        [
            (VerificationStatus.APPROVED, VerificationStatus.PENDING),
            (VerificationStatus.APPROVED, VerificationStatus.REJECTED),
            (VerificationStatus.REJECTED, VerificationStatus.APPROVED),
            (VerificationStatus.PENDING, VerificationStatus.PENDING),
        ],
    )
    def test_refused(self, current, target):
        photo = make_photo("pho_1", status=current)

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            photo.with_verification(target)

        assert exc_info.value.details["from"] == current.value
        assert exc_info.value.details["to"] == target.value

    def test_deleted_photo_cannot_transition(self):
        photo = make_photo("pho_1", status=VerificationStatus.PENDING, is_deleted=True)

        assert not photo.can_transition_to(VerificationStatus.APPROVED)

    def test_reason_kept_only_for_rejection(self):
        photo = make_photo("pho_1", status=VerificationStatus.PENDING)

        rejected = photo.with_verification(VerificationStatus.REJECTED, reason="blurry")
        resubmitted = rejected.with_verification(VerificationStatus.PENDING, reason="ignored")

        assert rejected.verification_reason == "blurry"
        assert resubmitted.verification_reason is None
        assert resubmitted.updated_at != photo.updated_at

    def test_original_is_unchanged(self):
        photo = make_photo("pho_1", status=VerificationStatus.PENDING)

        photo.with_verification(VerificationStatus.APPROVED)

        assert photo.verification_status is VerificationStatus.PENDING


class TestPhotoProperties:
    def test_lifecycle(self):
        assert make_photo("pho_1").lifecycle is PhotoLifecycle.ACTIVE
        assert make_photo("pho_1", is_deleted=True).lifecycle is PhotoLifecycle.DELETED

    def test_storage_keys_include_thumbnail(self):
        photo = make_photo("pho_1", thumbnail=True)

        assert photo.storage_keys == [
            "photos/owner_1/processed/pho_1.jpg",
            "photos/owner_1/thumbnails/pho_1.jpg",
        ]

    def test_creation_order_breaks_ties_by_id(self):
        older = make_photo("pho_b", created_at="2024-01-01T00:00:00+00:00")
        same_time = make_photo("pho_a", created_at="2024-01-01T00:00:00+00:00")
        newer = make_photo("pho_0", created_at="2024-02-01T00:00:00+00:00")

        ordered = sorted([newer, older, same_time], key=lambda p: p.creation_order)

        assert [p.photo_id for p in ordered] == ["pho_a", "pho_b", "pho_0"]

    def test_generated_ids_are_unique(self):
        first = Photo.generate_photo_id()

        assert first.startswith("pho_")
        assert first != Photo.generate_photo_id()


class TestPersistence:
    def test_to_item_drops_unset_fields(self):
        item = make_photo("pho_1").to_item()

        assert item["verification_status"] == "approved"
        assert "thumbnail_key" not in item
        assert "deleted_at" not in item

    def test_from_item_converts_decimals(self):
        item = make_photo("pho_1").to_item()
        item["file_size"] = Decimal("100")

        photo = Photo.from_item(item)

        assert photo.file_size == 100
        assert photo.verification_status is VerificationStatus.APPROVED

    def test_photo_info_snapshot(self):
        info = PhotoInfo.from_photo(make_photo("pho_1", is_primary=True))

        assert info.model_dump() == {
            "photo_id": "pho_1",
            "owner_id": "owner_1",
            "verification_status": "approved",
            "is_primary": True,
            "created_at": "2024-01-01T00:00:00+00:00",
        }
