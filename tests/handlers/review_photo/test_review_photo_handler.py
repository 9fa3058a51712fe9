import json

from fakes import make_photo

from core.models.photo import VerificationStatus
from handlers.review_photo.handler import handler


def review_event(photo_id, body):
    return {
        "httpMethod": "POST",
        "path": f"/v1/photos/{photo_id}/review",
        "pathParameters": {"photo_id": photo_id},
        "body": json.dumps(body),
    }


class TestReviewPhotoHandler:
    def test_approve_promotes_first_approved_photo(self, lambda_context, seed_photos, photo_store):
        seed_photos(make_photo("pho_1", status=VerificationStatus.PENDING))

        response = handler(review_event("pho_1", {"action": "approve"}), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["verification_status"] == "approved"
        assert body["is_primary"] is True
        assert photo_store.fetch_photo(photo_id="pho_1").is_primary

    def test_approve_honors_primary_request_from_upload(self, lambda_context, seed_photos, photo_store):
        seed_photos(
            make_photo("pho_0", is_primary=True),
            make_photo("pho_1", status=VerificationStatus.PENDING, primary_requested=True),
        )

        response = handler(review_event("pho_1", {"action": "approve"}), lambda_context)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["is_primary"] is True
        assert photo_store.primary_photo_id(owner_id="owner_1") == "pho_1"
        assert not photo_store.fetch_photo(photo_id="pho_0").is_primary

    def test_reject_without_reason(self, lambda_context):
        response = handler(review_event("pho_1", {"action": "reject"}), lambda_context)

        assert response["statusCode"] == 400
        errors = json.loads(response["body"])["details"]["errors"]
        assert errors[0]["message"] == "A reason is required when rejecting a photo"

    def test_reject(self, lambda_context, seed_photos, photo_store):
        seed_photos(make_photo("pho_1", status=VerificationStatus.PENDING))

        response = handler(review_event("pho_1", {"action": "reject", "reason": "blurry"}), lambda_context)

        assert json.loads(response["body"])["verification_reason"] == "blurry"
        assert photo_store.fetch_photo(photo_id="pho_1").verification_status is VerificationStatus.REJECTED

    def test_invalid_transition(self, lambda_context, seed_photos):
        seed_photos(make_photo("pho_1"))

        response = handler(review_event("pho_1", {"action": "resubmit"}), lambda_context)

        assert response["statusCode"] == 409
        assert json.loads(response["body"])["error"] == "INVALID_STATE_TRANSITION"

    def test_unknown_photo(self, lambda_context, photo_table):
        response = handler(review_event("pho_x", {"action": "approve"}), lambda_context)

        assert response["statusCode"] == 404
