import json

from fakes import make_photo

from handlers.list_photos.handler import handler


class TestListPhotosHandler:
    def test_list(self, lambda_context, path_event, seed_photos, photo_store):
        seed_photos(
            make_photo("pho_2", created_at="2024-02-01T00:00:00+00:00", is_primary=True),
            make_photo("pho_1", created_at="2024-01-01T00:00:00+00:00"),
            make_photo("pho_3", created_at="2024-03-01T00:00:00+00:00"),
        )
        photo_store.soft_delete_photo(owner_id="owner_1", photo_id="pho_3")

        response = handler(path_event("GET", "/v1/owners/owner_1/photos", {"owner_id": "owner_1"}), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert [p["photo_id"] for p in body["photos"]] == ["pho_1", "pho_2"]
        assert body["total_count"] == 2
        assert body["primary_photo_id"] == "pho_2"

    def test_include_deleted(self, lambda_context, path_event, seed_photos, photo_store):
        seed_photos(make_photo("pho_1"), make_photo("pho_2", created_at="2024-02-01T00:00:00+00:00"))
        photo_store.soft_delete_photo(owner_id="owner_1", photo_id="pho_1")

        response = handler(
            path_event("GET", "/v1/owners/owner_1/photos", {"owner_id": "owner_1"}, {"include_deleted": "true"}),
            lambda_context,
        )

        body = json.loads(response["body"])
        assert [(p["photo_id"], p["is_deleted"]) for p in body["photos"]] == [("pho_1", True), ("pho_2", False)]

    def test_empty(self, lambda_context, path_event, photo_table):
        response = handler(path_event("GET", "/v1/owners/nobody/photos", {"owner_id": "nobody"}), lambda_context)

        body = json.loads(response["body"])
        assert body["photos"] == []
        assert body["primary_photo_id"] is None
