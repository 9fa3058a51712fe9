"""
E2E Tests for HTTP Error Responses
"""


class TestErrorResponses:
    """E2E: Verify error response formats"""

    def test_400_error_has_code_and_message(self, api_client) -> None:
        response = api_client.post("/v1/photos", {})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "INVALID_INPUT"
        assert body["message"]

    def test_404_error_has_code(self, api_client) -> None:
        response = api_client.get("/v1/owners/e2e-error-owner/photos/pho_missing/download-url")

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_upload_url_rejects_disallowed_type(self, api_client) -> None:
        response = api_client.post(
            "/v1/photos/upload-url",
            {"owner_id": "e2e-error-owner", "file_name": "a.gif", "content_type": "image/gif", "file_size": 10},
        )

        assert response.status_code == 400
        assert response.json()["details"]["content_type"] == "image/gif"
