import base64
import json
from types import SimpleNamespace
from typing import Any

import pytest

from core.infrastructure.aws.dynamodb_photo_store import DynamoDBPhotoStore


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
        get_remaining_time_in_millis=lambda: 30_000,
    )


@pytest.fixture
def upload_url_event() -> dict[str, Any]:
    return {
        "httpMethod": "POST",
        "path": "/v1/photos/upload-url",
        "body": json.dumps(
            {
                "owner_id": "owner_1",
                "file_name": "beach.png",
                "content_type": "image/png",
                "file_size": 2048,
            }
        ),
    }


@pytest.fixture
def upload_photo_event(sample_png_binary) -> dict[str, Any]:
    return {
        "httpMethod": "POST",
        "path": "/v1/photos",
        "body": json.dumps(
            {
                "owner_id": "owner_1",
                "file": base64.b64encode(sample_png_binary).decode("utf-8"),
                "content_type": "image/png",
            }
        ),
    }


@pytest.fixture
def path_event():
    """Build a proxy event carrying path (and optional query) parameters."""

    def _build(
        method: str,
        path: str,
        params: dict[str, str],
        query: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return {
            "httpMethod": method,
            "path": path,
            "pathParameters": params,
            "queryStringParameters": query,
        }

    return _build


@pytest.fixture
def photo_store(photo_table):
    """DynamoDB-backed store pointed at the mocked table."""
    return DynamoDBPhotoStore()


@pytest.fixture
def seed_photos(photo_store):
    def _seed(*photos, max_photos: int = 6) -> None:
        for photo in photos:
            photo_store.create_photo(photo=photo, max_photos=max_photos)

    return _seed
