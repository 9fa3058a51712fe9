"""
Pytest configuration and fixtures for photo lifecycle tests.
Provides AWS mocking, DynamoDB and S3 fixtures with proper cleanup.
"""

import os

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("PHOTO_S3_BUCKET_NAME", "test-photo-bucket")
os.environ.setdefault("PHOTO_TABLE_NAME", "test-photo-table")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "PhotoLifecycle")

import io  # noqa: E402
from collections.abc import Callable, Iterator  # noqa: E402
from typing import Any  # noqa: E402

import boto3  # noqa: E402
import pytest  # noqa: E402
from moto import mock_aws  # noqa: E402
from PIL import Image  # noqa: E402

from core.config import PhotoSettings, get_settings  # noqa: E402
from core.services.background import BackgroundTaskRunner, get_background_runner  # noqa: E402
from core.utils.constants import OWNER_CREATED_INDEX  # noqa: E402


@pytest.fixture(scope="function")
def aws_mock() -> Iterator[None]:
    with mock_aws():
        yield
        # background work scheduled by handlers must finish against the mock
        get_background_runner().drain(timeout=10)


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def photo_table(dynamodb_resource):
    """Create the photo table with its owner/creation-time index."""
    table = dynamodb_resource.create_table(
        TableName=os.getenv("PHOTO_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "photo_id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "photo_id", "AttributeType": "S"},
            {"AttributeName": "owner_id", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": OWNER_CREATED_INDEX,
                "KeySchema": [
                    {"AttributeName": "owner_id", "KeyType": "HASH"},
                    {"AttributeName": "created_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    )
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client) -> str:
    bucket_name = os.environ["PHOTO_S3_BUCKET_NAME"]
    s3_client.create_bucket(Bucket=bucket_name)
    return bucket_name


@pytest.fixture
def s3_get_object(s3_client, s3_bucket) -> Callable[[str], bytes]:
    """
    Helper to read an object from S3.

    Usage:
        content = s3_get_object("photos/owner_1/processed/pho_1.jpg")
    """

    def _get(key: str) -> bytes:
        response: dict[str, Any] = s3_client.get_object(Bucket=s3_bucket, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_keys(s3_client, s3_bucket) -> Callable[[], list[str]]:
    """Helper listing every key currently stored in the test bucket."""

    def _keys() -> list[str]:
        response = s3_client.list_objects_v2(Bucket=s3_bucket)
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _keys


@pytest.fixture
def settings() -> PhotoSettings:
    return get_settings()


@pytest.fixture
def runner() -> Iterator[BackgroundTaskRunner]:
    task_runner = BackgroundTaskRunner(max_workers=2, queue_size=8)
    yield task_runner
    task_runner.shutdown(timeout=5)


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """
    Factory for small, fully decodable images.

    Usage:
        data = image_bytes("JPEG", size=(640, 480))
    """

    def _encode(image_format: str = "PNG", *, size: tuple[int, int] = (8, 8), exif: bytes | None = None) -> bytes:
        buffer = io.BytesIO()
        save_kwargs: dict[str, Any] = {"format": image_format}
        if exif:
            save_kwargs["exif"] = exif
        Image.new("RGB", size, (200, 40, 40)).save(buffer, **save_kwargs)
        return buffer.getvalue()

    return _encode


@pytest.fixture
def sample_png_binary(image_bytes) -> bytes:
    return image_bytes("PNG")


@pytest.fixture
def sample_jpeg_binary(image_bytes) -> bytes:
    return image_bytes("JPEG")
