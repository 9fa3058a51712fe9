"""Thin DynamoDB adapter wrapping boto3 table operations."""

from typing import Any, Protocol, cast

import boto3
from botocore.config import Config

from core.config import PhotoSettings, get_settings
from core.utils.constants import ENV_PHOTO_TABLE_NAME


class DynamoDBTable(Protocol):
    """Minimal DynamoDB Table protocol."""

    name: str
    meta: Any

    def put_item(self, *, Item: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def get_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def update_item(self, **kwargs: Any) -> dict[str, Any]: ...
    def query(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapterProtocol(Protocol):
    """Minimal adapter protocol (store-facing)."""

    table_name: str

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]: ...

    def get_item(self, *, key: dict[str, Any], consistent: bool = False) -> dict[str, Any]: ...

    def update_item(self, **kwargs: Any) -> dict[str, Any]: ...

    def query(self, **kwargs: Any) -> dict[str, Any]: ...

    def transact_write_items(self, *, items: list[dict[str, Any]]) -> dict[str, Any]: ...


class DynamoDBAdapter:
    """Low-level DynamoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 DynamoDB resource
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, settings: PhotoSettings | None = None) -> None:
        """Initialize DynamoDB table from settings (environment by default)."""
        settings = settings or get_settings()
        if not settings.table_name:
            raise RuntimeError(f"{ENV_PHOTO_TABLE_NAME} environment variable is not set")

        dynamodb = boto3.resource(
            "dynamodb",
            endpoint_url=settings.aws_endpoint_url,
            region_name=settings.aws_region,
            config=Config(
                connect_timeout=settings.backend_timeout,
                read_timeout=settings.backend_timeout,
                retries={"max_attempts": 2, "mode": "standard"},
            ),
        )

        self.table_name = settings.table_name
        self.table: DynamoDBTable = cast(
            DynamoDBTable,
            dynamodb.Table(settings.table_name),
        )

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]:
        """Insert item into DynamoDB.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {"Item": item}

        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression

        return self.table.put_item(**kwargs)

    def get_item(self, *, key: dict[str, Any], consistent: bool = False) -> dict[str, Any]:
        """Retrieve item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.get_item(Key=key, ConsistentRead=consistent)

    def update_item(self, **kwargs: Any) -> dict[str, Any]:
        """Update a single item.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.update_item(**kwargs)

    def query(self, **kwargs: Any) -> dict[str, Any]:
        """Execute DynamoDB query.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.query(**kwargs)

    def transact_write_items(self, *, items: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply several conditional writes atomically.

        Each entry is a high-level TransactItems element without TableName
        (e.g. {"Update": {"Key": ..., "UpdateExpression": ...}}); the table
        name is filled in here. The resource's client serializes Python
        values, so plain types are accepted.

        Raises boto3 exceptions - caught by domain implementation.
        """
        transact_items = []
        for entry in items:
            ((operation, params),) = entry.items()
            transact_items.append({operation: {**params, "TableName": self.table_name}})

        client = self.table.meta.client
        return cast(dict[str, Any], client.transact_write_items(TransactItems=transact_items))
