"""Helpers for reading API Gateway proxy events."""

import json
from typing import Any

from core.models.errors import InvalidInputError


def request_log_context(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Structured fields describing an inbound request, for the first log line of a handler."""
    return {
        "http_method": event.get("httpMethod"),
        "path": event.get("path"),
        "query_params": event.get("queryStringParameters"),
        "request_id": getattr(context, "aws_request_id", None),
        "function_name": getattr(context, "function_name", None),
        "remaining_time_ms": context.get_remaining_time_in_millis()
        if hasattr(context, "get_remaining_time_in_millis")
        else None,
    }


def parse_json_body(event: dict[str, Any]) -> dict[str, Any]:
    """Decode the JSON body of a proxy event.

    Raises:
        InvalidInputError: If the body is not a JSON object
    """
    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        raise InvalidInputError(message="Invalid JSON body") from exc

    if not isinstance(body, dict):
        raise InvalidInputError(message="Request body must be a JSON object")

    return body


def query_flag(params: dict[str, Any], name: str) -> bool:
    """Interpret a query-string parameter as a boolean ("true"/"1"/"yes")."""
    return str(params.get(name) or "false").strip().lower() in ("true", "1", "yes")
