"""
Centralized API response builder for AWS Lambda / API Gateway.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from core.models.errors import PhotoServiceError
from core.utils.constants import (
    CLIENT_ERROR_CODES,
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_INVALID_INPUT,
    ERROR_STATUS_MAP,
    EXPOSE_HEADERS,
)
from core.utils.time import utc_now_iso

JsonDict = dict[str, Any]


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    DEFAULT_HEADERS: dict[str, str] = {
        "Content-Type": DEFAULT_CONTENT_TYPE,
    }

    DEFAULT_CORS_HEADERS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }

    @staticmethod
    def _build_headers(cors_origin: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = dict(ResponseBuilder.DEFAULT_HEADERS)

        # Always include CORS headers
        headers.update(ResponseBuilder.DEFAULT_CORS_HEADERS)

        # Allow override (for future multi-origin support)
        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin

        return headers

    @staticmethod
    def _response(
        *,
        status: HTTPStatus,
        body: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {}

        if body:
            payload.update(body)

        if request_id:
            payload["request_id"] = request_id

        response: JsonDict = {
            "statusCode": status.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": json.dumps(payload),
        }

        return response

    @staticmethod
    def ok(
        body: JsonDict,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder._response(
            status=HTTPStatus.OK,
            body=body,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def created(
        body: JsonDict,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder._response(
            status=HTTPStatus.CREATED,
            body=body,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def no_content(*, cors_origin: str | None = None) -> JsonDict:
        response: JsonDict = {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": "",
        }
        return response

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }

        if details:
            payload["details"] = details

        return ResponseBuilder._response(
            status=status,
            body=payload,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def bad_request(
        message: str,
        *,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.BAD_REQUEST,
            error=ERROR_CODE_INVALID_INPUT,
            message=message,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def internal_error(
        message: str = "Internal server error",
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def from_error(
        exc: PhotoServiceError,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Render a domain error with its stable code and mapped status.

        Details are echoed only for client-correctable errors; infrastructure
        failures expose the code and message alone.
        """
        status = ERROR_STATUS_MAP.get(exc.error_code, HTTPStatus.INTERNAL_SERVER_ERROR)
        details = exc.details if exc.error_code in CLIENT_ERROR_CODES else None

        return ResponseBuilder.error(
            status=status,
            error=exc.error_code,
            message=exc.message,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )
