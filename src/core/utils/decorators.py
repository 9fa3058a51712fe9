"""
Common decorators for API Gateway Lambda handlers.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import PhotoServiceError
from core.utils.constants import SERVICE_NAME
from core.utils.response import ResponseBuilder

logger = Logger(service=SERVICE_NAME, UTC=True)

JsonDict = dict[str, Any]


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        request_id: AWS request ID
        exc: Exception that was raised
        level: Log level ('warning' or 'exception')
    """
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error_type": type(exc).__name__,
    }

    if isinstance(exc, PhotoServiceError):
        log_extra["error_code"] = exc.error_code

    if level == "exception":
        logger.exception(message, extra=log_extra)
    else:
        logger.warning(message, extra=log_extra)


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - Automatic CORS preflight (OPTIONS) handling
    - Rendering of domain errors that escape the handler
    - A generic 500 for anything unexpected (raw messages are never returned)

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({...})
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)

        except PhotoServiceError as exc:
            _log_error(
                "Domain error escaped handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.from_error(
                exc,
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except Exception as exc:
            _log_error(
                "Unexpected error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level="exception",
            )
            return ResponseBuilder.internal_error(
                "We're experiencing technical difficulties. Please try again in a few moments.",
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
