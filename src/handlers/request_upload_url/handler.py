"""
Lambda handler that issues pre-signed URLs for direct photo uploads.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import PhotoServiceError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import parse_json_body, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import UploadUrlRequest, UploadUrlResponse
from .service import DirectTransferService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle POST /v1/photos/upload-url.

    Expected body:
    {
        "owner_id": "user_123",
        "file_name": "beach.png",
        "content_type": "image/png",
        "file_size": 204800
    }
    """
    logger.info("Received upload URL request", extra=request_log_context(event, context))

    try:
        request = validate_request(UploadUrlRequest, parse_json_body(event))
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )
    except PhotoServiceError as exc:
        return ResponseBuilder.from_error(exc)

    try:
        result = DirectTransferService().request_upload_url(
            owner_id=request.owner_id,
            file_name=request.file_name,
            content_type=request.content_type,
            file_size=request.file_size,
        )
    except PhotoServiceError as exc:
        logger.warning(
            "Upload URL request refused",
            extra={"owner_id": request.owner_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_error(exc)

    metrics.add_metric(name="UploadUrlIssued", unit=MetricUnit.Count, value=1)

    response = UploadUrlResponse.model_validate(result)
    return ResponseBuilder.ok(response.model_dump())
