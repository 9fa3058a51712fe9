"""
Lambda handler responsible for mediated photo uploads.
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

from .models import PhotoUploadRequest, PhotoUploadResponse
from .service import UploadCoordinator

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle POST /v1/photos.

    The handler decodes the base64-encoded image, runs the upload
    pipeline and returns a summary of the created photo.

    Expected body:
    {
        "owner_id": "user_123",
        "file": "<base64>",
        "content_type": "image/jpeg",
        "file_size": 123456,       # optional
        "is_primary": false        # optional
    }
    """
    logger.info("Received photo upload request", extra=request_log_context(event, context))

    try:
        request = validate_request(PhotoUploadRequest, parse_json_body(event))
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )
    except PhotoServiceError as exc:
        return ResponseBuilder.from_error(exc)

    try:
        result = UploadCoordinator().upload(
            owner_id=request.owner_id,
            data=request.decoded_file(),
            content_type=request.content_type,
            declared_size=request.file_size,
            is_primary=request.is_primary,
        )
    except PhotoServiceError as exc:
        logger.warning(
            "Photo upload failed",
            extra={"owner_id": request.owner_id, "error_code": exc.error_code},
        )
        metrics.add_metric(name="PhotoUploadFailed", unit=MetricUnit.Count, value=1)
        return ResponseBuilder.from_error(exc)

    metrics.add_metric(name="PhotoUploaded", unit=MetricUnit.Count, value=1)

    response = PhotoUploadResponse.model_validate(result)
    return ResponseBuilder.created(response.model_dump())
