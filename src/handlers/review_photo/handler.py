"""
Lambda handler for moderation decisions (approve, reject, resubmit).
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

from .models import ReviewPhotoRequest, ReviewPhotoResponse
from .service import ReviewService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle POST /v1/photos/{photo_id}/review.

    Expected body:
    {
        "action": "approve" | "reject" | "resubmit",
        "reason": "..."            # required for reject
    }
    """
    logger.info("Received photo review request", extra=request_log_context(event, context))

    path_params = event.get("pathParameters") or {}

    try:
        body = parse_json_body(event)
        request = validate_request(
            ReviewPhotoRequest,
            {**body, "photo_id": path_params.get("photo_id")},
        )
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )
    except PhotoServiceError as exc:
        return ResponseBuilder.from_error(exc)

    try:
        photo = ReviewService().review_photo(
            photo_id=request.photo_id,
            status=request.target_status,
            reason=request.reason,
        )
    except PhotoServiceError as exc:
        logger.warning(
            "Photo review refused",
            extra={"photo_id": request.photo_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_error(exc)

    metrics.add_metric(name="PhotoReviewed", unit=MetricUnit.Count, value=1)

    response = ReviewPhotoResponse(
        photo_id=photo.photo_id,
        verification_status=photo.verification_status.value,
        verification_reason=photo.verification_reason,
        is_primary=photo.is_primary,
    )
    return ResponseBuilder.ok(response.model_dump())
