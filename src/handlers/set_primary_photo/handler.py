"""
Lambda handler that sets an owner's primary photo.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import PhotoServiceError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import SetPrimaryRequest, SetPrimaryResponse
from .service import SetPrimaryService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle PUT /v1/owners/{owner_id}/photos/{photo_id}/primary."""
    logger.info("Received set primary request", extra=request_log_context(event, context))

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(
            SetPrimaryRequest,
            {"owner_id": path_params.get("owner_id"), "photo_id": path_params.get("photo_id")},
        )
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    try:
        result = SetPrimaryService().set_primary(owner_id=request.owner_id, photo_id=request.photo_id)
    except PhotoServiceError as exc:
        logger.warning(
            "Set primary refused",
            extra={"photo_id": request.photo_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_error(exc)

    response = SetPrimaryResponse.model_validate(result)
    if not response.already_primary:
        metrics.add_metric(name="PrimaryPhotoSet", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(response.model_dump())
