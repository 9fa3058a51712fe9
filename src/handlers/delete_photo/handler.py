"""
Lambda handler responsible for deleting a photo.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import PhotoServiceError
from core.services.background import drain_before_return
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import DeletePhotoRequest, DeletePhotoResponse
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle DELETE /v1/owners/{owner_id}/photos/{photo_id}.

    Storage cleanup and primary reassignment run on the background runner
    and are drained, within the invocation's remaining time, before the
    response is returned.
    """
    logger.info("Received photo delete request", extra=request_log_context(event, context))

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(
            DeletePhotoRequest,
            {"owner_id": path_params.get("owner_id"), "photo_id": path_params.get("photo_id")},
        )
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    try:
        result = DeleteService().delete_photo(owner_id=request.owner_id, photo_id=request.photo_id)
    except PhotoServiceError as exc:
        logger.warning(
            "Photo deletion refused",
            extra={"photo_id": request.photo_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_error(exc)

    drain_before_return(context)

    metrics.add_metric(name="PhotoDeleted", unit=MetricUnit.Count, value=1)

    response = DeletePhotoResponse.model_validate(result)
    return ResponseBuilder.ok(response.model_dump())
