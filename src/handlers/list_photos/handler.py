"""
Lambda handler responsible for listing an owner's photos.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import PhotoServiceError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import query_flag, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import ListPhotosRequest, ListPhotosResponse, PhotoSummary
from .service import ListService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle GET /v1/owners/{owner_id}/photos?include_deleted=true|false.

    Photos are returned oldest first.
    """
    logger.info("Received photo list request", extra=request_log_context(event, context))

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    try:
        request = validate_request(
            ListPhotosRequest,
            {
                "owner_id": path_params.get("owner_id"),
                "include_deleted": query_flag(query_params, "include_deleted"),
            },
        )
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    try:
        photos = ListService().list_photos(
            owner_id=request.owner_id,
            include_deleted=request.include_deleted,
        )
    except PhotoServiceError as exc:
        logger.warning("Listing photos failed", extra={"owner_id": request.owner_id})
        return ResponseBuilder.from_error(exc)

    primary = next((photo.photo_id for photo in photos if photo.is_primary and not photo.is_deleted), None)

    response = ListPhotosResponse(
        owner_id=request.owner_id,
        photos=[PhotoSummary.from_photo(photo) for photo in photos],
        total_count=len(photos),
        primary_photo_id=primary,
    )

    return ResponseBuilder.ok(response.model_dump())
