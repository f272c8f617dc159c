"""API route definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status

from bovisense.api.middleware import CORS_HEADERS, verify_api_key
from bovisense.api.schemas import (
    ClassificationResponse,
    ClassifyRequest,
    ErrorResponse,
    HealthResponse,
)
from bovisense.config import get_settings
from bovisense.errors import (
    ClassificationError,
    InternalError,
    InvalidInputError,
    ServiceUnavailableError,
)

if TYPE_CHECKING:
    from bovisense.config import Settings
    from bovisense.vision.classification import LivestockClassifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")
protected = APIRouter(dependencies=[Depends(verify_api_key)])


def _get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _get_classifier(request: Request) -> LivestockClassifier:
    classifier: LivestockClassifier = request.app.state.classifier
    return classifier


@router.options("/classify-livestock", include_in_schema=False)
async def classify_livestock_preflight() -> Response:
    """Answer CORS pre-flight requests with an empty body."""
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@protected.post(
    "/classify-livestock",
    response_model=ClassificationResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_402_PAYMENT_REQUIRED: {"model": ErrorResponse},
        status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    summary="Classify an image as cattle or buffalo",
)
async def classify_livestock(body: ClassifyRequest, request: Request) -> ClassificationResponse:
    """Forward one data-URL image to the vision model and return a normalized result."""
    if not body.image:
        raise InvalidInputError

    # Read per request so a missing credential is a request error, not a startup failure.
    api_key = get_settings().gateway_api_key
    if not api_key:
        logger.error("BOVISENSE_GATEWAY_API_KEY is not configured")
        raise ServiceUnavailableError

    classifier = _get_classifier(request)
    try:
        result = await classifier.classify(body.image, api_key)
    except ClassificationError:
        raise
    except Exception as exc:
        logger.exception("Error in classify-livestock handler")
        raise InternalError(str(exc)) from exc

    return ClassificationResponse.from_classification(result)


@protected.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    settings = _get_settings(request)
    return HealthResponse(
        status="ok",
        model=settings.gateway_model,
        gateway_configured=bool(get_settings().gateway_api_key),
    )


router.include_router(protected)
