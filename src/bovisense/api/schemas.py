"""Pydantic request/response schemas for the BoviSense API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from bovisense.vision.classification import Classification


class ClassifyRequest(BaseModel):
    """Request body for the classification endpoint."""

    image: str | None = Field(default=None, description="Image encoded as a data URL")


class FeaturesResponse(BaseModel):
    """Visual features supporting each class."""

    cattle: list[str]
    buffalo: list[str]


class ClassificationResponse(BaseModel):
    """Normalized classification of a single image."""

    prediction: Literal["cattle", "buffalo"]
    confidence: float = Field(ge=0.0, le=1.0)
    features: FeaturesResponse

    @classmethod
    def from_classification(cls, result: Classification) -> ClassificationResponse:
        return cls(
            prediction=result.prediction.value,
            confidence=result.confidence,
            features=FeaturesResponse(
                cattle=list(result.features.cattle),
                buffalo=list(result.features.buffalo),
            ),
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    model: str
    gateway_configured: bool


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
