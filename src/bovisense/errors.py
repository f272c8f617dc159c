"""Error taxonomy for the classification proxy.

Every error carries the HTTP status and the user-facing message returned
in the ``{"error": ...}`` body.
"""

from __future__ import annotations

from fastapi import status


class ClassificationError(Exception):
    """Base class for errors surfaced by the classification proxy."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Unknown error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ClassificationError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No image provided"


class ServiceUnavailableError(ClassificationError):
    """The upstream gateway credential is not configured."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "AI service not configured"


class RateLimitedError(ClassificationError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded. Please try again later."


class QuotaExceededError(ClassificationError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "AI service credits exhausted. Please add credits to continue."


class UpstreamError(ClassificationError):
    """Any other non-success answer from the gateway. Detail is logged, not returned."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "AI classification failed"


class InternalError(ClassificationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
