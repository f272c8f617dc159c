"""Upstream model gateway client.

Architecture:
    FastAPI (async) -> GatewayClient -> httpx.AsyncClient -> chat-completion gateway

One request per image, no retries. The pooled HTTP client is the only state
shared between requests; the credential is passed in per call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from fastapi import status

from bovisense.errors import QuotaExceededError, RateLimitedError, UpstreamError
from bovisense.vision.normalizer import normalize_reply
from bovisense.vision.prompts import build_messages

if TYPE_CHECKING:
    from bovisense.config import Settings
    from bovisense.vision.classification import Classification

logger = logging.getLogger(__name__)


class GatewayClient:
    """Classifies images by asking a hosted vision model through the gateway."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._url = settings.gateway_url
        self._model = settings.gateway_model
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.gateway_timeout),
            transport=transport,
        )

    async def complete(self, messages: list[dict[str, Any]], api_key: str) -> str:
        """Send a chat-completion request and return the assistant's text.

        Raises:
            RateLimitedError: The gateway answered 429.
            QuotaExceededError: The gateway answered 402.
            UpstreamError: Any other non-success status.
        """
        response = await self._client.post(
            self._url,
            headers={"Authorization": f"Bearer {api_key}"},
            json={"model": self._model, "messages": messages},
        )

        if not response.is_success:
            logger.error("AI Gateway error: %s %s", response.status_code, response.text)
            if response.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
                raise RateLimitedError
            if response.status_code == status.HTTP_402_PAYMENT_REQUIRED:
                raise QuotaExceededError
            raise UpstreamError

        data = response.json()
        content: str = data["choices"][0]["message"]["content"]
        return content

    async def classify(self, image: str, api_key: str) -> Classification:
        """Classify one data-URL image."""
        reply = await self.complete(build_messages(image), api_key)
        result = normalize_reply(reply)
        logger.info(
            "Classification successful: prediction=%s confidence=%.3f",
            result.prediction,
            result.confidence,
        )
        return result

    async def shutdown(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()
