"""Batch classification against the BoviSense proxy.

Images in a batch are classified strictly one after another. A failure on
one image is reported and the batch moves on; an unexpected error aborts it.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from bovisense.client.history import ClassificationHistory, ClassificationResult
from bovisense.client.notifications import Notification, NotificationLog
from bovisense.client.preview import encode_previews
from bovisense.client.validator import filter_valid_files

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from bovisense.client.files import ImageFile
    from bovisense.client.notifications import Notifier

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """The proxy answered with an error status."""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ProxyClient:
    """Posts data-URL images to the classification endpoint."""

    def __init__(self, client: httpx.AsyncClient, url: str, api_key: str | None = None) -> None:
        self._client = client
        self._url = url
        self._headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}

    async def classify(self, image: str) -> dict[str, Any]:
        """Classify one image and return the decoded response body.

        Raises:
            ProxyError: The proxy returned a non-success status.
            httpx.HTTPError: The request could not be completed.
        """
        response = await self._client.post(self._url, json={"image": image}, headers=self._headers)
        if not response.is_success:
            raise ProxyError(_error_message(response), response.status_code)
        data: dict[str, Any] = response.json()
        return data


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class BatchOutcome:
    """What happened to one submitted batch."""

    submitted: int
    classified: list[ClassificationResult] = field(default_factory=list)
    failed: int = 0
    aborted: bool = False


class ClassificationSession:
    """Holds the session history and runs batches through the proxy."""

    def __init__(
        self,
        proxy: ProxyClient,
        notifier: Notifier | None = None,
        history: ClassificationHistory | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.proxy = proxy
        self.notifier: Notifier = notifier if notifier is not None else NotificationLog()
        self.history = history if history is not None else ClassificationHistory()
        self._clock = clock

    async def classify_batch(self, files: Sequence[ImageFile]) -> BatchOutcome:
        """Validate, encode and classify ``files``; successes are prepended to the history."""
        accepted = filter_valid_files(files, self.notifier)
        outcome = BatchOutcome(submitted=len(accepted))
        if not accepted:
            return outcome

        try:
            previews = sorted(await encode_previews(accepted), key=lambda p: p.index)
            for preview in previews:
                try:
                    data = await self.proxy.classify(preview.data_url)
                except (ProxyError, httpx.HTTPError) as exc:
                    logger.error("Classification error for %s: %s", preview.file.name, exc)
                    outcome.failed += 1
                    self.notifier.notify(
                        Notification(
                            title="Classification failed",
                            description=str(exc) or "Failed to classify image",
                            destructive=True,
                        )
                    )
                    continue

                result = ClassificationResult.from_response(
                    data,
                    image=preview.data_url,
                    timestamp=self._clock(),
                    index=preview.index,
                )
                self.history.add(result)
                outcome.classified.append(result)
        except Exception:
            logger.exception("Unexpected error while classifying batch")
            outcome.aborted = True
            self.notifier.notify(
                Notification(title="Error", description="An unexpected error occurred", destructive=True)
            )
            return outcome

        count = len(outcome.classified)
        self.notifier.notify(
            Notification(
                title="Classification complete",
                description=f"Successfully classified {count} image{'s' if count != 1 else ''}",
            )
        )
        return outcome
