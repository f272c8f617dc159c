"""Session-local classification results and their JSON export."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from bovisense.vision.classification import FeatureEvidence, LivestockClass

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from pathlib import Path

HIGH_CONFIDENCE_THRESHOLD: float = 0.8
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(frozen=True)
class ClassificationResult:
    """One classified image as kept in the session history."""

    id: str
    image: str
    prediction: LivestockClass
    confidence: float
    features: FeatureEvidence
    timestamp: int

    @classmethod
    def from_response(cls, data: Mapping[str, Any], *, image: str, timestamp: int, index: int) -> ClassificationResult:
        """Build a result from a proxy response body.

        Args:
            data: Decoded ``{"prediction", "confidence", "features"}`` body.
            image: Data URL of the classified image.
            timestamp: Submission instant in epoch milliseconds.
            index: Position of the image in its batch.
        """
        features = data["features"]
        return cls(
            id=f"{timestamp}-{index}",
            image=image,
            prediction=LivestockClass(data["prediction"]),
            confidence=float(data["confidence"]),
            features=FeatureEvidence(cattle=tuple(features["cattle"]), buffalo=tuple(features["buffalo"])),
            timestamp=timestamp,
        )

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence >= HIGH_CONFIDENCE_THRESHOLD

    @property
    def submitted_at(self) -> datetime:
        return _EPOCH + timedelta(milliseconds=self.timestamp)

    def to_export_dict(self) -> dict[str, Any]:
        """Fields written by the download feature. The image itself is not exported."""
        return {
            "prediction": self.prediction.value,
            "confidence": self.confidence,
            "features": self.features.to_dict(),
            "timestamp": self.submitted_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        }


def export_result(result: ClassificationResult, directory: Path) -> Path:
    """Write ``classification-<id>.json`` into ``directory`` and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"classification-{result.id}.json"
    path.write_text(json.dumps(result.to_export_dict(), indent=2), encoding="utf-8")
    return path


class ClassificationHistory:
    """Newest-first results for the current session. No dedup, no eviction, no persistence."""

    def __init__(self) -> None:
        self._results: list[ClassificationResult] = []

    def add(self, result: ClassificationResult) -> None:
        self._results.insert(0, result)

    @property
    def current(self) -> ClassificationResult | None:
        """The most recently added result."""
        return self._results[0] if self._results else None

    @property
    def results(self) -> tuple[ClassificationResult, ...]:
        return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[ClassificationResult]:
        return iter(tuple(self._results))
