"""Livestock classification types.

The classifier itself is a hosted vision model reached through the gateway;
this module only defines what a normalized answer looks like.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class LivestockClass(StrEnum):
    CATTLE = "cattle"
    BUFFALO = "buffalo"


@dataclass(frozen=True)
class FeatureEvidence:
    """Visual features the model cited for each class, in model output order."""

    cattle: tuple[str, ...]
    buffalo: tuple[str, ...]

    def to_dict(self) -> dict[str, list[str]]:
        return {"cattle": list(self.cattle), "buffalo": list(self.buffalo)}


@dataclass(frozen=True)
class Classification:
    """A normalized prediction for a single image."""

    prediction: LivestockClass
    confidence: float
    features: FeatureEvidence


class LivestockClassifier(Protocol):
    """Protocol for anything that can classify a data-URL image."""

    async def classify(self, image: str, api_key: str) -> Classification:
        """Classify an image.

        Args:
            image: Data URL of the image to classify.
            api_key: Credential for the upstream model gateway.

        Returns:
            The normalized classification.
        """
        ...
