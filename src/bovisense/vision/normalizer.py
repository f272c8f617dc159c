"""Turn the vision model's free-text reply into a well-formed classification.

The model is asked for JSON but may wrap it in a markdown fence, add prose
around it, or ignore the format entirely. ``normalize_reply`` accepts any
string and always returns a valid ``Classification``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from bovisense.vision.classification import Classification, FeatureEvidence, LivestockClass

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE: float = 0.5
FALLBACK_CONFIDENCE: float = 0.75
MISSING_FEATURES_PLACEHOLDER = "Visual analysis complete"
UNPARSED_FEATURES_PLACEHOLDER = "Unable to extract detailed features"

_JSON_FENCE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL)
_ANY_FENCE = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)


def extract_json_candidate(text: str) -> str:
    """Return the body of a ```json fence, else of any fence, else the whole text."""
    match = _JSON_FENCE.search(text) or _ANY_FENCE.search(text)
    return match.group(1) if match else text


def normalize_reply(text: str) -> Classification:
    """Parse and normalize a raw model reply. Never raises."""
    candidate = extract_json_candidate(text)
    try:
        parsed = json.loads(candidate)
    except ValueError:
        parsed = None

    if not isinstance(parsed, dict):
        logger.error("Failed to parse AI response: %s", text)
        return _heuristic_classification(text)

    return Classification(
        prediction=_normalize_prediction(parsed.get("prediction")),
        confidence=_normalize_confidence(parsed.get("confidence")),
        features=_normalize_features(parsed.get("features")),
    )


def _heuristic_classification(text: str) -> Classification:
    # Anything without the word "buffalo" is labelled cattle.
    prediction = LivestockClass.BUFFALO if "buffalo" in text.lower() else LivestockClass.CATTLE
    placeholder = (UNPARSED_FEATURES_PLACEHOLDER,)
    return Classification(
        prediction=prediction,
        confidence=FALLBACK_CONFIDENCE,
        features=FeatureEvidence(cattle=placeholder, buffalo=placeholder),
    )


def _normalize_prediction(value: Any) -> LivestockClass:
    if isinstance(value, str) and value.lower() == LivestockClass.BUFFALO:
        return LivestockClass.BUFFALO
    return LivestockClass.CATTLE


def _normalize_confidence(value: Any) -> float:
    if isinstance(value, bool):
        return DEFAULT_CONFIDENCE
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return DEFAULT_CONFIDENCE
    if not isinstance(value, int | float) or math.isnan(value):
        return DEFAULT_CONFIDENCE
    return min(max(float(value), 0.0), 1.0)


def _normalize_features(value: Any) -> FeatureEvidence:
    features = value if isinstance(value, dict) else {}
    return FeatureEvidence(
        cattle=_feature_list(features.get("cattle")),
        buffalo=_feature_list(features.get("buffalo")),
    )


def _feature_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        return (MISSING_FEATURES_PLACEHOLDER,)
    return tuple(item if isinstance(item, str) else json.dumps(item) for item in value)
