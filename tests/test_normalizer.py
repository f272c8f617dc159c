"""Tests for model reply normalization."""

from __future__ import annotations

import json

import pytest

from bovisense.vision.classification import LivestockClass
from bovisense.vision.normalizer import (
    DEFAULT_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    MISSING_FEATURES_PLACEHOLDER,
    UNPARSED_FEATURES_PLACEHOLDER,
    extract_json_candidate,
    normalize_reply,
)

# ---------------------------------------------------------------------------
# JSON extraction
# ---------------------------------------------------------------------------


class TestExtractJsonCandidate:
    def test_prefers_json_fence(self) -> None:
        text = 'Notes:\n```\nignored\n```\nAnswer:\n```json\n{"prediction": "buffalo"}\n```'
        assert extract_json_candidate(text) == '{"prediction": "buffalo"}'

    def test_falls_back_to_any_fence(self) -> None:
        text = 'Here you go:\n```\n{"prediction": "cattle"}\n```\nThanks'
        assert extract_json_candidate(text) == '{"prediction": "cattle"}'

    def test_unfenced_text_is_used_whole(self) -> None:
        text = '{"prediction": "cattle"}'
        assert extract_json_candidate(text) == text


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalizeReply:
    def test_reference_example(self) -> None:
        result = normalize_reply(
            '{"prediction":"Buffalo","confidence":1.4,"features":{"cattle":[],"buffalo":["large horns"]}}'
        )
        assert result.prediction is LivestockClass.BUFFALO
        assert result.confidence == 1.0
        assert result.features.cattle == (MISSING_FEATURES_PLACEHOLDER,)
        assert result.features.buffalo == ("large horns",)

    def test_fenced_reply(self) -> None:
        text = """Sure!
```json
{
  "prediction": "cattle",
  "confidence": 0.92,
  "features": {
    "cattle": ["Lighter brown coat color", "Visible dewlap", "Visible dewlap"],
    "buffalo": ["Somewhat dark coloring"]
  }
}
```"""
        result = normalize_reply(text)
        assert result.prediction is LivestockClass.CATTLE
        assert result.confidence == pytest.approx(0.92)
        assert result.features.cattle == ("Lighter brown coat color", "Visible dewlap", "Visible dewlap")
        assert result.features.buffalo == ("Somewhat dark coloring",)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("buffalo", LivestockClass.BUFFALO),
            ("BUFFALO", LivestockClass.BUFFALO),
            ("cattle", LivestockClass.CATTLE),
            ("water buffalo", LivestockClass.CATTLE),
            (" buffalo", LivestockClass.CATTLE),
            ("yak", LivestockClass.CATTLE),
            (None, LivestockClass.CATTLE),
            (3, LivestockClass.CATTLE),
        ],
    )
    def test_prediction_is_one_of_two_classes(self, value: object, expected: LivestockClass) -> None:
        result = normalize_reply(json.dumps({"prediction": value, "confidence": 0.9}))
        assert result.prediction is expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("1.4", 1.0),
            ("-0.2", 0.0),
            ("0", 0.0),
            ("0.37", 0.37),
            ("1e308", 1.0),
            ('"0.8"', 0.8),
            ('"high"', DEFAULT_CONFIDENCE),
            ("null", DEFAULT_CONFIDENCE),
            ("true", DEFAULT_CONFIDENCE),
            ("[0.9]", DEFAULT_CONFIDENCE),
        ],
    )
    def test_confidence_clamped_or_defaulted(self, raw: str, expected: float) -> None:
        result = normalize_reply(f'{{"prediction": "cattle", "confidence": {raw}}}')
        assert result.confidence == pytest.approx(expected)

    def test_missing_confidence_defaults(self) -> None:
        assert normalize_reply('{"prediction": "cattle"}').confidence == DEFAULT_CONFIDENCE

    def test_non_array_features_get_placeholder(self) -> None:
        result = normalize_reply('{"prediction": "cattle", "features": {"cattle": "brown coat", "buffalo": null}}')
        assert result.features.cattle == (MISSING_FEATURES_PLACEHOLDER,)
        assert result.features.buffalo == (MISSING_FEATURES_PLACEHOLDER,)

    def test_features_not_an_object(self) -> None:
        result = normalize_reply('{"prediction": "cattle", "features": ["brown coat"]}')
        assert result.features.cattle == (MISSING_FEATURES_PLACEHOLDER,)
        assert result.features.buffalo == (MISSING_FEATURES_PLACEHOLDER,)

    def test_non_string_feature_items_are_stringified(self) -> None:
        result = normalize_reply('{"prediction": "cattle", "features": {"cattle": ["hump", 2], "buffalo": ["x"]}}')
        assert result.features.cattle == ("hump", "2")


# ---------------------------------------------------------------------------
# Heuristic fallback
# ---------------------------------------------------------------------------


class TestHeuristicFallback:
    def test_buffalo_mentioned(self) -> None:
        result = normalize_reply("I think this is a Buffalo, given the horns.")
        assert result.prediction is LivestockClass.BUFFALO
        assert result.confidence == FALLBACK_CONFIDENCE
        assert result.features.cattle == (UNPARSED_FEATURES_PLACEHOLDER,)
        assert result.features.buffalo == (UNPARSED_FEATURES_PLACEHOLDER,)

    def test_buffalo_absent_defaults_to_cattle(self) -> None:
        result = normalize_reply("I cannot tell what this animal is.")
        assert result.prediction is LivestockClass.CATTLE
        assert result.confidence == FALLBACK_CONFIDENCE

    def test_broken_json_in_fence(self) -> None:
        result = normalize_reply('```json\n{"prediction": "buffalo", \n```')
        assert result.prediction is LivestockClass.BUFFALO
        assert result.confidence == FALLBACK_CONFIDENCE

    def test_json_that_is_not_an_object(self) -> None:
        result = normalize_reply('"buffalo"')
        assert result.prediction is LivestockClass.BUFFALO
        assert result.confidence == FALLBACK_CONFIDENCE

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "```", "```json```", "null", "[]", "42", "{", "}{", "\x00\xff", "NaN", "```json\nnull\n```"],
    )
    def test_total_for_arbitrary_text(self, text: str) -> None:
        result = normalize_reply(text)
        assert result.prediction in (LivestockClass.CATTLE, LivestockClass.BUFFALO)
        assert 0.0 <= result.confidence <= 1.0
        assert result.features.cattle
        assert result.features.buffalo
