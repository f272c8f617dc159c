"""Prompt text and chat message construction for the vision model."""

from __future__ import annotations

from typing import Any

SYSTEM_PROMPT = """You are an expert livestock classification AI. Your task is to analyze images and determine if they contain cattle or buffalo.

Provide your response in JSON format with:
- prediction: "cattle" or "buffalo"
- confidence: a number between 0 and 1
- features: an object with two arrays:
  - cattle: list of visual features that suggest cattle
  - buffalo: list of visual features that suggest buffalo

Key distinguishing features:
Cattle: smaller body size, shorter and wider head, smaller curved horns, lighter colored coat (often brown/white), less pronounced hump, dewlap often present
Buffalo: larger and more muscular body, longer and narrower head, large curved or spiral horns, darker coat (black/dark grey), prominent hump on shoulders, thicker and darker skin

Example response:
{
  "prediction": "cattle",
  "confidence": 0.92,
  "features": {
    "cattle": ["Lighter brown coat color", "Smaller body frame", "Short curved horns", "Visible dewlap"],
    "buffalo": ["Somewhat dark coloring"]
  }
}"""

USER_INSTRUCTION = (
    "Please analyze this image and classify it as either cattle or buffalo. "
    "Provide detailed reasoning based on visual features."
)


def build_messages(image: str) -> list[dict[str, Any]]:
    """Build the system + user message pair for one data-URL image."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": USER_INSTRUCTION},
                {"type": "image_url", "image_url": {"url": image}},
            ],
        },
    ]
