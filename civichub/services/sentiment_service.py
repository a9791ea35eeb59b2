"""Urgency/tone classification for new reports."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from civichub.core.config import settings
from civichub.core.errors import ClassificationError
from civichub.models.enums import Sentiment
from civichub.services.ai_service import AIServiceError, generate_structured

logger = logging.getLogger(__name__)

Classifier = Callable[[str, str], Sentiment]

SENTIMENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["sentiment"],
    "properties": {
        "sentiment": {"type": "string", "enum": [s.value for s in Sentiment]},
        "reason": {"type": "string"},
    },
}


def build_sentiment_prompt(title: str, description: str) -> str:
    return (
        "Analyze the sentiment and urgency of this civic problem report. "
        "Classify it as one of: urgent (immediate danger/severe issue), "
        "concerned (significant problem), neutral (informational), "
        "or positive (improvement/thank you).\n\n"
        f'Title: "{title}"\n'
        f'Description: "{description}"'
    )


def classify_sentiment(title: str, description: str) -> Sentiment:
    """Return the sentiment label for a report. Never falls back to a default."""
    try:
        result = generate_structured(
            provider=settings.ai_provider,
            prompt=build_sentiment_prompt(title, description),
            schema=SENTIMENT_SCHEMA,
        )
    except AIServiceError as exc:
        logger.warning("Sentiment classification failed: %s", exc)
        raise ClassificationError(f"Sentiment analysis failed: {exc}") from exc
    except Exception as exc:  # noqa: BLE001 - provider SDKs raise their own types
        logger.exception("Unexpected classifier failure")
        raise ClassificationError(f"Sentiment analysis failed: {exc}") from exc

    try:
        return Sentiment(result["sentiment"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ClassificationError(f"Classifier returned an unknown label: {result!r}") from exc
