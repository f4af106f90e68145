"""
Best-effort extraction of structured data from model free text.

The models are asked for JSON, but what comes back is still free text: it may
be fenced in Markdown, truncated, or chatty. Nothing here raises on malformed
model output. Unreadable content degrades to default values and the raw text
is kept so the result stays auditable.
"""

import json
import logging
import re

from pydantic import ValidationError

from poopal.services.ai_schemas import (
    ChatReply,
    MealSuggestion,
    StoolAnalysis,
    SuggestedAction,
)

logger = logging.getLogger(__name__)

PARSE_FAILURE_FEATURE = "Failed to parse AI response as JSON"

MEAL_SUGGESTION_MARKER = "[MEAL_SUGGESTION]"
ADD_MEAL_BUTTON_TEXT = "✅ Add to Meal Logs"

_CODE_FENCE = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\n?")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")
_decoder = json.JSONDecoder()


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences (with optional language tag) and trim."""
    return _CODE_FENCE.sub("", text).strip()


def _parse_failure(raw_text: str) -> StoolAnalysis:
    logger.warning(
        "Image analysis response is not a JSON object (%d chars)", len(raw_text)
    )
    return StoolAnalysis(
        raw_analysis=raw_text, detected_features=[PARSE_FAILURE_FEATURE]
    )


def parse_image_analysis(raw_text: str) -> StoolAnalysis:
    """
    Turn a stool-analysis completion into a ``StoolAnalysis``.

    Each field falls back to its default independently when missing or of
    the wrong type (see the validators on ``StoolAnalysis``). If the text is
    not a JSON object at all, the result carries only the raw text and a
    failure note in ``detected_features``.
    """
    try:
        parsed = json.loads(strip_code_fences(raw_text))
    except (json.JSONDecodeError, RecursionError):
        return _parse_failure(raw_text)

    if not isinstance(parsed, dict):
        return _parse_failure(raw_text)

    try:
        return StoolAnalysis.model_validate({**parsed, "rawAnalysis": raw_text})
    except ValidationError as e:
        logger.warning("Image analysis response failed validation: %s", e)
        return _parse_failure(raw_text)


def parse_chat_response(raw_text: str) -> ChatReply:
    """
    Split a Dr. Poo reply into display text and an optional meal suggestion.

    The model marks a suggestion with ``[MEAL_SUGGESTION]`` followed by a JSON
    object. The object is decoded as one balanced span, so nested braces in
    the payload are fine, and then validated as a ``MealSuggestion``. If the
    marker is missing, or what follows it is not a valid meal, the whole text
    is returned as the message with no action.
    """
    marker_at = raw_text.find(MEAL_SUGGESTION_MARKER)
    if marker_at == -1:
        return ChatReply(message=raw_text.strip())

    payload_at = marker_at + len(MEAL_SUGGESTION_MARKER)
    while payload_at < len(raw_text) and raw_text[payload_at].isspace():
        payload_at += 1

    try:
        payload, payload_end = _decoder.raw_decode(raw_text, payload_at)
        suggestion = MealSuggestion.model_validate(payload)
    except (json.JSONDecodeError, RecursionError, ValidationError) as e:
        logger.warning(
            "Dropping malformed meal suggestion from chat reply: %s",
            type(e).__name__,
        )
        return ChatReply(message=raw_text.strip())

    message = raw_text[:marker_at] + raw_text[payload_end:]
    message = _EXTRA_BLANK_LINES.sub("\n\n", message).strip()

    return ChatReply(
        message=message,
        suggested_actions=[
            SuggestedAction(
                type="add_meal",
                data=suggestion.model_dump(mode="json", by_alias=True),
                button_text=ADD_MEAL_BUTTON_TEXT,
            )
        ],
    )
