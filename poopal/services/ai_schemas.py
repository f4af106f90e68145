"""
Pydantic models for the structured results extracted from model output.

``StoolAnalysis`` is produced by ``parse_image_analysis`` and ``ChatReply``
by ``parse_chat_response`` (see ai_normalizer.py). Proactive insights reuse
``ChatReply`` so the client renders both the same way.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from poopal.models.meal_log import MealType
from poopal.models.stool_log import Consistency
from poopal.schemas import CamelModel


def _finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if math.isfinite(value) else None


# --- Stool image analysis (analyze_stool_image) ---


class StoolAnalysis(CamelModel):
    """
    Image analysis result.

    Validated straight from the model's JSON object. A field that is present
    but unusable falls back to its default instead of failing validation.
    """

    bristol_type: Optional[int] = None
    color: Optional[str] = None
    color_palette: List[str] = Field(default_factory=list)
    consistency: Optional[str] = None
    blood_present: bool = False
    mucus_present: bool = False
    undigested_food: bool = False
    confidence_score: float = 0
    raw_analysis: str
    detected_features: List[str] = Field(default_factory=list)

    @field_validator("bristol_type", mode="before")
    @classmethod
    def coerce_bristol_type(cls, value: Any) -> Optional[int]:
        number = _finite_number(value)
        if number is None:
            return None
        bristol = int(math.floor(number + 0.5))
        return bristol if 1 <= bristol <= 7 else None

    @field_validator("color", mode="before")
    @classmethod
    def coerce_color(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @field_validator("color_palette", "detected_features", mode="before")
    @classmethod
    def keep_strings(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    @field_validator("consistency", mode="before")
    @classmethod
    def coerce_consistency(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        candidate = value.strip().upper()
        return candidate if candidate in Consistency.__members__ else None

    @field_validator("blood_present", "mucus_present", "undigested_food", mode="before")
    @classmethod
    def strict_flag(cls, value: Any) -> bool:
        return value is True

    @field_validator("confidence_score", mode="before")
    @classmethod
    def coerce_confidence(cls, value: Any) -> float:
        number = _finite_number(value)
        return 0 if number is None else number


# --- Chat replies (chat, proactive insights) ---


class MealSuggestion(CamelModel):
    """Meal the assistant proposes to log, in the shape ``POST /meals`` accepts."""

    meal_type: MealType
    description: str = Field(min_length=1)
    ingredients: List[str] = Field(default_factory=list)
    estimated_fiber_g: Optional[float] = Field(default=None, ge=0)
    estimated_water_ml: Optional[float] = Field(default=None, ge=0)
    logged_at: datetime


class SuggestedAction(CamelModel):
    type: Literal["add_meal", "log_stool", "view_trigger", "none"]
    data: Optional[Dict[str, Any]] = None
    button_text: Optional[str] = None


class ChatReply(CamelModel):
    message: str
    suggested_actions: Optional[List[SuggestedAction]] = None

    @property
    def suggested_meal_action(self) -> Optional[SuggestedAction]:
        """The ``add_meal`` action, if the reply carried a meal suggestion."""
        for action in self.suggested_actions or []:
            if action.type == "add_meal":
                return action
        return None
