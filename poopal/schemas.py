"""
Request and response models for the JSON API.

Field names are snake_case in Python and camelCase on the wire
(``bristolType``, ``mealType``, ``loggedAt``...). Incoming bodies accept
either spelling.
"""

import re
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from poopal.models.meal_log import MealType
from poopal.models.stool_log import Consistency, StoolSize


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class CamelRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True
    )


# --- Auth ---


class RegisterRequest(CamelRequest):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    password: str = Field(min_length=8, max_length=128)
    username: Optional[str] = Field(default=None, min_length=3, max_length=30)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", value):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one number")
        return value


class LoginRequest(CamelRequest):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserOut(CamelModel):
    id: UUID
    email: str
    username: Optional[str] = None
    onboarding_completed: bool = False
    created_at: Optional[datetime] = None


class AuthResult(CamelModel):
    user: UserOut
    token: str


# --- Logs ---


class StoolLogCreate(CamelRequest):
    bristol_type: int = Field(ge=1, le=7)
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    consistency: Optional[Consistency] = None
    size: Optional[StoolSize] = None
    urgency: Optional[int] = Field(default=None, ge=1, le=10)
    completeness: Optional[int] = Field(default=None, ge=1, le=10)
    blood_present: bool = False
    mucus_present: bool = False
    undigested_food: bool = False
    notes: Optional[str] = Field(default=None, max_length=500)
    logged_at: datetime


class StoolLogOut(CamelModel):
    id: int
    bristol_type: int
    color: Optional[str] = None
    consistency: Optional[str] = None
    size: Optional[str] = None
    urgency: Optional[int] = None
    completeness: Optional[int] = None
    blood_present: bool = False
    mucus_present: bool = False
    undigested_food: bool = False
    notes: Optional[str] = None
    logged_at: datetime
    created_at: Optional[datetime] = None


class MealLogCreate(CamelRequest):
    meal_type: MealType
    description: str = Field(min_length=1)
    ingredients: Optional[List[str]] = None
    estimated_fiber_g: Optional[float] = Field(default=None, ge=0)
    estimated_water_ml: Optional[float] = Field(default=None, ge=0)
    logged_at: datetime


class MealLogOut(CamelModel):
    id: int
    meal_type: str
    description: str
    ingredients: Optional[List[str]] = None
    estimated_fiber_g: Optional[float] = None
    estimated_water_ml: Optional[float] = None
    logged_at: datetime
    created_at: Optional[datetime] = None


class SymptomLogCreate(CamelRequest):
    symptom_type: str = Field(min_length=1, max_length=100)
    severity: Optional[int] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = Field(default=None, max_length=500)
    logged_at: datetime


class SymptomLogOut(CamelModel):
    id: int
    symptom_type: str
    severity: Optional[int] = None
    notes: Optional[str] = None
    logged_at: datetime
    created_at: Optional[datetime] = None


# --- Derived statistics (recomputed per request, never stored) ---


class DashboardSummary(CamelModel):
    gut_health_score: int
    streak_days: int
    triggers_found: int
    achievements_unlocked: int
    total_achievements: int
    total_logs: int
    last_log_date: Optional[datetime] = None


class TrendPoint(CamelModel):
    date: date
    avg_bristol_type: Optional[float] = None
    bristol_type: Optional[int] = None
    logs_count: int


class CalendarDay(CamelModel):
    date: date
    bristol_type: Optional[int] = None
    logs_count: int
    has_symptoms: bool = False
    color: Optional[str] = None


class WeekStats(CamelModel):
    start: datetime
    end: datetime
    avg_bristol: Optional[float] = None
    log_count: int = 0
    symptom_count: int = 0


class WeeklyComparison(CamelModel):
    this_week: WeekStats
    last_week: WeekStats


class TriggerOut(CamelModel):
    id: int
    trigger_type: str
    confidence_score: float
    occurrences: int
    last_detected_at: Optional[datetime] = None
    user_confirmed: bool = False
    food_name: str
    food_category: Optional[str] = None


# --- AI endpoints ---


class AnalyzeImageRequest(CamelRequest):
    image_base64: str = Field(min_length=1)
    custom_prompt: Optional[str] = None


class ChatRequest(CamelRequest):
    message: str = Field(min_length=1, max_length=1000)
