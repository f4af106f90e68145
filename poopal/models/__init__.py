"""
Database models for Poopal.

Import all models here so Alembic can detect them for migrations.
"""

from poopal.database import Base
from poopal.models.user import User
from poopal.models.session import Session
from poopal.models.stool_log import StoolLog, Consistency, StoolSize
from poopal.models.meal_log import MealLog, MealType
from poopal.models.symptom_log import SymptomLog
from poopal.models.trigger import Food, Trigger
from poopal.models.achievement import Achievement, UserAchievement
from poopal.models.chat_message import ChatMessage

__all__ = [
    "Base",
    "User",
    "Session",
    "StoolLog",
    "Consistency",
    "StoolSize",
    "MealLog",
    "MealType",
    "SymptomLog",
    "Food",
    "Trigger",
    "Achievement",
    "UserAchievement",
    "ChatMessage",
]
