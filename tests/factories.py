"""
Factory functions for creating test data.

These factories create model instances with sensible defaults.
Use db.flush() to get IDs without committing (for transaction rollback).
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
import secrets

import bcrypt
from sqlalchemy.orm import Session

from poopal.models import (
    User,
    Session as UserSession,
    StoolLog,
    MealLog,
    SymptomLog,
    Food,
    Trigger,
    Achievement,
    UserAchievement,
    ChatMessage,
)


# =============================================================================
# User Factory
# =============================================================================


def create_user(
    db: Session,
    email: Optional[str] = None,
    password: str = "Testpassword123",
    is_admin: bool = False,
    **overrides,
) -> User:
    """
    Create a test user with hashed password.

    Args:
        db: Database session
        email: User email (auto-generated if not provided)
        password: Plain text password to hash
        is_admin: Whether user is an admin
        **overrides: Additional fields to override (e.g. created_at)

    Returns:
        Created User object
    """
    if email is None:
        email = f"testuser_{secrets.token_hex(4)}@example.com"

    password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode(
        "utf-8"
    )

    defaults = {
        "email": email.lower(),
        "password_hash": password_hash,
        "is_admin": is_admin,
    }
    defaults.update(overrides)

    user = User(**defaults)
    db.add(user)
    db.flush()
    return user


# =============================================================================
# Session Factory
# =============================================================================


def create_session(
    db: Session,
    user: User,
    expires_in: timedelta = timedelta(days=7),
    **overrides,
) -> UserSession:
    """Create a login session; a negative ``expires_in`` gives an expired one."""
    defaults = {
        "user_id": user.id,
        "token": secrets.token_urlsafe(32),
        "expires_at": datetime.now(timezone.utc) + expires_in,
        "user_agent": "pytest-test-client",
        "ip_address": "127.0.0.1",
    }
    defaults.update(overrides)

    session = UserSession(**defaults)
    db.add(session)
    db.flush()
    return session


# =============================================================================
# Log Factories
# =============================================================================


def create_stool_log(
    db: Session,
    user: User,
    bristol_type: int = 4,
    logged_at: Optional[datetime] = None,
    **overrides,
) -> StoolLog:
    """
    Create a stool log.

    Args:
        db: Database session
        user: Owner
        bristol_type: Bristol type 1-7
        logged_at: When it happened (defaults to now)
        **overrides: Additional fields (color, consistency, notes...)

    Returns:
        Created StoolLog object
    """
    defaults = {
        "user_id": user.id,
        "bristol_type": bristol_type,
        "logged_at": logged_at or datetime.now(timezone.utc),
    }
    defaults.update(overrides)

    log = StoolLog(**defaults)
    db.add(log)
    db.flush()
    return log


def create_meal_log(
    db: Session,
    user: User,
    meal_type: str = "LUNCH",
    description: Optional[str] = None,
    logged_at: Optional[datetime] = None,
    ingredients: Optional[List[str]] = None,
    **overrides,
) -> MealLog:
    if description is None:
        description = f"Test meal {secrets.token_hex(4)}"

    defaults = {
        "user_id": user.id,
        "meal_type": meal_type,
        "description": description,
        "ingredients": ingredients,
        "logged_at": logged_at or datetime.now(timezone.utc),
    }
    defaults.update(overrides)

    meal = MealLog(**defaults)
    db.add(meal)
    db.flush()
    return meal


def create_symptom_log(
    db: Session,
    user: User,
    symptom_type: str = "bloating",
    severity: Optional[int] = 5,
    logged_at: Optional[datetime] = None,
    **overrides,
) -> SymptomLog:
    defaults = {
        "user_id": user.id,
        "symptom_type": symptom_type,
        "severity": severity,
        "logged_at": logged_at or datetime.now(timezone.utc),
    }
    defaults.update(overrides)

    symptom = SymptomLog(**defaults)
    db.add(symptom)
    db.flush()
    return symptom


# =============================================================================
# Trigger / Achievement Factories
# =============================================================================


def create_food(
    db: Session, name: Optional[str] = None, category: Optional[str] = None
) -> Food:
    if name is None:
        name = f"food_{secrets.token_hex(4)}"

    food = Food(name=name, category=category)
    db.add(food)
    db.flush()
    return food


def create_trigger(
    db: Session,
    user: User,
    food: Optional[Food] = None,
    confidence_score: float = 80,
    trigger_type: str = "BLOATING",
    occurrences: int = 3,
    **overrides,
) -> Trigger:
    """Create a trigger (creates a food too when none is given)."""
    if food is None:
        food = create_food(db)

    defaults = {
        "user_id": user.id,
        "food_id": food.id,
        "trigger_type": trigger_type,
        "confidence_score": confidence_score,
        "occurrences": occurrences,
        "last_detected_at": datetime.now(timezone.utc),
    }
    defaults.update(overrides)

    trigger = Trigger(**defaults)
    db.add(trigger)
    db.flush()
    return trigger


def create_achievement(
    db: Session, code: Optional[str] = None, name: str = "Test Achievement"
) -> Achievement:
    if code is None:
        code = f"ACH_{secrets.token_hex(4).upper()}"

    achievement = Achievement(code=code, name=name)
    db.add(achievement)
    db.flush()
    return achievement


def unlock_achievement(
    db: Session, user: User, achievement: Achievement
) -> UserAchievement:
    unlocked = UserAchievement(user_id=user.id, achievement_id=achievement.id)
    db.add(unlocked)
    db.flush()
    return unlocked


# =============================================================================
# Chat Factory
# =============================================================================


def create_chat_message(
    db: Session, user: User, role: str, content: str
) -> ChatMessage:
    message = ChatMessage(user_id=user.id, role=role, content=content)
    db.add(message)
    db.flush()
    return message
