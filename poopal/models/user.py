from sqlalchemy import Column, String, DateTime, Boolean, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid

from poopal.database import Base


class User(Base):
    """User model for authentication and data ownership."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    username = Column(String(30), unique=True, nullable=True)
    password_hash = Column(String(255), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    onboarding_completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    stool_logs = relationship(
        "StoolLog", back_populates="user", cascade="all, delete-orphan"
    )
    meal_logs = relationship(
        "MealLog", back_populates="user", cascade="all, delete-orphan"
    )
    symptom_logs = relationship(
        "SymptomLog", back_populates="user", cascade="all, delete-orphan"
    )
    triggers = relationship(
        "Trigger", back_populates="user", cascade="all, delete-orphan"
    )
    achievements = relationship(
        "UserAchievement", back_populates="user", cascade="all, delete-orphan"
    )
    chat_messages = relationship(
        "ChatMessage", back_populates="user", cascade="all, delete-orphan"
    )
    sessions = relationship(
        "Session", back_populates="user", cascade="all, delete-orphan"
    )
