import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Index,
    Float,
    JSON,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from poopal.database import Base


class MealType(str, enum.Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACK = "SNACK"


class MealLog(Base):
    """Meal logging, entered manually or accepted from a chat suggestion."""

    __tablename__ = "meal_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    meal_type = Column(String(10), nullable=False)  # MealType value
    description = Column(Text, nullable=False)
    ingredients = Column(
        JSON().with_variant(JSONB(), "postgresql")
    )  # ["oats", "banana", ...] in the order given
    estimated_fiber_g = Column(Float)
    estimated_water_ml = Column(Float)
    logged_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="meal_logs")

    __table_args__ = (
        Index("idx_meal_logs_user_id", "user_id"),
        Index("idx_meal_logs_user_logged_at", "user_id", "logged_at"),
    )
