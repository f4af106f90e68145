from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    DateTime,
    ForeignKey,
    Index,
    Boolean,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from poopal.database import Base


class Food(Base):
    """Food catalogue entry referenced by triggers."""

    __tablename__ = "foods"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    category = Column(String(100))

    triggers = relationship("Trigger", back_populates="food")


class Trigger(Base):
    """
    Food associated with adverse digestive outcomes for one user.

    Rows are maintained by an external correlation job; this application
    only reads them.
    """

    __tablename__ = "triggers"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    food_id = Column(
        Integer, ForeignKey("foods.id", ondelete="CASCADE"), nullable=False
    )
    trigger_type = Column(String(50), nullable=False)  # e.g. "BLOATING", "DIARRHEA"
    confidence_score = Column(Float, nullable=False, default=0)  # 0-100
    occurrences = Column(Integer, nullable=False, default=0)
    last_detected_at = Column(DateTime(timezone=True), server_default=func.now())
    user_confirmed = Column(Boolean, default=False, nullable=False)

    # Relationships
    user = relationship("User", back_populates="triggers")
    food = relationship("Food", back_populates="triggers")

    __table_args__ = (
        Index("idx_triggers_user_id", "user_id"),
        Index("idx_triggers_user_confidence", "user_id", "confidence_score"),
    )
