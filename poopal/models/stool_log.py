import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Index,
    Boolean,
    CheckConstraint,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from poopal.database import Base


class Consistency(str, enum.Enum):
    """Stool consistency as reported by the user or the image analysis."""

    HARD = "HARD"
    FIRM = "FIRM"
    SOFT = "SOFT"
    LIQUID = "LIQUID"
    WATERY = "WATERY"


class StoolSize(str, enum.Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


IDEAL_BRISTOL_TYPES = frozenset({3, 4})


class StoolLog(Base):
    """A single bowel movement, classified on the Bristol stool scale."""

    __tablename__ = "stool_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    bristol_type = Column(Integer, nullable=False)  # 1 (hard lumps) .. 7 (liquid)
    color = Column(String(7))  # HEX, e.g. "#8B4513"
    consistency = Column(String(10))  # Consistency value
    size = Column(String(10))  # StoolSize value
    urgency = Column(Integer)  # 1-10
    completeness = Column(Integer)  # 1-10
    blood_present = Column(Boolean, default=False, nullable=False)
    mucus_present = Column(Boolean, default=False, nullable=False)
    undigested_food = Column(Boolean, default=False, nullable=False)
    notes = Column(Text)
    logged_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="stool_logs")

    __table_args__ = (
        Index("idx_stool_logs_user_id", "user_id"),
        Index("idx_stool_logs_user_logged_at", "user_id", "logged_at"),
        CheckConstraint(
            "bristol_type BETWEEN 1 AND 7", name="ck_stool_logs_bristol_type"
        ),
    )
