from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from poopal.database import Base


class SymptomLog(Base):
    """Digestive symptom occurrence (bloating, cramps, ...)."""

    __tablename__ = "symptom_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    symptom_type = Column(String(100), nullable=False)  # e.g. "bloating"
    severity = Column(Integer)  # 1-10 scale
    notes = Column(Text)
    logged_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="symptom_logs")

    __table_args__ = (
        Index("idx_symptom_logs_user_id", "user_id"),
        Index("idx_symptom_logs_user_logged_at", "user_id", "logged_at"),
    )
