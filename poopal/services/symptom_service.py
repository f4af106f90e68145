"""Business logic for symptom logs."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from poopal.models.symptom_log import SymptomLog
from poopal.services.health_metrics import as_utc


class SymptomService:
    """Service for symptom-related operations."""

    @staticmethod
    def create_symptom_log(
        db: Session,
        user_id: UUID,
        symptom_type: str,
        logged_at: datetime,
        severity: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> SymptomLog:
        """
        Create a new symptom log.

        Args:
            db: Database session
            user_id: User ID
            symptom_type: e.g. "bloating", "cramps"
            logged_at: When the symptom occurred (stored as UTC)
            severity: Severity rating 1-10
            notes: Additional notes

        Returns:
            Created SymptomLog object
        """
        symptom = SymptomLog(
            user_id=user_id,
            symptom_type=symptom_type.strip(),
            severity=severity,
            notes=notes,
            logged_at=as_utc(logged_at),
        )
        db.add(symptom)
        db.commit()
        db.refresh(symptom)
        return symptom

    @staticmethod
    def get_symptom_log(
        db: Session, user_id: UUID, log_id: int
    ) -> Optional[SymptomLog]:
        return (
            db.query(SymptomLog)
            .filter(SymptomLog.id == log_id, SymptomLog.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_user_symptom_logs(
        db: Session, user_id: UUID, limit: int = 50, offset: int = 0
    ) -> List[SymptomLog]:
        """Get a user's symptom logs, ordered by logged_at descending."""
        return (
            db.query(SymptomLog)
            .filter(SymptomLog.user_id == user_id)
            .order_by(SymptomLog.logged_at.desc(), SymptomLog.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    @staticmethod
    def get_logs_between(
        db: Session, user_id: UUID, start: datetime, end: Optional[datetime] = None
    ) -> List[SymptomLog]:
        """Symptom logs with ``start <= logged_at < end``, oldest first."""
        query = db.query(SymptomLog).filter(
            SymptomLog.user_id == user_id, SymptomLog.logged_at >= as_utc(start)
        )
        if end is not None:
            query = query.filter(SymptomLog.logged_at < as_utc(end))
        return query.order_by(SymptomLog.logged_at.asc()).all()

    @staticmethod
    def delete_symptom_log(db: Session, user_id: UUID, log_id: int) -> bool:
        """
        Delete a symptom log owned by the user.

        Returns:
            True if deleted, False if not found
        """
        symptom = SymptomService.get_symptom_log(db, user_id, log_id)
        if symptom:
            db.delete(symptom)
            db.commit()
            return True
        return False


# Singleton instance
symptom_service = SymptomService()
