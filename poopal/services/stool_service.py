"""Business logic for stool logs."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from poopal.models.stool_log import StoolLog
from poopal.services.health_metrics import as_utc


class StoolService:
    """Service for stool log operations."""

    @staticmethod
    def create_stool_log(
        db: Session,
        user_id: UUID,
        bristol_type: int,
        logged_at: datetime,
        color: Optional[str] = None,
        consistency: Optional[str] = None,
        size: Optional[str] = None,
        urgency: Optional[int] = None,
        completeness: Optional[int] = None,
        blood_present: bool = False,
        mucus_present: bool = False,
        undigested_food: bool = False,
        notes: Optional[str] = None,
    ) -> StoolLog:
        """
        Create a new stool log.

        Args:
            db: Database session
            user_id: Owner of the log
            bristol_type: Bristol stool scale type (1-7)
            logged_at: When it happened (stored as UTC)

        Returns:
            Created StoolLog object
        """
        log = StoolLog(
            user_id=user_id,
            bristol_type=bristol_type,
            color=color,
            consistency=consistency,
            size=size,
            urgency=urgency,
            completeness=completeness,
            blood_present=blood_present,
            mucus_present=mucus_present,
            undigested_food=undigested_food,
            notes=notes,
            logged_at=as_utc(logged_at),
        )
        db.add(log)
        db.commit()
        db.refresh(log)
        return log

    @staticmethod
    def get_stool_log(db: Session, user_id: UUID, log_id: int) -> Optional[StoolLog]:
        """Get one of the user's stool logs by ID."""
        return (
            db.query(StoolLog)
            .filter(StoolLog.id == log_id, StoolLog.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_user_stool_logs(
        db: Session, user_id: UUID, limit: int = 50, offset: int = 0
    ) -> List[StoolLog]:
        """Get a user's stool logs, newest first."""
        return (
            db.query(StoolLog)
            .filter(StoolLog.user_id == user_id)
            .order_by(StoolLog.logged_at.desc(), StoolLog.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    @staticmethod
    def get_logs_between(
        db: Session, user_id: UUID, start: datetime, end: Optional[datetime] = None
    ) -> List[StoolLog]:
        """Stool logs with ``start <= logged_at < end``, oldest first."""
        query = db.query(StoolLog).filter(
            StoolLog.user_id == user_id, StoolLog.logged_at >= as_utc(start)
        )
        if end is not None:
            query = query.filter(StoolLog.logged_at < as_utc(end))
        return query.order_by(StoolLog.logged_at.asc()).all()

    @staticmethod
    def get_log_timestamps(db: Session, user_id: UUID) -> List[datetime]:
        """All ``logged_at`` values of the user's stool logs, newest first."""
        rows = (
            db.query(StoolLog.logged_at)
            .filter(StoolLog.user_id == user_id)
            .order_by(StoolLog.logged_at.desc())
            .all()
        )
        return [as_utc(row.logged_at) for row in rows]

    @staticmethod
    def count_logs_since(db: Session, user_id: UUID, since: datetime) -> int:
        return (
            db.query(StoolLog)
            .filter(StoolLog.user_id == user_id, StoolLog.logged_at >= as_utc(since))
            .count()
        )

    @staticmethod
    def delete_stool_log(db: Session, user_id: UUID, log_id: int) -> bool:
        """
        Delete a stool log owned by the user.

        Returns:
            True if deleted, False if not found or owned by someone else
        """
        log = StoolService.get_stool_log(db, user_id, log_id)
        if log:
            db.delete(log)
            db.commit()
            return True
        return False


# Singleton instance
stool_service = StoolService()
