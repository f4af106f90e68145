"""
Dashboard statistics.

Each method fetches the rows it needs with a few plain queries and hands them
to the pure aggregations in health_metrics. Nothing is cached; every call
recomputes from the logs.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from poopal.models.achievement import Achievement, UserAchievement
from poopal.models.trigger import Food, Trigger
from poopal.schemas import (
    CalendarDay,
    DashboardSummary,
    TrendPoint,
    TriggerOut,
    WeeklyComparison,
)
from poopal.services import health_metrics
from poopal.services.stool_service import StoolService
from poopal.services.symptom_service import SymptomService

logger = logging.getLogger(__name__)

# Triggers above this confidence count as "found" on the dashboard
TRIGGER_FOUND_CONFIDENCE = 70


def _now(now: Optional[datetime]) -> datetime:
    return health_metrics.as_utc(now or datetime.now(timezone.utc))


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """UTC ``[start, end)`` of a calendar month."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


class StatsService:
    """Service for derived dashboard views."""

    @staticmethod
    def get_dashboard_summary(
        db: Session, user_id: UUID, now: Optional[datetime] = None
    ) -> DashboardSummary:
        """
        Headline numbers for the dashboard.

        Args:
            db: Database session
            user_id: User ID
            now: Reference time (defaults to the current UTC time)

        Returns:
            DashboardSummary with gut health score, streak, trigger and
            achievement counts, total logs and the latest log time
        """
        now = _now(now)

        timestamps = StoolService.get_log_timestamps(db, user_id)
        streak_days = health_metrics.compute_streak_days(timestamps)
        recent_logs = StoolService.get_logs_between(
            db, user_id, now - timedelta(days=health_metrics.SCORE_WINDOW_DAYS)
        )

        gut_health_score = health_metrics.compute_gut_health_score(
            recent_logs, streak_days, len(timestamps)
        )

        triggers_found = (
            db.query(Trigger)
            .filter(
                Trigger.user_id == user_id,
                Trigger.confidence_score > TRIGGER_FOUND_CONFIDENCE,
            )
            .count()
        )
        achievements_unlocked = (
            db.query(UserAchievement).filter(UserAchievement.user_id == user_id).count()
        )
        total_achievements = db.query(Achievement).count()

        logger.debug(
            "Summary for user %s: %d logs, streak %d, score %d",
            user_id,
            len(timestamps),
            streak_days,
            gut_health_score,
        )

        return DashboardSummary(
            gut_health_score=gut_health_score,
            streak_days=streak_days,
            triggers_found=triggers_found,
            achievements_unlocked=achievements_unlocked,
            total_achievements=total_achievements,
            total_logs=len(timestamps),
            last_log_date=timestamps[0] if timestamps else None,
        )

    @staticmethod
    def get_trends(
        db: Session, user_id: UUID, days: int = 30, now: Optional[datetime] = None
    ) -> List[TrendPoint]:
        """Daily Bristol averages over the last ``days`` days."""
        now = _now(now)
        logs = StoolService.get_logs_between(db, user_id, now - timedelta(days=days))
        return health_metrics.compute_trend(logs, days, now=now)

    @staticmethod
    def get_calendar(
        db: Session, user_id: UUID, year: int, month: int
    ) -> List[CalendarDay]:
        """Per-day heat-map entries for one month."""
        start, end = month_bounds(year, month)
        logs = StoolService.get_logs_between(db, user_id, start, end)
        symptoms = SymptomService.get_logs_between(db, user_id, start, end)
        return health_metrics.compute_calendar_month(logs, symptoms, year, month)

    @staticmethod
    def get_recent_triggers(
        db: Session, user_id: UUID, limit: int = 10
    ) -> List[TriggerOut]:
        """The user's triggers, most confident first."""
        rows = (
            db.query(Trigger, Food)
            .join(Food, Trigger.food_id == Food.id)
            .filter(Trigger.user_id == user_id)
            .order_by(Trigger.confidence_score.desc(), Trigger.last_detected_at.desc())
            .limit(limit)
            .all()
        )
        return [
            TriggerOut(
                id=trigger.id,
                trigger_type=trigger.trigger_type,
                confidence_score=trigger.confidence_score,
                occurrences=trigger.occurrences,
                last_detected_at=trigger.last_detected_at,
                user_confirmed=trigger.user_confirmed,
                food_name=food.name,
                food_category=food.category,
            )
            for trigger, food in rows
        ]

    @staticmethod
    def get_weekly_comparison(
        db: Session, user_id: UUID, now: Optional[datetime] = None
    ) -> WeeklyComparison:
        """This calendar week against the previous one."""
        now = _now(now)
        last_week_start, _, next_week_start = health_metrics.week_bounds(now)
        logs = StoolService.get_logs_between(
            db, user_id, last_week_start, next_week_start
        )
        symptoms = SymptomService.get_logs_between(
            db, user_id, last_week_start, next_week_start
        )
        return health_metrics.compute_weekly_comparison(logs, symptoms, now=now)


# Singleton instance
stats_service = StatsService()
