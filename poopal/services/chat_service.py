"""
Dr. Poo conversations and proactive insights.

Conversation context is rebuilt from the database on every message; nothing
about a conversation is held in memory between requests.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.orm import Session

from poopal.config import settings
from poopal.models.chat_message import ChatMessage
from poopal.models.meal_log import MealLog
from poopal.models.stool_log import StoolLog
from poopal.models.symptom_log import SymptomLog
from poopal.models.trigger import Food, Trigger
from poopal.models.user import User
from poopal.services import insights
from poopal.services.ai_normalizer import parse_chat_response
from poopal.services.ai_schemas import ChatReply
from poopal.services.health_metrics import as_utc
from poopal.services.meal_service import MealService
from poopal.services.prompts import build_chat_system_prompt
from poopal.services.stool_service import StoolService

logger = logging.getLogger(__name__)

CONTEXT_STOOL_LOGS = 30
CONTEXT_MEAL_LOGS = 20
CONTEXT_SYMPTOM_LOGS = 10
CONTEXT_TRIGGERS = 10
CONTEXT_TRIGGER_CONFIDENCE = 60


def _days_between(earlier: datetime, later: datetime) -> int:
    """Whole days elapsed, rounded down."""
    return (as_utc(later) - as_utc(earlier)) // timedelta(days=1)


def _last_stool_logged_at(db: Session, user_id) -> Optional[datetime]:
    row = (
        db.query(StoolLog.logged_at)
        .filter(StoolLog.user_id == user_id)
        .order_by(StoolLog.logged_at.desc())
        .first()
    )
    return row.logged_at if row else None


def _resolve_timezone(tz: Optional[str]):
    if not tz:
        return timezone.utc
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", tz)
        return timezone.utc


class ChatService:
    """Service for the Dr. Poo assistant."""

    @staticmethod
    def build_user_context(db: Session, user_id, now: datetime) -> str:
        """
        Plain-text summary of the user's recent data for the system prompt.

        Covers the last 30 stool logs, last 20 meals, confident triggers and
        symptom counts over the last 10 symptom logs.
        """
        stool_logs = StoolService.get_user_stool_logs(
            db, user_id, limit=CONTEXT_STOOL_LOGS
        )
        meal_logs = MealService.get_user_meals(db, user_id, limit=CONTEXT_MEAL_LOGS)
        triggers = (
            db.query(Trigger, Food)
            .join(Food, Trigger.food_id == Food.id)
            .filter(
                Trigger.user_id == user_id,
                Trigger.confidence_score > CONTEXT_TRIGGER_CONFIDENCE,
            )
            .order_by(Trigger.confidence_score.desc())
            .limit(CONTEXT_TRIGGERS)
            .all()
        )
        symptoms = (
            db.query(SymptomLog)
            .filter(SymptomLog.user_id == user_id)
            .order_by(SymptomLog.logged_at.desc())
            .limit(CONTEXT_SYMPTOM_LOGS)
            .all()
        )

        lines = ["User Health Data:", ""]

        if stool_logs:
            latest = stool_logs[0]
            avg = sum(log.bristol_type for log in stool_logs) / len(stool_logs)
            lines.append(f"Recent Stool Logs ({len(stool_logs)} entries):")
            lines.append(f"- Average Bristol Type: {avg:.1f}")
            lines.append(
                f"- Most recent: Type {latest.bristol_type}, "
                f"{latest.color or 'no color'}, {as_utc(latest.logged_at).date().isoformat()}"
            )
            lines.append(
                f"- Days since last log: {_days_between(latest.logged_at, now)}"
            )
        else:
            lines.append("No stool logs yet.")

        lines.append("")
        if meal_logs:
            last_meal = meal_logs[0]
            lines.append(f"Recent Meal Logs ({len(meal_logs)} entries):")
            lines.append(f"- Last meal: {last_meal.meal_type} - {last_meal.description}")
            lines.append(
                f"- Days since last meal log: {_days_between(last_meal.logged_at, now)}"
            )
        else:
            lines.append("No meal logs yet.")

        if triggers:
            lines.append("")
            lines.append(f"Identified Triggers ({len(triggers)}):")
            for trigger, food in triggers:
                lines.append(
                    f"- {food.name}: {trigger.trigger_type} "
                    f"({trigger.confidence_score:g}% confidence, "
                    f"{trigger.occurrences} occurrences)"
                )

        if symptoms:
            lines.append("")
            lines.append(f"Recent Symptoms ({len(symptoms)} entries):")
            for symptom_type, count in Counter(
                s.symptom_type for s in symptoms
            ).items():
                lines.append(f"- {symptom_type}: {count} times")

        return "\n".join(lines)

    @staticmethod
    def build_system_prompt(
        context: str, days_since_last_log: Optional[int], recent_meal_count: int
    ) -> str:
        return build_chat_system_prompt(context, days_since_last_log, recent_meal_count)

    @staticmethod
    def get_history(db: Session, user_id, limit: Optional[int] = None) -> List[dict]:
        """
        Last ``limit`` persisted turns as Anthropic messages, oldest first.

        The list never starts with an assistant turn.
        """
        limit = settings.chat_history_limit if limit is None else limit
        if limit <= 0:
            return []

        rows = (
            db.query(ChatMessage)
            .filter(ChatMessage.user_id == user_id)
            .order_by(ChatMessage.id.desc())
            .limit(limit)
            .all()
        )
        rows.reverse()
        while rows and rows[0].role != "user":
            rows.pop(0)
        return [{"role": row.role, "content": row.content} for row in rows]

    @staticmethod
    async def chat(
        db: Session,
        user: User,
        message: str,
        claude_service,
        now: Optional[datetime] = None,
    ) -> ChatReply:
        """
        Answer one user message.

        Args:
            db: Database session
            user: Current user
            message: The user's message
            claude_service: ClaudeService (or a test double)
            now: Reference time (defaults to the current UTC time)

        Returns:
            ChatReply with the cleaned message and any meal suggestion

        Raises:
            ServiceUnavailableError, RateLimitError, ValueError: from the AI
            client. Nothing is persisted in that case.
        """
        now = as_utc(now or datetime.now(timezone.utc))

        context = ChatService.build_user_context(db, user.id, now)
        last_logged_at = _last_stool_logged_at(db, user.id)
        days_since_last_log = (
            _days_between(last_logged_at, now) if last_logged_at else None
        )
        recent_meal_count = MealService.count_meals_since(
            db, user.id, now - insights.RECENT_WINDOW
        )
        system_prompt = ChatService.build_system_prompt(
            context, days_since_last_log, recent_meal_count
        )

        messages = ChatService.get_history(db, user.id)
        messages.append({"role": "user", "content": message})

        raw_reply = await claude_service.chat(system_prompt, messages)
        reply = parse_chat_response(raw_reply)

        db.add(ChatMessage(user_id=user.id, role="user", content=message))
        db.add(ChatMessage(user_id=user.id, role="assistant", content=reply.message))
        db.commit()

        logger.info(
            "Chat reply for user %s (%d history turns, meal suggestion: %s)",
            user.id,
            len(messages) - 1,
            reply.suggested_meal_action is not None,
        )
        return reply

    @staticmethod
    def gather_user_activity(
        db: Session, user: User, now: datetime, tz: Optional[str] = None
    ) -> insights.UserActivity:
        """Collect the facts the proactive insight rules are evaluated on."""
        now = as_utc(now)
        created_at = as_utc(user.created_at) if user.created_at else now
        recent_since = now - insights.RECENT_WINDOW

        last_stool_at = _last_stool_logged_at(db, user.id)
        total_meals = MealService.count_meals_since(db, user.id)

        return insights.UserActivity(
            account_age=now - created_at,
            has_any_logs=last_stool_at is not None or total_meals > 0,
            days_since_last_stool_log=(
                _days_between(last_stool_at, now) if last_stool_at else None
            ),
            recent_stool_count=StoolService.count_logs_since(db, user.id, recent_since),
            recent_meal_count=MealService.count_meals_since(db, user.id, recent_since),
            local_hour=now.astimezone(_resolve_timezone(tz)).hour,
        )

    @staticmethod
    def get_proactive_insight(
        db: Session,
        user: User,
        now: Optional[datetime] = None,
        tz: Optional[str] = None,
    ) -> Optional[ChatReply]:
        """Unprompted Dr. Poo message for the user, or None."""
        now = as_utc(now or datetime.now(timezone.utc))
        activity = ChatService.gather_user_activity(db, user, now, tz)
        return insights.select_proactive_insight(activity)


# Singleton instance
chat_service = ChatService()
