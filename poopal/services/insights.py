"""
Proactive Dr. Poo messages shown without the user asking.

The rules are an ordered table: they are checked top to bottom and only the
first rule that applies produces a message.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional, Sequence

from poopal.services.ai_schemas import ChatReply, SuggestedAction

logger = logging.getLogger(__name__)

NEW_ACCOUNT_WINDOW = timedelta(minutes=10)
MISSED_LOG_DAYS = 3
MIN_RECENT_MEALS = 3
RECENT_WINDOW = timedelta(days=2)

WELCOME_MESSAGE = (
    "Hey there! 👋 I'm Dr. Poo, your friendly digestive health AI assistant!\n\n"
    "**Disclaimer:** I'm not a real doctor, just an AI here to help you track "
    "patterns and learn about your gut health. Always consult a real healthcare "
    "professional for medical advice.\n\n"
    "I can help you:\n"
    "• Log and analyze your bathroom visits\n"
    "• Track meals and find food triggers\n"
    "• Spot patterns in your digestive health\n"
    "• Answer questions about gut health\n\n"
    'Just tell me what you ate or ask me anything! For example: "I had a burger '
    'for lunch" or "How\'s my gut health?"'
)


@dataclass(frozen=True)
class UserActivity:
    """Facts about a user's logging, gathered by the caller."""

    account_age: timedelta
    has_any_logs: bool  # Any stool or meal log, ever
    days_since_last_stool_log: Optional[int]  # None if no stool logs
    recent_stool_count: int  # Within RECENT_WINDOW
    recent_meal_count: int  # Within RECENT_WINDOW
    local_hour: int  # 0-23 on the user's clock


@dataclass(frozen=True)
class InsightRule:
    name: str
    applies: Callable[[UserActivity], bool]
    build: Callable[[UserActivity], ChatReply]


def meal_hint(local_hour: int) -> str:
    """Name of the meal the user most likely just had."""
    if local_hour < 11:
        return "breakfast"
    if local_hour < 15:
        return "lunch"
    return "dinner"


def _is_new_account(activity: UserActivity) -> bool:
    return activity.account_age < NEW_ACCOUNT_WINDOW and not activity.has_any_logs


def _welcome(activity: UserActivity) -> ChatReply:
    return ChatReply(message=WELCOME_MESSAGE)


def _has_missed_logs(activity: UserActivity) -> bool:
    days = activity.days_since_last_stool_log
    return activity.has_any_logs and days is not None and days >= MISSED_LOG_DAYS


def _missed_logs_nudge(activity: UserActivity) -> ChatReply:
    return ChatReply(
        message=(
            "Hey! I noticed you haven't logged anything in "
            f"{activity.days_since_last_stool_log} days. Did you forget to log, "
            "or are you experiencing constipation? 🤔"
        ),
        suggested_actions=[
            SuggestedAction(type="log_stool", button_text="💩 Log Missed Poops")
        ],
    )


def _is_missing_meals(activity: UserActivity) -> bool:
    return (
        activity.recent_stool_count > 0
        and activity.recent_meal_count < MIN_RECENT_MEALS
    )


def _meal_prompt(activity: UserActivity) -> ChatReply:
    return ChatReply(
        message=(
            "I see you've been tracking your poops, but not your meals! What did "
            f"you eat for {meal_hint(activity.local_hour)}? This helps me find "
            "patterns between food and your gut health. 🍽️"
        ),
        suggested_actions=[SuggestedAction(type="none", button_text="💬 Tell Dr. Poo")],
    )


INSIGHT_RULES: Sequence[InsightRule] = (
    InsightRule("welcome", _is_new_account, _welcome),
    InsightRule("missed_logs", _has_missed_logs, _missed_logs_nudge),
    InsightRule("missing_meals", _is_missing_meals, _meal_prompt),
)


def select_proactive_insight(
    activity: UserActivity, rules: Sequence[InsightRule] = INSIGHT_RULES
) -> Optional[ChatReply]:
    """Return the message of the first matching rule, or None."""
    for rule in rules:
        if rule.applies(activity):
            logger.debug("Proactive insight rule matched: %s", rule.name)
            return rule.build(activity)
    return None
