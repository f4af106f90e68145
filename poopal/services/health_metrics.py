"""
Dashboard aggregations over stool and symptom logs.

These are pure functions over records that have already been fetched, so the
grouping rules live in one place instead of in SQL strings:

- A log belongs to the UTC calendar date of its ``logged_at``. Naive
  datetimes are read as UTC.
- Weeks start on Monday 00:00 UTC.
- Averages are rounded half-up when an integer Bristol type is displayed.

No function here raises on empty input; each returns its neutral value.
"""

import math
from collections import Counter, defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from poopal.models.stool_log import IDEAL_BRISTOL_TYPES
from poopal.schemas import CalendarDay, TrendPoint, WeekStats, WeeklyComparison

# Gut health score weights
BRISTOL_WEIGHT = 0.4
STREAK_WEIGHT = 0.3
CONSISTENCY_WEIGHT = 0.3

BASE_BRISTOL_SCORE = 50  # No recent logs
STREAK_POINTS_PER_DAY = 5  # Saturates at a 20 day streak
CONSISTENCY_POINTS_PER_LOG = 2  # Saturates at 50 lifetime logs
SCORE_WINDOW_DAYS = 30


def as_utc(ts: datetime) -> datetime:
    """Return ``ts`` as an aware UTC datetime."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def utc_date(ts: datetime) -> date:
    return as_utc(ts).date()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def _group_by_day(logs: Iterable) -> Dict[date, list]:
    """Group records by UTC date of ``logged_at``, ascending."""
    grouped = defaultdict(list)
    for log in logs:
        grouped[utc_date(log.logged_at)].append(log)
    return dict(sorted(grouped.items()))


def compute_gut_health_score(
    recent_logs: Iterable, streak_days: int, total_logs: int
) -> int:
    """
    Blend Bristol quality, streak and logging consistency into a 0-100 score.

    Args:
        recent_logs: Stool logs from the last 30 days (anything with ``bristol_type``)
        streak_days: Current logging streak
        total_logs: Lifetime stool log count

    Returns:
        ``round(bristol*0.4 + streak*0.3 + consistency*0.3)``. A user with no
        history scores 20.
    """
    recent_logs = list(recent_logs)

    if recent_logs:
        ideal_count = sum(
            1 for log in recent_logs if log.bristol_type in IDEAL_BRISTOL_TYPES
        )
        bristol_score = min(100.0, ideal_count / len(recent_logs) * 100)
    else:
        bristol_score = BASE_BRISTOL_SCORE

    streak_score = min(100, max(0, streak_days) * STREAK_POINTS_PER_DAY)
    consistency_score = min(100, max(0, total_logs) * CONSISTENCY_POINTS_PER_LOG)

    score = round_half_up(
        bristol_score * BRISTOL_WEIGHT
        + streak_score * STREAK_WEIGHT
        + consistency_score * CONSISTENCY_WEIGHT
    )
    return max(0, min(100, score))


def compute_streak_days(timestamps: Iterable[datetime]) -> int:
    """
    Length of the run of consecutive logged days ending at the latest log.

    Several logs on one day count once. The run is anchored on the most
    recent logged day, which does not have to be today.
    """
    days = sorted({utc_date(ts) for ts in timestamps}, reverse=True)
    if not days:
        return 0

    streak = 1
    for newer, older in zip(days, days[1:]):
        if newer - older != timedelta(days=1):
            break
        streak += 1
    return streak


def compute_trend(
    logs: Iterable, window_days: int, now: Optional[datetime] = None
) -> List[TrendPoint]:
    """
    Daily Bristol averages for logs within ``window_days`` of ``now``.

    Days without logs are omitted rather than zero-filled.
    """
    now = as_utc(now or datetime.now(timezone.utc))
    cutoff = now - timedelta(days=window_days)
    in_window = [log for log in logs if as_utc(log.logged_at) >= cutoff]

    points = []
    for day, day_logs in _group_by_day(in_window).items():
        avg = _mean([log.bristol_type for log in day_logs])
        points.append(
            TrendPoint(
                date=day,
                avg_bristol_type=avg,
                bristol_type=round_half_up(avg),
                logs_count=len(day_logs),
            )
        )
    return points


def mode_color(colors: Iterable[Optional[str]]) -> Optional[str]:
    """
    Most frequent non-empty color.

    Ties go to the smallest value in sort order, which is what an ordered
    ``MODE() WITHIN GROUP`` returns.
    """
    counts = Counter(color for color in colors if color)
    if not counts:
        return None
    top = max(counts.values())
    return min(color for color, count in counts.items() if count == top)


def compute_calendar_month(
    logs: Iterable, symptom_logs: Iterable, year: int, month: int
) -> List[CalendarDay]:
    """One entry per logged day of the given UTC month, ascending."""
    month_logs = []
    for log in logs:
        day = utc_date(log.logged_at)
        if day.year == year and day.month == month:
            month_logs.append(log)

    symptom_days = {utc_date(symptom.logged_at) for symptom in symptom_logs}

    calendar = []
    for day, day_logs in _group_by_day(month_logs).items():
        avg = _mean([log.bristol_type for log in day_logs])
        calendar.append(
            CalendarDay(
                date=day,
                bristol_type=round_half_up(avg),
                logs_count=len(day_logs),
                has_symptoms=day in symptom_days,
                color=mode_color(log.color for log in day_logs),
            )
        )
    return calendar


def week_bounds(now: datetime) -> Tuple[datetime, datetime, datetime]:
    """
    Return ``(last_week_start, this_week_start, next_week_start)``.

    Both weeks are exactly seven days and share the ``this_week_start``
    boundary.
    """
    now = as_utc(now)
    monday = now.date() - timedelta(days=now.weekday())
    this_week_start = datetime.combine(monday, time.min, tzinfo=timezone.utc)
    return (
        this_week_start - timedelta(days=7),
        this_week_start,
        this_week_start + timedelta(days=7),
    )


def _week_stats(
    logs: Sequence, symptom_logs: Sequence, start: datetime, end: datetime
) -> WeekStats:
    week_logs = [log for log in logs if start <= as_utc(log.logged_at) < end]
    symptom_count = sum(
        1 for symptom in symptom_logs if start <= as_utc(symptom.logged_at) < end
    )
    return WeekStats(
        start=start,
        end=end,
        avg_bristol=_mean([log.bristol_type for log in week_logs]),
        log_count=len(week_logs),
        symptom_count=symptom_count,
    )


def compute_weekly_comparison(
    logs: Iterable, symptom_logs: Iterable, now: Optional[datetime] = None
) -> WeeklyComparison:
    """Compare the current calendar week with the one before it."""
    logs = list(logs)
    symptom_logs = list(symptom_logs)
    last_week_start, this_week_start, next_week_start = week_bounds(
        now or datetime.now(timezone.utc)
    )

    return WeeklyComparison(
        this_week=_week_stats(logs, symptom_logs, this_week_start, next_week_start),
        last_week=_week_stats(logs, symptom_logs, last_week_start, this_week_start),
    )
