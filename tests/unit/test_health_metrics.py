"""
Unit tests for the dashboard aggregations in health_metrics.

These are pure functions, so plain namespace records stand in for ORM rows.
"""
import pytest
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from poopal.services.health_metrics import (
    as_utc,
    compute_calendar_month,
    compute_gut_health_score,
    compute_streak_days,
    compute_trend,
    compute_weekly_comparison,
    mode_color,
    round_half_up,
    week_bounds,
)

NOW = datetime(2024, 3, 14, 15, 30, tzinfo=timezone.utc)  # a Thursday


def stool(logged_at, bristol_type=4, color=None):
    return SimpleNamespace(logged_at=logged_at, bristol_type=bristol_type, color=color)


def symptom(logged_at):
    return SimpleNamespace(logged_at=logged_at)


class TestHelpers:
    def test_as_utc_treats_naive_as_utc(self):
        naive = datetime(2024, 1, 1, 12, 0)
        assert as_utc(naive) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_as_utc_converts_other_offsets(self):
        plus_two = timezone(timedelta(hours=2))
        ts = datetime(2024, 1, 1, 1, 0, tzinfo=plus_two)
        assert as_utc(ts) == datetime(2023, 12, 31, 23, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "value,expected", [(3.5, 4), (4.5, 5), (3.49, 3), (2.0, 2), (6.5, 7)]
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestGutHealthScore:
    def test_empty_history_scores_20(self):
        assert compute_gut_health_score([], 0, 0) == 20

    def test_all_ideal_logs_with_saturated_streak_and_consistency(self):
        logs = [stool(NOW, 4), stool(NOW, 3)]
        assert compute_gut_health_score(logs, 25, 60) == 100

    def test_blend_of_components(self):
        # bristol 50% ideal -> 50, streak 4 days -> 20, 10 logs -> 20
        logs = [stool(NOW, 4), stool(NOW, 6)]
        # 50*0.4 + 20*0.3 + 20*0.3 = 32
        assert compute_gut_health_score(logs, 4, 10) == 32

    def test_no_ideal_logs(self):
        logs = [stool(NOW, 1), stool(NOW, 7)]
        # 0 + 5*5*0.3 (=7.5) + 4*2*0.3 (=2.4) = 9.9
        assert compute_gut_health_score(logs, 5, 4) == 10

    def test_rounds_half_up(self):
        # 50*0.4 + 5*0.3 + 0 = 21.5
        assert compute_gut_health_score([], 1, 0) == 22

    @pytest.mark.parametrize("streak,total", [(0, 0), (1000, 1000), (-5, -5), (3, 17)])
    def test_score_is_bounded(self, streak, total):
        logs = [stool(NOW, b) for b in range(1, 8)]
        score = compute_gut_health_score(logs, streak, total)
        assert 0 <= score <= 100


class TestStreakDays:
    def test_no_logs(self):
        assert compute_streak_days([]) == 0

    def test_single_log(self):
        assert compute_streak_days([NOW]) == 1

    def test_gap_breaks_streak(self):
        day = NOW
        timestamps = [day, day - timedelta(days=1), day - timedelta(days=2), day - timedelta(days=5)]
        assert compute_streak_days(timestamps) == 3

    def test_multiple_logs_per_day_count_once(self):
        timestamps = [
            NOW,
            NOW - timedelta(hours=3),
            NOW - timedelta(days=1),
            NOW - timedelta(days=1, hours=2),
        ]
        assert compute_streak_days(timestamps) == 2

    def test_streak_need_not_include_today(self):
        last = NOW - timedelta(days=10)
        timestamps = [last, last - timedelta(days=1)]
        assert compute_streak_days(timestamps) == 2

    def test_order_of_input_does_not_matter(self):
        timestamps = [NOW - timedelta(days=2), NOW, NOW - timedelta(days=1)]
        assert compute_streak_days(timestamps) == 3

    def test_days_are_utc_dates(self):
        # 23:30 and 00:30 UTC on consecutive dates, given in a +02:00 offset
        plus_two = timezone(timedelta(hours=2))
        late = datetime(2024, 3, 14, 1, 30, tzinfo=plus_two)  # 2024-03-13 23:30 UTC
        early = datetime(2024, 3, 14, 2, 30, tzinfo=plus_two)  # 2024-03-14 00:30 UTC
        assert compute_streak_days([late, early]) == 2


class TestTrend:
    def test_empty(self):
        assert compute_trend([], 30, now=NOW) == []

    def test_groups_by_day_and_averages(self):
        logs = [
            stool(NOW - timedelta(hours=1), 3),
            stool(NOW - timedelta(hours=2), 6),
            stool(NOW - timedelta(days=2), 4),
        ]

        points = compute_trend(logs, 30, now=NOW)

        assert [p.date for p in points] == [date(2024, 3, 12), date(2024, 3, 14)]
        assert points[1].avg_bristol_type == 4.5
        assert points[1].bristol_type == 5
        assert points[1].logs_count == 2
        assert points[0].logs_count == 1

    def test_excludes_logs_outside_window(self):
        logs = [
            stool(NOW - timedelta(days=8)),
            stool(NOW - timedelta(days=3)),
        ]

        points = compute_trend(logs, 7, now=NOW)

        assert len(points) == 1
        assert points[0].date == date(2024, 3, 11)

    def test_no_zero_days_and_counts_sum_to_window_logs(self):
        logs = [stool(NOW - timedelta(days=d, hours=h)) for d in (0, 2, 5, 9) for h in (0, 1)]

        points = compute_trend(logs, 7, now=NOW)

        assert all(p.logs_count > 0 for p in points)
        in_window = [log for log in logs if log.logged_at >= NOW - timedelta(days=7)]
        assert sum(p.logs_count for p in points) == len(in_window)

    def test_serializes_camel_case(self):
        points = compute_trend([stool(NOW, 4)], 30, now=NOW)
        dumped = points[0].model_dump(by_alias=True)
        assert set(dumped) >= {"date", "avgBristolType", "logsCount"}


class TestModeColor:
    def test_most_frequent(self):
        assert mode_color(["#111111", "#222222", "#222222"]) == "#222222"

    def test_tie_goes_to_smallest(self):
        assert mode_color(["#bbbbbb", "#aaaaaa"]) == "#aaaaaa"

    def test_ignores_missing(self):
        assert mode_color([None, "", "#123456"]) == "#123456"

    def test_all_missing(self):
        assert mode_color([None, None]) is None


class TestCalendarMonth:
    def test_only_requested_month(self):
        logs = [
            stool(datetime(2024, 2, 29, 12, tzinfo=timezone.utc)),
            stool(datetime(2024, 3, 1, 12, tzinfo=timezone.utc)),
            stool(datetime(2024, 4, 1, 0, tzinfo=timezone.utc)),
        ]

        days = compute_calendar_month(logs, [], 2024, 3)

        assert [d.date for d in days] == [date(2024, 3, 1)]

    def test_day_fields(self):
        logs = [
            stool(datetime(2024, 3, 5, 8, tzinfo=timezone.utc), 3, "#8B4513"),
            stool(datetime(2024, 3, 5, 18, tzinfo=timezone.utc), 6, "#8B4513"),
            stool(datetime(2024, 3, 5, 20, tzinfo=timezone.utc), 4, "#654321"),
            stool(datetime(2024, 3, 9, 8, tzinfo=timezone.utc), 2),
        ]
        symptoms = [symptom(datetime(2024, 3, 5, 23, tzinfo=timezone.utc))]

        days = compute_calendar_month(logs, symptoms, 2024, 3)

        fifth, ninth = days
        assert fifth.logs_count == 3
        assert fifth.bristol_type == 4  # avg 4.33
        assert fifth.color == "#8B4513"
        assert fifth.has_symptoms is True
        assert ninth.has_symptoms is False
        assert ninth.color is None

    def test_half_average_rounds_up(self):
        logs = [
            stool(datetime(2024, 3, 5, 8, tzinfo=timezone.utc), 3),
            stool(datetime(2024, 3, 5, 9, tzinfo=timezone.utc), 4),
        ]
        assert compute_calendar_month(logs, [], 2024, 3)[0].bristol_type == 4

    def test_symptoms_on_days_without_logs_are_not_listed(self):
        symptoms = [symptom(datetime(2024, 3, 7, tzinfo=timezone.utc))]
        assert compute_calendar_month([], symptoms, 2024, 3) == []


class TestWeeklyComparison:
    def test_week_bounds_start_monday(self):
        last_start, this_start, next_start = week_bounds(NOW)

        assert this_start == datetime(2024, 3, 11, tzinfo=timezone.utc)
        assert this_start.weekday() == 0
        assert last_start == this_start - timedelta(days=7)
        assert next_start == this_start + timedelta(days=7)

    @pytest.mark.parametrize("days_ahead", range(0, 14))
    def test_windows_contiguous_and_seven_days(self, days_ahead):
        ref = NOW + timedelta(days=days_ahead, hours=days_ahead)

        comparison = compute_weekly_comparison([], [], now=ref)

        assert comparison.last_week.end == comparison.this_week.start
        assert comparison.this_week.end - comparison.this_week.start == timedelta(days=7)
        assert comparison.last_week.end - comparison.last_week.start == timedelta(days=7)
        assert comparison.this_week.start <= ref < comparison.this_week.end

    def test_counts_and_averages(self):
        logs = [
            stool(datetime(2024, 3, 11, 0, 0, tzinfo=timezone.utc), 4),  # this week, boundary
            stool(datetime(2024, 3, 13, 9, tzinfo=timezone.utc), 6),
            stool(datetime(2024, 3, 10, 23, 59, tzinfo=timezone.utc), 2),  # last week
            stool(datetime(2024, 3, 1, tzinfo=timezone.utc), 1),  # before both
        ]
        symptoms = [
            symptom(datetime(2024, 3, 12, tzinfo=timezone.utc)),
            symptom(datetime(2024, 3, 5, tzinfo=timezone.utc)),
            symptom(datetime(2024, 3, 6, tzinfo=timezone.utc)),
        ]

        comparison = compute_weekly_comparison(logs, symptoms, now=NOW)

        assert comparison.this_week.log_count == 2
        assert comparison.this_week.avg_bristol == 5
        assert comparison.this_week.symptom_count == 1
        assert comparison.last_week.log_count == 1
        assert comparison.last_week.avg_bristol == 2
        assert comparison.last_week.symptom_count == 2

    def test_empty_weeks(self):
        comparison = compute_weekly_comparison([], [], now=NOW)

        assert comparison.this_week.avg_bristol is None
        assert comparison.this_week.log_count == 0
        assert comparison.last_week.symptom_count == 0
