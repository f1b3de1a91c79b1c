"""Tests for streax/insights.py and streax/formatters.py."""

from datetime import date

import pytest

from streax.formatters import (
    date_range,
    format_hours,
    format_minutes,
    format_percent,
    month_range,
    pluralize,
    week_range,
)
from streax.insights import recent_days, timeframe_stats, today_summary

from conftest import make_log


@pytest.fixture
def history(app_data):
    for day, minutes in [
        ("2026-01-30", 300),
        ("2026-02-09", 100),
        ("2026-02-10", 240),
        ("2026-02-11", 260),
    ]:
        app_data.daily_logs[day] = make_log(day, productive=minutes)
    return app_data


def test_format_minutes():
    assert format_minutes(0) == "0m"
    assert format_minutes(45) == "45m"
    assert format_minutes(120) == "2h"
    assert format_minutes(150) == "2h 30m"


def test_format_hours():
    assert format_hours(60) == "1.0 hour"
    assert format_hours(90) == "1.5 hours"


def test_format_percent_and_pluralize():
    assert format_percent(1, 3) == 33
    assert format_percent(5, 0) == 0
    assert pluralize(1, "day") == "1 day"
    assert pluralize(3, "day") == "3 days"


def test_ranges():
    assert week_range(date(2026, 2, 11)) == ("2026-02-09", "2026-02-15")
    assert month_range(date(2026, 2, 11)) == ("2026-02-01", "2026-02-28")
    assert month_range(date(2026, 12, 5)) == ("2026-12-01", "2026-12-31")
    assert date_range("2026-02-27", "2026-03-01") == ["2026-02-27", "2026-02-28", "2026-03-01"]


def test_week_stats(history):
    stats = timeframe_stats(history, "week", "2026-02-11")
    assert stats.start == "2026-02-09"
    assert stats.days_tracked == 3
    assert stats.total_minutes == 600
    assert stats.goals_met == 2
    assert stats.best_day == "2026-02-11"
    assert stats.completion_rate == 67
    assert stats.to_dict()["averageMinutes"] == 200.0


def test_all_stats_spans_history(history):
    stats = timeframe_stats(history, "all", "2026-02-11")
    assert stats.start == "2026-01-30"
    assert stats.end == "2026-02-11"
    assert stats.days_tracked == 4


def test_custom_stats(history):
    stats = timeframe_stats(history, "custom", "2026-02-11", start="2026-01-01", end="2026-01-31")
    assert stats.days_tracked == 1
    assert stats.total_minutes == 300


def test_custom_needs_bounds(history):
    with pytest.raises(ValueError):
        timeframe_stats(history, "custom", "2026-02-11", start="2026-01-01")


def test_unknown_timeframe(history):
    with pytest.raises(ValueError):
        timeframe_stats(history, "decade", "2026-02-11")


def test_empty_stats(app_data):
    stats = timeframe_stats(app_data, "month", "2026-02-11")
    assert stats.days_tracked == 0
    assert stats.average_minutes == 0.0
    assert stats.best_day is None


def test_recent_days_fills_gaps(history):
    days = recent_days(history, "2026-02-11", 4)
    assert [d["date"] for d in days] == ["2026-02-08", "2026-02-09", "2026-02-10", "2026-02-11"]
    assert days[0]["productiveMinutes"] == 0
    assert not days[0]["goalMet"]
    assert days[2]["goalMet"]


def test_today_summary(app_data):
    app_data.streak_data.streak_savers = 1
    app_data.streak_data.backlog_savers = 30
    log = make_log("2026-02-11", productive=150, backlog=20)

    summary = today_summary(app_data, log)

    assert summary["remainingMinutes"] == 90
    assert summary["progress"] == 62.5
    assert not summary["goalMet"]
    assert summary["nextRewardHours"] == 4
    assert summary["canUseStreakSaver"]
    assert summary["canUseBacklogSaver"]
    assert summary["nextMilestone"] == {"kind": "weekly", "days_remaining": 7, "reward": "+1 Streak Saver"}
    assert summary["notes"] == ""
