"""Tests for streax/daylog.py: log creation and session recording."""

from streax.daylog import get_or_create_log, previous_day, record_session, save_notes
from streax.models import PomodoroSession

from conftest import make_log


def _session(minutes, task="Write report", completed=True):
    return PomodoroSession(
        task_name=task,
        start_time="2026-02-11T09:00:00",
        end_time="2026-02-11T10:00:00",
        duration_minutes=minutes,
        preset="Classic (25/5)",
        completed=completed,
    )


def test_previous_day_crosses_month():
    assert previous_day("2026-03-01") == "2026-02-28"
    assert previous_day("2026-01-01") == "2025-12-31"


def test_first_log_uses_commitment(app_data):
    log = get_or_create_log(app_data, "2026-02-11")
    assert log.goal_minutes == 240
    assert log.backlog_minutes == 0
    assert log.backlog_savers_earned == 0
    assert app_data.streak_data.backlog_savers == 0


def test_log_from_yesterday(app_data):
    app_data.daily_logs["2026-02-10"] = make_log("2026-02-10", productive=180, goal=240, backlog=20)

    log = get_or_create_log(app_data, "2026-02-11")

    assert log.goal_minutes == 240
    assert log.backlog_minutes == 80
    assert log.backlog_savers_earned == 15
    assert app_data.streak_data.backlog_savers == 15


def test_log_after_gap_has_no_grant(app_data):
    app_data.daily_logs["2026-02-05"] = make_log("2026-02-05", productive=500)

    log = get_or_create_log(app_data, "2026-02-11")

    assert log.goal_minutes == 240
    assert log.backlog_minutes == 0
    assert app_data.streak_data.backlog_savers == 0


def test_log_created_once(app_data):
    app_data.daily_logs["2026-02-10"] = make_log("2026-02-10", productive=100)
    first = get_or_create_log(app_data, "2026-02-11")
    second = get_or_create_log(app_data, "2026-02-11")

    assert first is second
    assert app_data.streak_data.backlog_savers == 15


def test_grant_respects_cap(app_data):
    app_data.streak_data.backlog_savers = 445
    app_data.daily_logs["2026-02-10"] = make_log("2026-02-10", productive=240)

    get_or_create_log(app_data, "2026-02-11")

    assert app_data.streak_data.backlog_savers == 450


def test_record_session_updates_log(app_data):
    emitted = record_session(app_data, _session(50), day="2026-02-11")

    log = app_data.daily_logs["2026-02-11"]
    assert log.productive_minutes == 50
    assert len(log.sessions) == 1
    assert log.free_time_earned == 0
    assert [n.title for n in emitted] == ["Session Complete!"]
    assert emitted[0].message == "Completed 50 minutes on: Write report"
    assert app_data.streak_data.current_streak == 0


def test_record_session_reaching_goal(app_data):
    record_session(app_data, _session(200), day="2026-02-11")
    emitted = record_session(app_data, _session(50), day="2026-02-11")

    log = app_data.daily_logs["2026-02-11"]
    assert log.productive_minutes == 250
    assert log.free_time_earned == 35
    assert app_data.streak_data.current_streak == 1
    assert [n.title for n in emitted] == ["Session Complete!", "Daily Goal Achieved!"]
    assert emitted[1].message == "You've completed 4h 10m today!"


def test_goal_notification_only_on_transition(app_data):
    record_session(app_data, _session(240), day="2026-02-11")
    emitted = record_session(app_data, _session(25), day="2026-02-11")

    assert [n.title for n in emitted] == ["Session Complete!"]
    assert app_data.streak_data.current_streak == 1


def test_partial_session_notification(app_data):
    emitted = record_session(app_data, _session(12, completed=False), day="2026-02-11")

    assert emitted[0].kind == "info"
    assert emitted[0].title == "Session Logged"
    assert emitted[0].message == "Logged 12 minutes for: Write report"


def test_zero_minute_session_ignored(app_data):
    assert record_session(app_data, _session(0), day="2026-02-11") == []
    assert "2026-02-11" not in app_data.daily_logs


def test_record_session_milestone_notification(app_data):
    app_data.streak_data.current_streak = 6
    emitted = record_session(app_data, _session(240), day="2026-02-11")

    assert emitted[-1].kind == "milestone"
    assert emitted[-1].title == "Milestone Reached!"
    assert app_data.streak_data.streak_savers == 1


def test_save_notes(app_data):
    log = save_notes(app_data, "Felt focused", day="2026-02-11")
    assert log.notes == "Felt focused"
    assert app_data.daily_logs["2026-02-11"].notes == "Felt focused"


def test_record_session_honours_notification_limit(app_data):
    for _ in range(4):
        record_session(app_data, _session(10), day="2026-02-11", notification_limit=3)

    assert len(app_data.notifications) == 3


def test_daily_grants_stop_at_cap(app_data):
    app_data.streak_data.backlog_savers = 400
    days = [f"2026-02-{d:02d}" for d in range(1, 11)]
    app_data.daily_logs[days[0]] = make_log(days[0], productive=0)

    for day in days[1:]:
        get_or_create_log(app_data, day)
        assert app_data.streak_data.backlog_savers <= 450

    assert app_data.streak_data.backlog_savers == 450
    assert app_data.daily_logs[days[-1]].backlog_savers_earned == 15
