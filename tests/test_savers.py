"""Tests for streax/savers.py: streak-saver and backlog-saver redemption."""

from streax.savers import redeem_backlog_for_deficit, use_backlog_savers, use_streak_saver
from streax.streak import update_streak_status

from conftest import make_log


def test_streak_saver_protects_streak(app_data):
    app_data.streak_data.current_streak = 3
    app_data.streak_data.streak_savers = 1
    log = make_log("2026-02-11", productive=0)

    result = use_streak_saver(app_data, log)

    assert result
    assert app_data.streak_data.streak_savers == 0
    assert app_data.streak_data.current_streak == 4
    assert log.streak_saver_used
    assert result.notifications[0].title == "Streak Saver Used!"


def test_streak_saver_without_balance(app_data):
    log = make_log("2026-02-11", productive=0)

    result = use_streak_saver(app_data, log)

    assert not result
    assert result.reason == "insufficient-streak-savers"
    assert not log.streak_saver_used
    assert app_data.notifications == []


def test_streak_saver_once_per_day(app_data):
    app_data.streak_data.streak_savers = 2
    log = make_log("2026-02-11", productive=0)
    use_streak_saver(app_data, log)

    result = use_streak_saver(app_data, log)

    assert result.reason == "streak-saver-already-used"
    assert app_data.streak_data.streak_savers == 1


def test_streak_saver_after_break_restores_streak(app_data):
    app_data.streak_data.current_streak = 3
    app_data.streak_data.streak_savers = 1
    log = make_log("2026-02-11", productive=10)

    update_streak_status(app_data, log)
    assert app_data.streak_data.current_streak == 0

    use_streak_saver(app_data, log)
    assert app_data.streak_data.current_streak == 4


def test_backlog_savers_apply_to_today(app_data):
    app_data.streak_data.backlog_savers = 100
    log = make_log("2026-02-11", productive=200, goal=240, backlog=50)

    result = use_backlog_savers(app_data, log, 40)

    assert result
    assert result.minutes == 40
    assert app_data.streak_data.backlog_savers == 60
    assert log.productive_minutes == 240
    assert log.backlog_minutes == 10
    assert log.backlog_savers_used == 40
    assert log.free_time_earned == 35
    assert app_data.streak_data.current_streak == 1
    assert result.notifications[0].message == "Applied 40m to today's progress!"


def test_backlog_never_negative(app_data):
    app_data.streak_data.backlog_savers = 100
    log = make_log("2026-02-11", productive=0, backlog=10)

    use_backlog_savers(app_data, log, 30)

    assert log.backlog_minutes == 0


def test_backlog_savers_insufficient(app_data):
    app_data.streak_data.backlog_savers = 10
    log = make_log("2026-02-11", productive=0)

    result = use_backlog_savers(app_data, log, 30)

    assert not result
    assert result.reason == "insufficient-backlog-savers"
    assert app_data.streak_data.backlog_savers == 10
    assert log.productive_minutes == 0


def test_backlog_savers_invalid_amount(app_data):
    app_data.streak_data.backlog_savers = 10
    result = use_backlog_savers(app_data, make_log("2026-02-11", productive=0), 0)
    assert result.reason == "invalid-amount"


def test_redeem_clamped_to_deficit(app_data):
    app_data.streak_data.backlog_savers = 300
    log = make_log("2026-02-11", productive=220, goal=240)

    result = redeem_backlog_for_deficit(app_data, log, 60)

    assert result.minutes == 20
    assert app_data.streak_data.backlog_savers == 280
    assert log.productive_minutes == 240


def test_redeem_clamped_to_balance(app_data):
    app_data.streak_data.backlog_savers = 15
    log = make_log("2026-02-11", productive=0, goal=240)

    result = redeem_backlog_for_deficit(app_data, log, 60)

    assert result.minutes == 15
    assert app_data.streak_data.backlog_savers == 0


def test_redeem_nothing_when_goal_met(app_data):
    app_data.streak_data.backlog_savers = 100
    log = make_log("2026-02-11", productive=240, goal=240)

    result = redeem_backlog_for_deficit(app_data, log, 30)

    assert result.reason == "nothing-to-redeem"
    assert app_data.streak_data.backlog_savers == 100


def test_saver_result_to_dict(app_data):
    app_data.streak_data.backlog_savers = 50
    result = use_backlog_savers(app_data, make_log("2026-02-11", productive=0), 15)
    assert result.to_dict() == {"ok": True, "minutes": 15}
    assert use_streak_saver(app_data, make_log("2026-02-12", productive=0)).to_dict() == {
        "ok": False,
        "reason": "insufficient-streak-savers",
    }


def test_failed_redemption_leaves_log_untouched(app_data):
    app_data.streak_data.backlog_savers = 20
    log = make_log("2026-02-11", productive=100, goal=240, backlog=90)
    before = log.to_dict()

    result = use_backlog_savers(app_data, log, 60)

    assert not result
    assert log.to_dict() == before
    assert log.backlog_minutes == 90
    assert log.backlog_savers_used == 0
    assert app_data.streak_data.backlog_savers == 20
    assert app_data.notifications == []


def test_savers_honour_notification_limit(app_data):
    app_data.streak_data.backlog_savers = 100
    log = make_log("2026-02-11", productive=0)
    for _ in range(3):
        redeem_backlog_for_deficit(app_data, log, 10, notification_limit=2)

    assert len(app_data.notifications) == 2
