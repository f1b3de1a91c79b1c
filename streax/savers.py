"""Streak-saver and backlog-saver redemption for StreaX.

Both redemptions check every precondition before the first write, so a
failed redemption leaves the document untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from streax.config import DEFAULT_NOTIFICATION_LIMIT
from streax.daylog import milestone_notifications
from streax.formatters import format_minutes
from streax.goals import goal_deficit
from streax.models import AppData, DailyLog, Notification
from streax.notifications import add_notification
from streax.rewards import calculate_free_time_rewards
from streax.streak import update_streak_status

logger = logging.getLogger(__name__)


@dataclass
class SaverResult:
    ok: bool
    reason: str = ""
    minutes: int = 0
    notifications: list[Notification] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok

    def to_dict(self) -> dict:
        d = {"ok": self.ok}
        if self.reason:
            d["reason"] = self.reason
        if self.minutes:
            d["minutes"] = self.minutes
        return d


def use_streak_saver(
    app_data: AppData,
    today_log: DailyLog,
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> SaverResult:
    """Spend one streak saver so today counts as a qualifying day."""
    streak = app_data.streak_data
    if streak.streak_savers <= 0:
        return SaverResult(False, "insufficient-streak-savers")
    if today_log.streak_saver_used:
        return SaverResult(False, "streak-saver-already-used")

    streak.streak_savers -= 1
    today_log.streak_saver_used = True
    awards = update_streak_status(app_data, today_log)
    logger.info("Streak saver used on %s (%d left)", today_log.date, streak.streak_savers)

    emitted = [add_notification(
        app_data, "success", "Streak Saver Used!",
        "Your streak is safe! Keep up the great work tomorrow.",
        limit=notification_limit,
    )]
    emitted.extend(milestone_notifications(app_data, awards, notification_limit))
    return SaverResult(True, notifications=emitted)


def use_backlog_savers(
    app_data: AppData,
    today_log: DailyLog,
    minutes_to_redeem: int,
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> SaverResult:
    """Apply banked backlog-saver minutes to today's progress and backlog."""
    streak = app_data.streak_data
    if minutes_to_redeem <= 0:
        return SaverResult(False, "invalid-amount")
    if streak.backlog_savers < minutes_to_redeem:
        return SaverResult(False, "insufficient-backlog-savers")

    streak.backlog_savers -= minutes_to_redeem
    today_log.backlog_savers_used += minutes_to_redeem
    today_log.productive_minutes += minutes_to_redeem
    today_log.backlog_minutes = max(0, today_log.backlog_minutes - minutes_to_redeem)
    today_log.free_time_earned = calculate_free_time_rewards(today_log.productive_minutes)
    awards = update_streak_status(app_data, today_log)
    logger.info(
        "Redeemed %d backlog-saver minutes on %s (%d left)",
        minutes_to_redeem, today_log.date, streak.backlog_savers,
    )

    emitted = [add_notification(
        app_data, "success", "Backlog Redeemed!",
        f"Applied {format_minutes(minutes_to_redeem)} to today's progress!",
        limit=notification_limit,
    )]
    emitted.extend(milestone_notifications(app_data, awards, notification_limit))
    return SaverResult(True, minutes=minutes_to_redeem, notifications=emitted)


def redeem_backlog_for_deficit(
    app_data: AppData,
    today_log: DailyLog,
    requested: int,
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> SaverResult:
    """Redeem up to *requested* minutes, clamped to today's deficit and the balance."""
    deficit = goal_deficit(today_log.productive_minutes, today_log.goal_minutes)
    amount = min(requested, deficit, app_data.streak_data.backlog_savers)
    if amount <= 0:
        return SaverResult(False, "nothing-to-redeem")
    return use_backlog_savers(app_data, today_log, amount, notification_limit)
