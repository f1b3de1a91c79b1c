"""Daily log lifecycle for StreaX.

Logs are created lazily, once per calendar date, from the previous day's
outcome. Session results and notes are applied to the current day's log.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from streax.config import DEFAULT_NOTIFICATION_LIMIT, today_str
from streax.formatters import format_minutes
from streax.goals import is_goal_met, plan_day
from streax.models import AppData, DailyLog, Notification, PomodoroSession
from streax.notifications import add_notification
from streax.rewards import calculate_free_time_rewards
from streax.streak import MilestoneAward, credit_backlog_savers, update_streak_status

logger = logging.getLogger(__name__)


def previous_day(day: str) -> str:
    return (date.fromisoformat(day) - timedelta(days=1)).isoformat()


def get_or_create_log(app_data: AppData, day: str) -> DailyLog:
    """Return the log for *day*, creating it from the previous day's log if needed.

    Creation happens at most once per date; later calls return the same object.
    """
    existing = app_data.daily_logs.get(day)
    if existing is not None:
        return existing

    yesterday = app_data.daily_logs.get(previous_day(day))
    plan = plan_day(yesterday, app_data.profile.daily_commitment_minutes)

    log = DailyLog(
        date=day,
        goal_minutes=plan.goal_minutes,
        backlog_minutes=plan.backlog_minutes,
    )
    if plan.backlog_saver_grant:
        log.backlog_savers_earned = plan.backlog_saver_grant
        credit_backlog_savers(app_data.streak_data, plan.backlog_saver_grant)

    app_data.daily_logs[day] = log
    logger.info(
        "Created log for %s: goal=%d backlog=%d",
        day, log.goal_minutes, log.backlog_minutes,
    )
    return log


def get_today_log(app_data: AppData, today: str | None = None) -> DailyLog:
    return get_or_create_log(app_data, today or today_str())


def milestone_notifications(
    app_data: AppData,
    awards: list[MilestoneAward],
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> list[Notification]:
    out = []
    for award in awards:
        if award.kind == "weekly":
            message = f"{award.streak}-day streak! You earned a streak saver."
        else:
            message = (
                f"{award.streak}-day streak! You earned {award.streak_savers} streak savers"
                f" and {format_minutes(award.backlog_minutes)} of backlog savers."
            )
        out.append(add_notification(
            app_data, "milestone", "Milestone Reached!", message, limit=notification_limit,
        ))
    return out


def record_session(
    app_data: AppData,
    session: PomodoroSession,
    day: str | None = None,
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> list[Notification]:
    """Apply a finished focus session to the day's log.

    Returns the notifications emitted. Sessions without positive duration
    are ignored.
    """
    if session.duration_minutes <= 0:
        logger.debug("Ignoring session with no focus time: %r", session.task_name)
        return []

    log = get_today_log(app_data, day)
    was_met = is_goal_met(log.productive_minutes, log.goal_minutes)

    log.sessions.append(session)
    log.productive_minutes += session.duration_minutes
    log.free_time_earned = calculate_free_time_rewards(log.productive_minutes)
    awards = update_streak_status(app_data, log)

    task = session.task_name.strip()
    if session.completed:
        emitted = [add_notification(
            app_data, "success", "Session Complete!",
            f"Completed {session.duration_minutes} minutes on: {task}",
            limit=notification_limit,
        )]
    else:
        emitted = [add_notification(
            app_data, "info", "Session Logged",
            f"Logged {session.duration_minutes} minutes for: {task}",
            limit=notification_limit,
        )]

    if not was_met and is_goal_met(log.productive_minutes, log.goal_minutes):
        emitted.append(add_notification(
            app_data, "success", "Daily Goal Achieved!",
            f"You've completed {format_minutes(log.productive_minutes)} today!",
            limit=notification_limit,
        ))

    emitted.extend(milestone_notifications(app_data, awards, notification_limit))
    logger.info(
        "Recorded %d min session on %s (total %d/%d)",
        session.duration_minutes, log.date, log.productive_minutes, log.goal_minutes,
    )
    return emitted


def save_notes(app_data: AppData, notes: str, day: str | None = None) -> DailyLog:
    log = get_today_log(app_data, day)
    log.notes = notes
    return log
