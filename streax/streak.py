"""Streak ledger and milestone projection for StreaX.

A day qualifies when its goal is met or a streak saver was spent on it.
Each day is counted toward the streak at most once: the first evaluation
of a day snapshots the streak it started from (``streak_base``) and the
``streak_counted`` flag makes later evaluations no-ops.

Days without a log are never evaluated, so a skipped day does not break
the streak by itself; the next evaluated day decides it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from streax.goals import is_goal_met
from streax.models import AppData, DailyLog, StreakData

logger = logging.getLogger(__name__)

BACKLOG_SAVER_CAP = 450

WEEKLY_MILESTONE = 7
MONTHLY_MILESTONE = 30
WEEKLY_STREAK_SAVERS = 1
MONTHLY_STREAK_SAVERS = 2
MONTHLY_BACKLOG_BONUS = 60


@dataclass(frozen=True)
class MilestoneAward:
    kind: str  # weekly, monthly
    streak: int
    streak_savers: int = 0
    backlog_minutes: int = 0


@dataclass(frozen=True)
class Milestone:
    kind: str  # weekly, monthly
    days_remaining: int
    reward: str


def credit_backlog_savers(streak_data: StreakData, minutes: int) -> int:
    """Add backlog-saver minutes, truncating at the cap. Returns minutes actually credited."""
    room = max(0, BACKLOG_SAVER_CAP - streak_data.backlog_savers)
    credited = max(0, min(minutes, room))
    streak_data.backlog_savers += credited
    if credited < minutes:
        logger.debug("Backlog saver credit truncated at cap: %d of %d", credited, minutes)
    return credited


def day_qualifies(log: DailyLog) -> bool:
    return is_goal_met(log.productive_minutes, log.goal_minutes) or log.streak_saver_used


def update_streak_status(app_data: AppData, today_log: DailyLog) -> list[MilestoneAward]:
    """Re-evaluate the streak after today's minutes or saver state changed.

    Safe to call any number of times per day. Returns the milestone awards
    made by this call (empty when nothing new was awarded).
    """
    streak = app_data.streak_data

    if today_log.streak_base is None:
        today_log.streak_base = streak.current_streak

    if not day_qualifies(today_log):
        if streak.current_streak:
            logger.info("Streak broken on %s (was %d)", today_log.date, streak.current_streak)
        streak.current_streak = 0
        return []

    if today_log.streak_counted:
        logger.debug("Day %s already counted toward streak", today_log.date)
        return []

    streak.current_streak = today_log.streak_base + 1
    streak.total_days += 1
    streak.longest_streak = max(streak.longest_streak, streak.current_streak)
    today_log.streak_counted = True
    logger.info("Streak counted for %s: %d", today_log.date, streak.current_streak)

    awards = []
    if streak.current_streak % WEEKLY_MILESTONE == 0:
        streak.streak_savers += WEEKLY_STREAK_SAVERS
        streak.last_streak_saver_earned = today_log.date
        awards.append(MilestoneAward("weekly", streak.current_streak, streak_savers=WEEKLY_STREAK_SAVERS))

    if streak.current_streak % MONTHLY_MILESTONE == 0:
        credited = credit_backlog_savers(streak, MONTHLY_BACKLOG_BONUS)
        streak.streak_savers += MONTHLY_STREAK_SAVERS
        awards.append(MilestoneAward(
            "monthly", streak.current_streak,
            streak_savers=MONTHLY_STREAK_SAVERS, backlog_minutes=credited,
        ))

    return awards


def get_next_milestone(current_streak: int) -> Milestone:
    """Days until the next weekly or monthly boundary, whichever comes first."""
    until_weekly = WEEKLY_MILESTONE - (current_streak % WEEKLY_MILESTONE)
    until_monthly = MONTHLY_MILESTONE - (current_streak % MONTHLY_MILESTONE)
    if until_weekly <= until_monthly:
        return Milestone("weekly", until_weekly, "+1 Streak Saver")
    return Milestone("monthly", until_monthly, "+60min Backlog Saver + 2 Streak Savers")
