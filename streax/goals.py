"""Daily goal and backlog calculation for StreaX.

A day's goal is fixed when its log is first created and is derived only
from the immediately preceding calendar day:

- first tracked day (or a gap): goal = baseline commitment, no backlog,
  no backlog-saver grant
- otherwise: goal = max(yesterday's productive minutes, commitment);
  backlog = yesterday's backlog + yesterday's unmet goal; a fixed
  backlog-saver grant is due
"""

from __future__ import annotations

from dataclasses import dataclass

from streax.models import DailyLog

DAILY_BACKLOG_SAVER_GRANT = 15


@dataclass(frozen=True)
class DayPlan:
    goal_minutes: int
    backlog_minutes: int
    backlog_saver_grant: int


def is_goal_met(productive_minutes: int, goal_minutes: int) -> bool:
    return productive_minutes >= goal_minutes


def goal_deficit(productive_minutes: int, goal_minutes: int) -> int:
    """Minutes still missing to reach the goal (0 once met)."""
    return max(0, goal_minutes - productive_minutes)


def calculate_daily_goal(yesterday: DailyLog | None, commitment_minutes: int) -> int:
    if yesterday is None:
        return commitment_minutes
    return max(yesterday.productive_minutes, commitment_minutes)


def calculate_backlog(yesterday: DailyLog | None) -> int:
    """Backlog carried into the next day: existing backlog plus yesterday's shortfall."""
    if yesterday is None:
        return 0
    return yesterday.backlog_minutes + goal_deficit(yesterday.productive_minutes, yesterday.goal_minutes)


def plan_day(yesterday: DailyLog | None, commitment_minutes: int) -> DayPlan:
    """Compute the goal, carried backlog and saver grant for a new day."""
    return DayPlan(
        goal_minutes=calculate_daily_goal(yesterday, commitment_minutes),
        backlog_minutes=calculate_backlog(yesterday),
        backlog_saver_grant=0 if yesterday is None else DAILY_BACKLOG_SAVER_GRANT,
    )
