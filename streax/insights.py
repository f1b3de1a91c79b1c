"""Read-only derived views over StreaX data for the front-ends."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any

from streax.formatters import date_range, format_percent, month_range, week_range
from streax.goals import goal_deficit, is_goal_met
from streax.models import AppData, DailyLog
from streax.rewards import get_goal_progress, next_reward_tier
from streax.streak import get_next_milestone

TIMEFRAMES = ("day", "week", "month", "all", "custom")


def today_summary(app_data: AppData, today_log: DailyLog) -> dict[str, Any]:
    """Everything the dashboard shows about the current day."""
    streak = app_data.streak_data
    goal_met = is_goal_met(today_log.productive_minutes, today_log.goal_minutes)
    remaining = goal_deficit(today_log.productive_minutes, today_log.goal_minutes)
    tier = next_reward_tier(today_log.productive_minutes)
    return {
        "date": today_log.date,
        "productiveMinutes": today_log.productive_minutes,
        "goalMinutes": today_log.goal_minutes,
        "backlogMinutes": today_log.backlog_minutes,
        "remainingMinutes": remaining,
        "progress": round(get_goal_progress(today_log.productive_minutes, today_log.goal_minutes), 1),
        "goalMet": goal_met,
        "freeTimeEarned": today_log.free_time_earned,
        "nextRewardHours": tier.hours if tier else None,
        "sessionCount": len(today_log.sessions),
        "streak": streak.to_dict(),
        "nextMilestone": asdict(get_next_milestone(streak.current_streak)),
        "canUseStreakSaver": not goal_met and streak.streak_savers > 0 and not today_log.streak_saver_used,
        "canUseBacklogSaver": remaining > 0 and streak.backlog_savers > 0,
        "notes": today_log.notes or "",
    }


def _bounds(timeframe: str, today: str, start: str | None, end: str | None) -> tuple[str, str]:
    day = date.fromisoformat(today)
    if timeframe == "day":
        return today, today
    if timeframe == "week":
        return week_range(day)
    if timeframe == "month":
        return month_range(day)
    if timeframe == "all":
        return "0000-00-00", "9999-99-99"
    if timeframe == "custom":
        if not start or not end:
            raise ValueError("Custom timeframe needs both start and end dates")
        date.fromisoformat(start)
        date.fromisoformat(end)
        return start, end
    raise ValueError(f"Unknown timeframe: {timeframe!r}")


@dataclass
class TimeframeStats:
    start: str
    end: str
    days_tracked: int
    total_minutes: int
    total_sessions: int
    goals_met: int
    average_minutes: float
    best_day: str | None
    best_day_minutes: int
    completion_rate: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "daysTracked": self.days_tracked,
            "totalMinutes": self.total_minutes,
            "totalSessions": self.total_sessions,
            "goalsMet": self.goals_met,
            "averageMinutes": round(self.average_minutes, 1),
            "bestDay": self.best_day,
            "bestDayMinutes": self.best_day_minutes,
            "completionRate": self.completion_rate,
        }


def logs_between(app_data: AppData, start: str, end: str) -> list[DailyLog]:
    """Logs whose date falls in [start, end], oldest first. Dates compare as strings."""
    return [log for day, log in sorted(app_data.daily_logs.items()) if start <= day <= end]


def timeframe_stats(
    app_data: AppData,
    timeframe: str,
    today: str,
    start: str | None = None,
    end: str | None = None,
) -> TimeframeStats:
    lo, hi = _bounds(timeframe, today, start, end)
    logs = logs_between(app_data, lo, hi)

    total = sum(log.productive_minutes for log in logs)
    met = sum(1 for log in logs if is_goal_met(log.productive_minutes, log.goal_minutes))
    best = max(logs, key=lambda log: log.productive_minutes, default=None)

    if timeframe == "all" and logs:
        lo, hi = logs[0].date, logs[-1].date
    return TimeframeStats(
        start=lo,
        end=hi,
        days_tracked=len(logs),
        total_minutes=total,
        total_sessions=sum(len(log.sessions) for log in logs),
        goals_met=met,
        average_minutes=total / len(logs) if logs else 0.0,
        best_day=best.date if best else None,
        best_day_minutes=best.productive_minutes if best else 0,
        completion_rate=format_percent(met, len(logs)),
    )


def recent_days(app_data: AppData, today: str, days: int = 7) -> list[dict[str, Any]]:
    """Per-day minutes vs goal for the last *days* days, including untracked days as zeros."""
    start = (date.fromisoformat(today) - timedelta(days=days - 1)).isoformat()
    out = []
    for day in date_range(start, today):
        log = app_data.daily_logs.get(day)
        out.append({
            "date": day,
            "productiveMinutes": log.productive_minutes if log else 0,
            "goalMinutes": log.goal_minutes if log else 0,
            "goalMet": bool(log) and is_goal_met(log.productive_minutes, log.goal_minutes),
        })
    return out
