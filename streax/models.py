"""Typed dataclasses for the StreaX data model.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from streax.errors import MalformedDataError

SCHEMA_VERSION = "1.0.0"

NOTIFICATION_KINDS = ("info", "success", "warning", "milestone")


# ── Profile ───────────────────────────────────────────────────


@dataclass
class UserProfile:
    name: str = ""
    role: str = ""
    long_term_goal: str = ""
    daily_commitment_minutes: int = 0
    created_at: str = ""
    theme: str = "dark"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> UserProfile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            name=str(d.get("name", "")),
            role=str(d.get("role", "")),
            long_term_goal=str(d.get("longTermGoal", "")),
            daily_commitment_minutes=int(d.get("dailyCommitmentMinutes", 0) or 0),
            created_at=str(d.get("createdAt", "")),
            theme=str(d.get("theme", "dark")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "role": self.role,
            "longTermGoal": self.long_term_goal,
            "dailyCommitmentMinutes": self.daily_commitment_minutes,
            "createdAt": self.created_at,
            "theme": self.theme,
        }


# ── Sessions ──────────────────────────────────────────────────


@dataclass
class SessionPreset:
    name: str
    focus_minutes: int
    break_minutes: int

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SessionPreset:
        return cls(
            name=str(d.get("name", "")),
            focus_minutes=int(d.get("focus_minutes", d.get("focusMinutes", 25))),
            break_minutes=int(d.get("break_minutes", d.get("breakMinutes", 5))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "focus_minutes": self.focus_minutes,
            "break_minutes": self.break_minutes,
        }


@dataclass
class PomodoroSession:
    task_name: str = ""
    start_time: str = ""
    end_time: str = ""
    duration_minutes: int = 0
    preset: str = ""
    completed: bool = True
    notes: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PomodoroSession:
        if not isinstance(d, dict):
            raise MalformedDataError(f"Session must be an object, got {type(d).__name__}")
        return cls(
            task_name=str(d.get("taskName", "")),
            start_time=str(d.get("startTime", "")),
            end_time=str(d.get("endTime", "")),
            duration_minutes=int(d.get("durationMinutes", 0) or 0),
            preset=str(d.get("preset", "")),
            completed=bool(d.get("completed", True)),
            notes=d.get("notes"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "taskName": self.task_name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "preset": self.preset,
            "completed": self.completed,
        }
        if self.notes is not None:
            d["notes"] = self.notes
        return d


# ── Daily log ─────────────────────────────────────────────────


@dataclass
class DailyLog:
    date: str = ""
    productive_minutes: int = 0
    goal_minutes: int = 0
    backlog_minutes: int = 0
    sessions: list[PomodoroSession] = field(default_factory=list)
    streak_saver_used: bool = False
    backlog_savers_earned: int = 0
    backlog_savers_used: int = 0
    free_time_earned: int = 0
    free_time_used: int = 0
    notes: str | None = None
    # streak bookkeeping: counted at most once per day
    streak_counted: bool = False
    streak_base: int | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DailyLog:
        if not isinstance(d, dict):
            raise MalformedDataError(f"Daily log must be an object, got {type(d).__name__}")
        base = d.get("streakBase")
        return cls(
            date=str(d.get("date", "")),
            productive_minutes=int(d.get("productiveMinutes", 0) or 0),
            goal_minutes=int(d.get("goalMinutes", 0) or 0),
            backlog_minutes=int(d.get("backlogMinutes", 0) or 0),
            sessions=[PomodoroSession.from_dict(s) for s in (d.get("sessions") or [])],
            streak_saver_used=bool(d.get("streakSaverUsed", False)),
            backlog_savers_earned=int(d.get("backlogSaversEarned", 0) or 0),
            backlog_savers_used=int(d.get("backlogSaversUsed", 0) or 0),
            free_time_earned=int(d.get("freeTimeEarned", 0) or 0),
            free_time_used=int(d.get("freeTimeUsed", 0) or 0),
            notes=d.get("notes"),
            streak_counted=bool(d.get("streakCounted", False)),
            streak_base=int(base) if base is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "date": self.date,
            "productiveMinutes": self.productive_minutes,
            "goalMinutes": self.goal_minutes,
            "backlogMinutes": self.backlog_minutes,
            "sessions": [s.to_dict() for s in self.sessions],
            "streakSaverUsed": self.streak_saver_used,
            "backlogSaversEarned": self.backlog_savers_earned,
            "backlogSaversUsed": self.backlog_savers_used,
            "freeTimeEarned": self.free_time_earned,
            "freeTimeUsed": self.free_time_used,
            "streakCounted": self.streak_counted,
            "streakBase": self.streak_base,
        }
        if self.notes is not None:
            d["notes"] = self.notes
        return d


# ── Streak ledger ─────────────────────────────────────────────


@dataclass
class StreakData:
    current_streak: int = 0
    longest_streak: int = 0
    total_days: int = 0
    streak_savers: int = 0
    backlog_savers: int = 0
    last_streak_saver_earned: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> StreakData:
        if not isinstance(d, dict):
            raise MalformedDataError("streakData must be an object")
        return cls(
            current_streak=int(d.get("currentStreak", 0) or 0),
            longest_streak=int(d.get("longestStreak", 0) or 0),
            total_days=int(d.get("totalDays", 0) or 0),
            streak_savers=int(d.get("streakSavers", 0) or 0),
            backlog_savers=int(d.get("backlogSavers", 0) or 0),
            last_streak_saver_earned=d.get("lastStreakSaverEarned"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "totalDays": self.total_days,
            "streakSavers": self.streak_savers,
            "backlogSavers": self.backlog_savers,
        }
        if self.last_streak_saver_earned is not None:
            d["lastStreakSaverEarned"] = self.last_streak_saver_earned
        return d


# ── Notifications ─────────────────────────────────────────────


@dataclass
class Notification:
    id: str = ""
    kind: str = "info"
    title: str = ""
    message: str = ""
    timestamp: str = ""
    read: bool = False
    icon: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Notification:
        if not isinstance(d, dict):
            raise MalformedDataError(f"Notification must be an object, got {type(d).__name__}")
        return cls(
            id=str(d.get("id", "")),
            kind=str(d.get("type", d.get("kind", "info"))),
            title=str(d.get("title", "")),
            message=str(d.get("message", "")),
            timestamp=str(d.get("timestamp", "")),
            read=bool(d.get("read", False)),
            icon=d.get("icon"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.kind,
            "title": self.title,
            "message": self.message,
            "timestamp": self.timestamp,
            "read": self.read,
        }
        if self.icon is not None:
            d["icon"] = self.icon
        return d


# ── Aggregate root ────────────────────────────────────────────


@dataclass
class AppData:
    profile: UserProfile = field(default_factory=UserProfile)
    daily_logs: dict[str, DailyLog] = field(default_factory=dict)
    streak_data: StreakData = field(default_factory=StreakData)
    notifications: list[Notification] = field(default_factory=list)
    version: str = SCHEMA_VERSION
    last_updated: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AppData:
        """Build from a persisted document, raising MalformedDataError on a bad shape."""
        if not isinstance(d, dict):
            raise MalformedDataError("App data must be an object")
        for key in ("profile", "dailyLogs", "streakData"):
            if not isinstance(d.get(key), dict):
                raise MalformedDataError(f"App data is missing a valid {key!r} section")
        try:
            logs = {day: DailyLog.from_dict(log) for day, log in d["dailyLogs"].items()}
            return cls(
                profile=UserProfile.from_dict(d["profile"]),
                daily_logs=logs,
                streak_data=StreakData.from_dict(d["streakData"]),
                notifications=[Notification.from_dict(n) for n in (d.get("notifications") or [])],
                version=str(d.get("version", SCHEMA_VERSION)),
                last_updated=str(d.get("lastUpdated", "")),
            )
        except MalformedDataError:
            raise
        except (TypeError, ValueError) as e:
            raise MalformedDataError(f"App data has invalid values: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "profile": self.profile.to_dict(),
            "dailyLogs": {day: log.to_dict() for day, log in sorted(self.daily_logs.items())},
            "streakData": self.streak_data.to_dict(),
            "notifications": [n.to_dict() for n in self.notifications],
            "lastUpdated": self.last_updated,
        }


@dataclass
class BackupData:
    data: AppData
    version: str = SCHEMA_VERSION
    export_date: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "exportDate": self.export_date,
            "data": self.data.to_dict(),
        }
