"""Pomodoro timer for StreaX.

The timer never counts down by decrementing. Running phases store an
absolute end time and every tick re-derives the remaining seconds from
the clock, so a suspended process catches up correctly on the next tick.
All operations take ``now`` (epoch seconds) explicitly.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from streax.config import DEFAULT_PRESETS
from streax.errors import TimerStateError, ValidationError
from streax.models import PomodoroSession, SessionPreset
from streax.storage import TIMER_STATE_KEY, JsonStore

logger = logging.getLogger(__name__)

MAX_STATE_AGE_SECONDS = 24 * 60 * 60


class TimerPhase(Enum):
    IDLE = "idle"
    FOCUS = "focus"
    BREAK = "break"
    PAUSED = "paused"


RUNNING_PHASES = (TimerPhase.FOCUS, TimerPhase.BREAK)


def remaining_seconds(now: float, end_time: float) -> int:
    """Whole seconds left until *end_time*, never negative."""
    return max(0, math.ceil(end_time - now))


def _iso(ts: float) -> str:
    return datetime.fromtimestamp(ts).isoformat(timespec="seconds")


@dataclass
class TimerState:
    phase: TimerPhase = TimerPhase.IDLE
    preset_index: int = 0
    task_name: str = ""
    time_remaining: int = 0
    total_focus_minutes: int = 0
    session_start: float | None = None
    paused_remaining: int = 0
    paused_phase: TimerPhase | None = None
    end_time: float | None = None
    last_update: float = 0.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TimerState:
        paused_phase = d.get("pausedPhase")
        return cls(
            phase=TimerPhase(d.get("phase", "idle")),
            preset_index=int(d.get("selectedPreset", 0)),
            task_name=str(d.get("taskName", "")),
            time_remaining=int(d.get("timeRemaining", 0)),
            total_focus_minutes=int(d.get("totalFocusTime", 0)),
            session_start=d.get("sessionStartTime"),
            paused_remaining=int(d.get("pausedTime", 0)),
            paused_phase=TimerPhase(paused_phase) if paused_phase else None,
            end_time=d.get("endTime"),
            last_update=float(d.get("lastUpdate", 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "selectedPreset": self.preset_index,
            "taskName": self.task_name,
            "timeRemaining": self.time_remaining,
            "totalFocusTime": self.total_focus_minutes,
            "sessionStartTime": self.session_start,
            "pausedTime": self.paused_remaining,
            "pausedPhase": self.paused_phase.value if self.paused_phase else None,
            "endTime": self.end_time,
            "lastUpdate": self.last_update,
        }

    @property
    def time_remaining_display(self) -> str:
        minutes, seconds = divmod(self.time_remaining, 60)
        return f"{minutes:02d}:{seconds:02d}"


class PomodoroTimer:
    """Focus/break state machine that yields a PomodoroSession when a session ends.

    Usage:
        timer = PomodoroTimer(settings.presets)
        timer.start("Write report", preset_index=1, now=time.time())
        session = timer.tick(time.time())   # None until the break finishes
        session = timer.stop(time.time())   # partial session if still focusing
    """

    def __init__(self, presets: list[SessionPreset] | None = None, state: TimerState | None = None):
        self.presets = presets or list(DEFAULT_PRESETS)
        self.state = state or TimerState()

    @property
    def preset(self) -> SessionPreset:
        return self.presets[self.state.preset_index]

    @property
    def is_running(self) -> bool:
        return self.state.phase in RUNNING_PHASES

    def start(self, task_name: str, preset_index: int, now: float) -> None:
        if self.state.phase is not TimerPhase.IDLE:
            raise TimerStateError("start", self.state.phase.value)
        if not task_name or not task_name.strip():
            raise ValidationError("Please enter a task name")
        if not 0 <= preset_index < len(self.presets):
            raise ValidationError(f"Unknown preset: {preset_index}")

        preset = self.presets[preset_index]
        duration = preset.focus_minutes * 60
        self.state = TimerState(
            phase=TimerPhase.FOCUS,
            preset_index=preset_index,
            task_name=task_name.strip(),
            time_remaining=duration,
            total_focus_minutes=preset.focus_minutes,
            session_start=now,
            end_time=now + duration,
            last_update=now,
        )
        logger.info("Timer started: %s (%s)", self.state.task_name, preset.name)

    def pause(self, now: float) -> None:
        if not self.is_running:
            raise TimerStateError("pause", self.state.phase.value)
        s = self.state
        s.time_remaining = remaining_seconds(now, s.end_time)
        s.paused_remaining = s.time_remaining
        s.paused_phase = s.phase
        s.phase = TimerPhase.PAUSED
        s.end_time = None
        s.last_update = now
        logger.info("Timer paused with %ds left", s.paused_remaining)

    def resume(self, now: float) -> None:
        s = self.state
        if s.phase is not TimerPhase.PAUSED:
            raise TimerStateError("resume", s.phase.value)
        if s.paused_phase is None:
            s.paused_phase = TimerPhase.FOCUS if s.total_focus_minutes > 0 else TimerPhase.BREAK
        s.phase = s.paused_phase
        s.paused_phase = None
        s.time_remaining = s.paused_remaining
        s.end_time = now + s.paused_remaining
        s.last_update = now
        logger.info("Timer resumed (%s)", s.phase.value)

    def tick(self, now: float) -> PomodoroSession | None:
        """Reconcile against the clock and apply any due phase transitions.

        Returns the finished session when the break ends, else None.
        """
        s = self.state
        while s.phase in RUNNING_PHASES:
            if s.end_time is None:
                # legacy state without an end time: anchor it on the last update
                s.end_time = s.last_update + s.time_remaining
            s.time_remaining = remaining_seconds(now, s.end_time)
            s.last_update = now
            if s.time_remaining > 0:
                return None
            if s.phase is TimerPhase.FOCUS:
                break_seconds = self.preset.break_minutes * 60
                s.phase = TimerPhase.BREAK
                s.end_time = s.end_time + break_seconds
                logger.info("Focus complete, break started")
            else:
                return self._finish(now, completed=True, minutes=s.total_focus_minutes)
        return None

    def stop(self, now: float) -> PomodoroSession | None:
        """End the session early.

        During a break the session is complete; during focus (or paused
        focus) only the whole minutes actually focused are logged. Returns
        None when nothing worth logging happened.
        """
        s = self.state
        if s.phase is TimerPhase.IDLE:
            raise TimerStateError("stop", s.phase.value)

        in_break = s.phase is TimerPhase.BREAK or (
            s.phase is TimerPhase.PAUSED and s.paused_phase is TimerPhase.BREAK
        )
        if in_break:
            return self._finish(now, completed=True, minutes=s.total_focus_minutes)

        if s.phase is TimerPhase.PAUSED:
            left = s.paused_remaining
        else:
            left = remaining_seconds(now, s.end_time)
        focused = (self.preset.focus_minutes * 60 - left) // 60
        return self._finish(now, completed=False, minutes=focused)

    def reset(self) -> None:
        self.state = TimerState()

    def _finish(self, now: float, completed: bool, minutes: int) -> PomodoroSession | None:
        s = self.state
        session = None
        if minutes > 0:
            session = PomodoroSession(
                task_name=s.task_name,
                start_time=_iso(s.session_start if s.session_start is not None else now),
                end_time=_iso(now),
                duration_minutes=int(minutes),
                preset=self.preset.name,
                completed=completed,
            )
            logger.info("Session finished: %s, %d min, completed=%s", s.task_name, minutes, completed)
        else:
            logger.info("Session stopped with no focus time logged")
        self.reset()
        return session


# ── Persistence ───────────────────────────────────────────────


def save_timer_state(store: JsonStore, state: TimerState, now: float) -> None:
    """Persist a non-idle timer; an idle timer clears the stored state."""
    if state.phase is TimerPhase.IDLE:
        store.clear(TIMER_STATE_KEY)
        return
    state.last_update = now
    store.set(TIMER_STATE_KEY, state.to_dict())


def load_timer_state(store: JsonStore, now: float) -> TimerState | None:
    """Load persisted timer state, discarding corrupt or stale (>24h) entries.

    Expired running phases are returned as-is; the next tick applies the
    due transitions.
    """
    try:
        raw = store.get(TIMER_STATE_KEY)
        if raw is None:
            return None
        state = TimerState.from_dict(raw)
    except (json.JSONDecodeError, ValueError, TypeError) as e:
        logger.warning("Discarding unreadable timer state: %s", e)
        store.clear(TIMER_STATE_KEY)
        return None

    age = now - state.last_update
    if age > MAX_STATE_AGE_SECONDS:
        logger.warning("Discarding timer state from %.1f hours ago", age / 3600)
        store.clear(TIMER_STATE_KEY)
        return None
    return state
