#!/usr/bin/env python3
"""StreaX TUI: terminal dashboard and Pomodoro timer powered by Textual."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Callable

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Footer, Header, Input, Label, Static

from streax import (
    AppData,
    JsonStore,
    PomodoroSession,
    PomodoroTimer,
    TimerPhase,
    TimerStateError,
    ValidationError,
    configure_logging,
    create_profile,
    data_root,
    default_app_data,
    deliver,
    get_today_log,
    has_completed_onboarding,
    load_app_data,
    load_settings,
    load_timer_state,
    recent_days,
    record_session,
    redeem_backlog_for_deficit,
    save_app_data,
    save_timer_state,
    store_dir,
    today_summary,
    use_streak_saver,
)
from streax.formatters import format_minutes, pluralize

BACKLOG_REDEEM_STEP = 15


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: auto;
}

#left-pane {
    width: 1fr;
    min-width: 30;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    min-width: 30;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
}

#timer-display {
    text-style: bold;
    color: $warning;
    content-align: center middle;
    height: 3;
}

#message {
    color: $accent;
    height: auto;
    padding: 0 1;
}

#history-table {
    height: 1fr;
}
"""


# ── Main app ───────────────────────────────────────────────────


class StreaxApp(App):
    """StreaX: streak dashboard with a Pomodoro timer."""

    TITLE = "StreaX"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("t", "focus_task", "Task"),
        Binding("n", "next_preset", "Preset"),
        Binding("p", "toggle_pause", "Pause/Resume"),
        Binding("x", "stop_timer", "Stop"),
        Binding("s", "use_streak_saver", "Streak saver"),
        Binding("b", "use_backlog_saver", "Backlog saver"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, store: JsonStore | None = None, clock: Callable[[], float] = time.time) -> None:
        super().__init__()
        self.store = store or JsonStore(store_dir(data_root()))
        self.clock = clock
        self.app_data: AppData | None = load_app_data(self.store)
        now = self.clock()
        self.settings = load_settings(data_root())
        self.timer = PomodoroTimer(self.settings.presets, load_timer_state(self.store, now))
        restored = self.timer.state.phase is not TimerPhase.IDLE
        self.preset_index = self.timer.state.preset_index if restored else 1

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Label("Today", classes="section-title"),
                Static(id="today-info"),
                Label("Streak", classes="section-title"),
                Static(id="streak-info"),
                id="left-pane",
            ),
            Vertical(
                Label("Timer", classes="section-title"),
                Static(id="timer-display"),
                Static(id="preset-info"),
                Input(placeholder="What are you working on?", id="task-input"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Static(id="message")
        yield DataTable(id="history-table")
        yield Footer()

    def on_mount(self) -> None:
        table: DataTable = self.query_one("#history-table", DataTable)
        table.add_columns("Date", "Done", "Goal", "Met")
        self._tick()
        self.set_interval(1.0, self._tick)
        self._refresh()

    # ── Rendering ──────────────────────────────────────────────

    def _refresh(self) -> None:
        data = self.app_data
        if data is None:
            self.query_one("#today-info", Static).update("No profile yet. Run with --name and --hours.")
            return

        log = get_today_log(data)
        summary = today_summary(data, log)
        self.query_one("#today-info", Static).update(
            f"{format_minutes(log.productive_minutes)} / {format_minutes(log.goal_minutes)}"
            f" ({summary['progress']:.0f}%)\n"
            f"Backlog: {format_minutes(log.backlog_minutes)}\n"
            f"Free time: {format_minutes(log.free_time_earned)}"
        )
        streak = data.streak_data
        milestone = summary["nextMilestone"]
        self.query_one("#streak-info", Static).update(
            f"{pluralize(streak.current_streak, 'day')} (longest {streak.longest_streak})\n"
            f"Streak savers: {streak.streak_savers}\n"
            f"Backlog savers: {format_minutes(streak.backlog_savers)}\n"
            f"Next: {milestone['reward']} in {milestone['days_remaining']}d"
        )

        table: DataTable = self.query_one("#history-table", DataTable)
        table.clear()
        for day in reversed(recent_days(data, log.date, 7)):
            table.add_row(
                day["date"],
                format_minutes(day["productiveMinutes"]),
                format_minutes(day["goalMinutes"]),
                "yes" if day["goalMet"] else "",
            )

    def _render_timer(self) -> None:
        state = self.timer.state
        phase = state.phase.value.upper()
        self.query_one("#timer-display", Static).update(f"{phase}  {state.time_remaining_display}")
        preset = self.timer.presets[self.preset_index]
        task = f" · {state.task_name}" if state.task_name else ""
        self.query_one("#preset-info", Static).update(f"Preset: {preset.name}{task}")

    def _say(self, message: str) -> None:
        self.query_one("#message", Static).update(message)

    # ── Persistence ────────────────────────────────────────────

    def _apply_session(self, session: PomodoroSession | None) -> None:
        if session is None or self.app_data is None:
            return
        emitted = record_session(
            self.app_data, session, notification_limit=self.settings.notification_limit,
        )
        self._save(emitted)
        self._say(emitted[0].message if emitted else "Session logged")

    def _save(self, emitted: list) -> None:
        save_app_data(self.store, self.app_data)
        if emitted:
            deliver(emitted, data_root())
        self._refresh()

    def _tick(self) -> None:
        now = self.clock()
        session = self.timer.tick(now)
        if session is not None:
            self._apply_session(session)
        save_timer_state(self.store, self.timer.state, now)
        self._render_timer()

    # ── Actions ────────────────────────────────────────────────

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.app_data is None:
            self._say("Create a profile first.")
            return
        now = self.clock()
        try:
            self.timer.start(event.value, self.preset_index, now)
        except (TimerStateError, ValidationError) as e:
            self._say(str(e))
            return
        event.input.value = ""
        self.set_focus(None)
        save_timer_state(self.store, self.timer.state, now)
        self._say(f"Focus started: {self.timer.state.task_name}")
        self._render_timer()

    def action_focus_task(self) -> None:
        self.query_one("#task-input", Input).focus()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_next_preset(self) -> None:
        if self.timer.state.phase is not TimerPhase.IDLE:
            self._say("Finish the current session before switching presets.")
            return
        self.preset_index = (self.preset_index + 1) % len(self.timer.presets)
        self._render_timer()

    def action_toggle_pause(self) -> None:
        now = self.clock()
        try:
            if self.timer.state.phase is TimerPhase.PAUSED:
                self.timer.resume(now)
            else:
                self.timer.pause(now)
        except TimerStateError as e:
            self._say(str(e))
            return
        save_timer_state(self.store, self.timer.state, now)
        self._render_timer()

    def action_stop_timer(self) -> None:
        now = self.clock()
        try:
            session = self.timer.stop(now)
        except TimerStateError as e:
            self._say(str(e))
            return
        save_timer_state(self.store, self.timer.state, now)
        if session is None:
            self._say("Nothing to log.")
        self._apply_session(session)
        self._render_timer()

    def action_use_streak_saver(self) -> None:
        if self.app_data is None:
            return
        result = use_streak_saver(
            self.app_data, get_today_log(self.app_data), self.settings.notification_limit,
        )
        if not result:
            self._say(f"Cannot use streak saver: {result.reason}")
            return
        self._save(result.notifications)
        self._say("Streak saver used. Your streak is safe!")

    def action_use_backlog_saver(self) -> None:
        if self.app_data is None:
            return
        log = get_today_log(self.app_data)
        result = redeem_backlog_for_deficit(
            self.app_data, log, BACKLOG_REDEEM_STEP, self.settings.notification_limit,
        )
        if not result:
            self._say(f"Cannot redeem backlog saver: {result.reason}")
            return
        self._save(result.notifications)
        self._say(f"Applied {format_minutes(result.minutes)} to today's progress.")

    def action_quit_app(self) -> None:
        if self.app_data is not None:
            save_app_data(self.store, self.app_data)
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="StreaX terminal dashboard")
    parser.add_argument("--name", help="create a profile with this name")
    parser.add_argument("--hours", type=float, help="daily commitment in hours (with --name)")
    args = parser.parse_args(argv)

    configure_logging()
    store = JsonStore(store_dir(data_root()))

    if args.name:
        if has_completed_onboarding(store):
            print("A profile already exists. Reset your data first.")
            sys.exit(1)
        try:
            profile = create_profile(args.name, int((args.hours or 0) * 60))
        except ValidationError as e:
            print(f"Invalid profile: {e}")
            sys.exit(1)
        save_app_data(store, default_app_data(profile))
        print(f"Profile created for {profile.name}.")

    StreaxApp(store).run()


if __name__ == "__main__":
    main()
