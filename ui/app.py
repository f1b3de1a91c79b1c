from __future__ import annotations

import os
import secrets
import time
from dataclasses import asdict
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from streax import (
    AppData,
    IncompatibleBackupError,
    JsonStore,
    MalformedDataError,
    NoDataError,
    PomodoroSession,
    PomodoroTimer,
    TimerStateError,
    ValidationError,
    backup_filename,
    clear_all_data,
    create_profile,
    data_root,
    default_app_data,
    deliver,
    export_backup,
    get_notifications,
    get_today_log,
    get_unread_count,
    has_completed_onboarding,
    load_app_data,
    load_settings,
    load_timer_state,
    mark_all_read,
    mark_notification_read,
    recent_days,
    record_session,
    redeem_backlog_for_deficit,
    restore_backup,
    save_app_data,
    save_notes,
    save_timer_state,
    store_dir,
    timeframe_stats,
    today_str,
    today_summary,
    use_streak_saver,
)
from streax.formatters import format_hours, format_minutes, pluralize


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="StreaX", version="1.0.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("STREAX_USERNAME", "")
    expected_password = os.environ.get("STREAX_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Data access ───────────────────────────────────────────────

def _store() -> JsonStore:
    return JsonStore(store_dir(data_root()))


def _load(store: JsonStore) -> AppData:
    data = load_app_data(store)
    if data is None:
        raise HTTPException(status_code=404, detail="Not onboarded")
    return data


def _commit(store: JsonStore, data: AppData, emitted: list) -> None:
    """Persist the document, then hand emitted notifications to the hooks."""
    save_app_data(store, data)
    if emitted:
        deliver(emitted, data_root())


def _notification_limit() -> int:
    return load_settings(data_root()).notification_limit


def _int_field(payload: dict[str, Any], key: str, default: int | None = None) -> int:
    value = payload.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{key} must be an integer")


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    store = _store()
    data = load_app_data(store)
    if data is None:
        return HTMLResponse(_PAGE.format(body=(
            '<section class="card"><h2>Welcome to StreaX</h2>'
            '<p class="muted">No profile yet. POST to <code>/api/onboarding</code> to get started.</p>'
            "</section>"
        )))

    log = get_today_log(data)
    save_app_data(store, data)
    summary = today_summary(data, log)
    streak = data.streak_data
    milestone = summary["nextMilestone"]
    next_reward = summary["nextRewardHours"]
    reward_note = (
        f"Next free-time reward at {format_hours(next_reward * 60)}" if next_reward else "All free-time rewards unlocked"
    )

    rows = []
    for day in recent_days(data, log.date, 7):
        mark = "✓" if day["goalMet"] else "·"
        rows.append(
            f"<tr><td>{day['date']}</td><td>{format_minutes(day['productiveMinutes'])}</td>"
            f"<td>{format_minutes(day['goalMinutes'])}</td><td>{mark}</td></tr>"
        )

    sessions = "".join(
        f"<li>{_escape(s.task_name)}: {s.duration_minutes}m"
        f"{'' if s.completed else ' (partial)'}</li>"
        for s in log.sessions
    ) or '<li class="muted">(no sessions yet)</li>'

    body = f"""
    <section class="card">
      <h2>Hi {_escape(data.profile.name)}</h2>
      <div class="big">{format_minutes(log.productive_minutes)} / {format_minutes(log.goal_minutes)}</div>
      <div class="bar"><div style="width:{summary['progress']}%"></div></div>
      <p class="muted">Backlog {format_minutes(log.backlog_minutes)} · Free time earned {format_minutes(log.free_time_earned)}</p>
      <p class="muted">{reward_note}</p>
    </section>
    <section class="card">
      <h3>Streak</h3>
      <p><b>{pluralize(streak.current_streak, 'day')}</b> (longest {streak.longest_streak}, total {streak.total_days})</p>
      <p class="muted">Streak savers {streak.streak_savers} · Backlog savers {format_minutes(streak.backlog_savers)}</p>
      <p class="muted">Next: {milestone['reward']} in {milestone['days_remaining']} days</p>
    </section>
    <section class="card"><h3>Today's sessions</h3><ul>{sessions}</ul></section>
    <section class="card">
      <h3>Last 7 days</h3>
      <table><tr><th>Date</th><th>Done</th><th>Goal</th><th></th></tr>{''.join(rows)}</table>
    </section>
    <section class="card"><h3>Notifications</h3><p>{get_unread_count(data)} unread</p></section>
    """
    return HTMLResponse(_PAGE.format(body=body))


_PAGE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>StreaX</title>
  <style>
    body {{ font-family: system-ui, sans-serif; background:#111; color:#eee; margin:0; }}
    .wrap {{ max-width: 760px; margin: 0 auto; padding: 16px; }}
    .card {{ background:#1c1c1c; border-radius:10px; padding:12px 16px; margin:12px 0; }}
    .muted {{ color:#999; }}
    .big {{ font-size: 28px; font-weight: 800; }}
    .bar {{ background:#333; height:10px; border-radius:5px; overflow:hidden; }}
    .bar div {{ background:#4caf50; height:100%; }}
    table {{ width:100%; border-collapse: collapse; }}
    td, th {{ text-align:left; padding:4px; }}
  </style>
</head>
<body><div class="wrap"><h1>StreaX</h1>{body}</div></body>
</html>"""


# ── Onboarding ────────────────────────────────────────────────

@app.post("/api/onboarding")
def api_onboarding(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    store = _store()
    if has_completed_onboarding(store):
        raise HTTPException(status_code=409, detail="Already onboarded; reset first")

    if "dailyCommitmentMinutes" in payload:
        minutes = _int_field(payload, "dailyCommitmentMinutes")
    else:
        minutes = _int_field(payload, "dailyCommitmentHours", 0) * 60
    try:
        profile = create_profile(
            name=str(payload.get("name", "")),
            daily_commitment_minutes=minutes,
            role=str(payload.get("role", "")),
            long_term_goal=str(payload.get("longTermGoal", "")),
            theme=str(payload.get("theme", "dark")),
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = default_app_data(profile)
    save_app_data(store, data)
    return {"ok": True, "profile": profile.to_dict()}


# ── Today ─────────────────────────────────────────────────────

@app.get("/api/today")
def api_today(username: str = Depends(get_current_user)) -> dict[str, Any]:
    store = _store()
    data = _load(store)
    log = get_today_log(data)
    save_app_data(store, data)
    return today_summary(data, log)


@app.post("/api/sessions")
def api_record_session(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Log a session finished by an external timer."""
    store = _store()
    data = _load(store)
    task = str(payload.get("taskName", "")).strip()
    if not task:
        raise HTTPException(status_code=400, detail="taskName is required")
    session = PomodoroSession(
        task_name=task,
        start_time=str(payload.get("startTime", "")),
        end_time=str(payload.get("endTime", "")),
        duration_minutes=_int_field(payload, "durationMinutes"),
        preset=str(payload.get("preset", "")),
        completed=bool(payload.get("completed", True)),
    )
    emitted = record_session(data, session, notification_limit=_notification_limit())
    _commit(store, data, emitted)
    return {
        "ok": True,
        "notifications": [n.to_dict() for n in emitted],
        "today": today_summary(data, get_today_log(data)),
    }


@app.post("/api/notes")
def api_save_notes(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    store = _store()
    data = _load(store)
    log = save_notes(data, str(payload.get("notes", "")))
    save_app_data(store, data)
    return {"ok": True, "date": log.date}


# ── Savers ────────────────────────────────────────────────────

@app.post("/api/savers/streak")
def api_use_streak_saver(username: str = Depends(get_current_user)) -> dict[str, Any]:
    store = _store()
    data = _load(store)
    result = use_streak_saver(data, get_today_log(data), _notification_limit())
    if not result:
        raise HTTPException(status_code=409, detail=result.reason)
    _commit(store, data, result.notifications)
    return {**result.to_dict(), "streak": data.streak_data.to_dict()}


@app.post("/api/savers/backlog")
def api_use_backlog_savers(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    store = _store()
    data = _load(store)
    result = redeem_backlog_for_deficit(
        data, get_today_log(data), _int_field(payload, "minutes"), _notification_limit(),
    )
    if not result:
        raise HTTPException(status_code=409, detail=result.reason)
    _commit(store, data, result.notifications)
    return {**result.to_dict(), "today": today_summary(data, get_today_log(data))}


# ── Timer ─────────────────────────────────────────────────────

def _timer_response(timer: PomodoroTimer, session: PomodoroSession | None = None) -> dict[str, Any]:
    state = timer.state.to_dict()
    state["display"] = timer.state.time_remaining_display
    return {
        "ok": True,
        "timer": state,
        "presets": [asdict(p) for p in timer.presets],
        "session": session.to_dict() if session else None,
    }


def _timer_action(action: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    store = _store()
    data = _load(store)
    now = time.time()
    settings = load_settings(data_root())
    timer = PomodoroTimer(settings.presets, load_timer_state(store, now))

    session = timer.tick(now)
    try:
        if action == "start":
            timer.start(str(payload.get("taskName", "")), _int_field(payload, "preset", 1), now)
        elif action == "pause":
            timer.pause(now)
        elif action == "resume":
            timer.resume(now)
        elif action == "stop":
            session = timer.stop(now)
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    save_timer_state(store, timer.state, now)
    if session is not None:
        _commit(store, data, record_session(data, session, notification_limit=settings.notification_limit))
    return _timer_response(timer, session)


@app.get("/api/timer")
def api_timer(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return _timer_action("tick")


@app.post("/api/timer/start")
def api_timer_start(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    return _timer_action("start", payload)


@app.post("/api/timer/pause")
def api_timer_pause(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return _timer_action("pause")


@app.post("/api/timer/resume")
def api_timer_resume(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return _timer_action("resume")


@app.post("/api/timer/stop")
def api_timer_stop(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return _timer_action("stop")


# ── Insights & notifications ──────────────────────────────────

@app.get("/api/insights")
def api_insights(
    timeframe: str = "week",
    start: str | None = None,
    end: str | None = None,
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    data = _load(_store())
    today = today_str()
    try:
        stats = timeframe_stats(data, timeframe, today, start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "timeframe": timeframe,
        "stats": stats.to_dict(),
        "recent": recent_days(data, today, 7),
    }


@app.get("/api/notifications")
def api_notifications(limit: int | None = None, username: str = Depends(get_current_user)) -> dict[str, Any]:
    data = _load(_store())
    return {
        "unread": get_unread_count(data),
        "notifications": [n.to_dict() for n in get_notifications(data, limit)],
    }


@app.post("/api/notifications/read")
def api_notifications_read(payload: dict[str, Any] = Body(default={}), username: str = Depends(get_current_user)) -> dict[str, Any]:
    store = _store()
    data = _load(store)
    notification_id = payload.get("id")
    if notification_id:
        if not mark_notification_read(data, str(notification_id)):
            raise HTTPException(status_code=404, detail="Notification not found")
    else:
        mark_all_read(data)
    save_app_data(store, data)
    return {"ok": True, "unread": get_unread_count(data)}


# ── Backup ────────────────────────────────────────────────────

@app.get("/api/backup")
def api_backup(username: str = Depends(get_current_user)) -> JSONResponse:
    try:
        backup = export_backup(_store())
    except NoDataError as e:
        raise HTTPException(status_code=404, detail=str(e))
    filename = backup_filename(today_str())
    return JSONResponse(
        backup.to_dict(),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/api/restore")
def api_restore(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        data = restore_backup(_store(), payload)
    except (IncompatibleBackupError, MalformedDataError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "days": len(data.daily_logs)}


@app.post("/api/reset")
def api_reset(username: str = Depends(get_current_user)) -> dict[str, Any]:
    clear_all_data(_store())
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.environ.get("STREAX_HOST", "127.0.0.1"), port=int(os.environ.get("STREAX_PORT", "8080")))
