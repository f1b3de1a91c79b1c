"""Notification delivery hooks for StreaX.

Hooks run shell commands when notifications are emitted, e.g. to forward
them to a desktop notifier or a chat webhook. Configured via hooks.yaml
in the data root:

    on_goal_achieved:
      - notify-send "StreaX" "Goal met"
    on_notification:
      - command: ./forward.sh
        timeout: 10

Hook points:
- on_session_logged, on_goal_achieved, on_saver_used, on_milestone
- on_notification (every notification)
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from streax.config import data_root, hooks_config_path
from streax.fileio import read_yaml
from streax.models import Notification

logger = logging.getLogger(__name__)

VALID_HOOK_POINTS = {
    "on_session_logged",
    "on_goal_achieved",
    "on_saver_used",
    "on_milestone",
    "on_notification",
}

DEFAULT_TIMEOUT = 30

_TITLE_HOOK_POINTS = {
    "Session Complete!": "on_session_logged",
    "Session Logged": "on_session_logged",
    "Daily Goal Achieved!": "on_goal_achieved",
    "Streak Saver Used!": "on_saver_used",
    "Backlog Redeemed!": "on_saver_used",
}


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    return read_yaml(hooks_config_path(root))


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run all hooks registered for a hook point.

    Context is passed as JSON via stdin. Failures are logged and reported
    in the results, never raised.
    """
    if hook_point not in VALID_HOOK_POINTS:
        return []

    if root is None:
        root = data_root()

    hooks = load_hooks_config(root).get(hook_point, [])
    if not hooks or not isinstance(hooks, list):
        return []

    results = []
    context_json = json.dumps(context, ensure_ascii=False)

    for hook in hooks:
        if isinstance(hook, str):
            command, timeout = hook, DEFAULT_TIMEOUT
        elif isinstance(hook, dict):
            command = hook.get("command", "")
            timeout = hook.get("timeout", DEFAULT_TIMEOUT)
        else:
            continue
        if not command:
            continue

        result: dict[str, Any] = {"command": command, "hook_point": hook_point}
        try:
            proc = subprocess.run(
                command,
                shell=True,
                input=context_json,
                capture_output=True,
                text=True,
                timeout=timeout,
                cwd=str(root),
            )
            result["exit_code"] = proc.returncode
            result["stdout"] = proc.stdout[:4096]
            result["stderr"] = proc.stderr[:4096]
            if proc.returncode != 0:
                logger.warning("Hook %r exited with %d", command, proc.returncode)
        except subprocess.TimeoutExpired:
            result["exit_code"] = -1
            result["error"] = f"Hook timed out after {timeout}s"
            logger.warning("Hook %r timed out after %ss", command, timeout)
        except OSError as e:
            result["exit_code"] = -1
            result["error"] = str(e)
            logger.warning("Hook %r failed: %s", command, e)

        results.append(result)

    return results


def hook_point_for(notification: Notification) -> str | None:
    """The specific hook point a notification belongs to, if any."""
    if notification.kind == "milestone":
        return "on_milestone"
    return _TITLE_HOOK_POINTS.get(notification.title)


def deliver(notifications: list[Notification], root: Path | None = None) -> list[dict[str, Any]]:
    """Deliver emitted notifications to their specific hooks and to on_notification."""
    results = []
    for n in notifications:
        context = n.to_dict()
        point = hook_point_for(n)
        if point:
            results.extend(run_hooks(point, context, root))
        results.extend(run_hooks("on_notification", context, root))
    return results
