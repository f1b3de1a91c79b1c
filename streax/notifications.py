"""In-app notification list for StreaX.

Notifications live in the AppData document, newest first, trimmed to a
fixed number of entries.
"""

from __future__ import annotations

import secrets

from streax.config import DEFAULT_NOTIFICATION_LIMIT, now_local
from streax.models import NOTIFICATION_KINDS, AppData, Notification


def add_notification(
    app_data: AppData,
    kind: str,
    title: str,
    message: str,
    icon: str | None = None,
    limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> Notification:
    """Prepend a notification and trim the list to *limit* entries."""
    if kind not in NOTIFICATION_KINDS:
        raise ValueError(f"Unknown notification kind: {kind!r}")
    now = now_local()
    notification = Notification(
        id=f"{int(now.timestamp() * 1000)}-{secrets.token_hex(4)}",
        kind=kind,
        title=title,
        message=message,
        timestamp=now.isoformat(timespec="seconds"),
        icon=icon,
    )
    app_data.notifications.insert(0, notification)
    del app_data.notifications[limit:]
    return notification


def mark_notification_read(app_data: AppData, notification_id: str) -> bool:
    for n in app_data.notifications:
        if n.id == notification_id:
            n.read = True
            return True
    return False


def mark_all_read(app_data: AppData) -> int:
    """Mark every notification read. Returns how many were unread."""
    count = 0
    for n in app_data.notifications:
        if not n.read:
            n.read = True
            count += 1
    return count


def get_unread_count(app_data: AppData) -> int:
    return sum(1 for n in app_data.notifications if not n.read)


def get_notifications(app_data: AppData, limit: int | None = None) -> list[Notification]:
    if limit is None:
        return list(app_data.notifications)
    return app_data.notifications[:limit]
