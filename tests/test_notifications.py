"""Tests for streax/notifications.py."""

import pytest

from streax.notifications import (
    add_notification,
    get_notifications,
    get_unread_count,
    mark_all_read,
    mark_notification_read,
)


def test_newest_first(app_data):
    add_notification(app_data, "info", "First", "one")
    add_notification(app_data, "success", "Second", "two")

    assert [n.title for n in app_data.notifications] == ["Second", "First"]


def test_ids_unique(app_data):
    ids = {add_notification(app_data, "info", "t", "m").id for _ in range(20)}
    assert len(ids) == 20


def test_list_trimmed_to_limit(app_data):
    for i in range(55):
        add_notification(app_data, "info", f"n{i}", "m")

    assert len(app_data.notifications) == 50
    assert app_data.notifications[0].title == "n54"
    assert app_data.notifications[-1].title == "n5"


def test_custom_limit(app_data):
    for i in range(5):
        add_notification(app_data, "info", f"n{i}", "m", limit=3)
    assert len(app_data.notifications) == 3


def test_unknown_kind_rejected(app_data):
    with pytest.raises(ValueError):
        add_notification(app_data, "urgent", "t", "m")


def test_mark_read(app_data):
    n = add_notification(app_data, "info", "t", "m")
    add_notification(app_data, "info", "t2", "m")
    assert get_unread_count(app_data) == 2

    assert mark_notification_read(app_data, n.id)
    assert get_unread_count(app_data) == 1
    assert not mark_notification_read(app_data, "missing")


def test_mark_all_read(app_data):
    for _ in range(3):
        add_notification(app_data, "info", "t", "m")
    assert mark_all_read(app_data) == 3
    assert mark_all_read(app_data) == 0
    assert get_unread_count(app_data) == 0


def test_get_notifications_limit(app_data):
    for i in range(4):
        add_notification(app_data, "info", f"n{i}", "m")
    assert [n.title for n in get_notifications(app_data, 2)] == ["n3", "n2"]
    assert len(get_notifications(app_data)) == 4
