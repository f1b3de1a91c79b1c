"""Tests for streax/storage.py: persistence, onboarding and backups."""

import json

import pytest

from streax.daylog import record_session
from streax.errors import IncompatibleBackupError, MalformedDataError, NoDataError, ValidationError
from streax.models import PomodoroSession
from streax.storage import (
    STORAGE_KEY,
    TIMER_STATE_KEY,
    backup_filename,
    clear_all_data,
    create_profile,
    default_app_data,
    export_backup,
    has_completed_onboarding,
    load_app_data,
    restore_backup,
    save_app_data,
)


def test_create_profile_validates():
    with pytest.raises(ValidationError):
        create_profile("", 240)
    with pytest.raises(ValidationError):
        create_profile("   ", 240)
    with pytest.raises(ValidationError):
        create_profile("Ada", 0)
    with pytest.raises(ValidationError):
        create_profile("Ada", 240, theme="neon")


def test_create_profile_strips():
    p = create_profile("  Ada ", 240, role=" Engineer ")
    assert p.name == "Ada"
    assert p.role == "Engineer"
    assert p.created_at


def test_load_missing(store):
    assert load_app_data(store) is None
    assert not has_completed_onboarding(store)


def test_save_and_load(store, profile):
    data = default_app_data(profile)
    save_app_data(store, data)

    loaded = load_app_data(store)
    assert loaded.profile == profile
    assert has_completed_onboarding(store)
    assert (store.directory / f"{STORAGE_KEY}.json").exists()


def test_corrupt_json_treated_as_no_data(store):
    (store.directory / f"{STORAGE_KEY}.json").write_text("{not json", encoding="utf-8")
    assert load_app_data(store) is None


def test_malformed_document_treated_as_no_data(store):
    store.set(STORAGE_KEY, {"profile": "Ada"})
    assert load_app_data(store) is None


def test_clear_all_data(store, profile):
    save_app_data(store, default_app_data(profile))
    store.set(TIMER_STATE_KEY, {"phase": "focus"})

    clear_all_data(store)

    assert store.get(STORAGE_KEY) is None
    assert store.get(TIMER_STATE_KEY) is None


def test_export_without_data(store):
    with pytest.raises(NoDataError):
        export_backup(store)


def test_backup_roundtrip(store, profile):
    data = default_app_data(profile)
    record_session(
        data,
        PomodoroSession(task_name="Write", duration_minutes=250, preset="Classic (25/5)"),
        day="2026-02-11",
    )
    save_app_data(store, data)
    before = store.get(STORAGE_KEY)

    payload = json.loads(json.dumps(export_backup(store).to_dict()))
    clear_all_data(store)
    restore_backup(store, payload)

    assert store.get(STORAGE_KEY) == before


def test_restore_rejects_other_version(store, profile):
    save_app_data(store, default_app_data(profile))
    before = store.get(STORAGE_KEY)
    payload = export_backup(store).to_dict()
    payload["version"] = "2.0.0"

    with pytest.raises(IncompatibleBackupError) as exc:
        restore_backup(store, payload)

    assert exc.value.found == "2.0.0"
    assert store.get(STORAGE_KEY) == before


def test_restore_rejects_malformed_data(store):
    with pytest.raises(MalformedDataError):
        restore_backup(store, {"version": "1.0.0"})
    with pytest.raises(MalformedDataError):
        restore_backup(store, {"version": "1.0.0", "data": {"profile": {}}})
    assert store.get(STORAGE_KEY) is None


def test_backup_filename():
    assert backup_filename("2026-02-11") == "streax-backup-2026-02-11.json"


def _document_with(profile, **overrides):
    doc = default_app_data(profile).to_dict()
    doc.update(overrides)
    return doc


def test_non_object_session_treated_as_no_data(store, profile):
    log = {"date": "2026-02-11", "sessions": ["oops"]}
    store.set(STORAGE_KEY, _document_with(profile, dailyLogs={"2026-02-11": log}))
    assert load_app_data(store) is None


def test_non_object_notification_treated_as_no_data(store, profile):
    store.set(STORAGE_KEY, _document_with(profile, notifications=[1]))
    assert load_app_data(store) is None


def test_restore_rejects_non_object_entries(store, profile):
    log = {"date": "2026-02-11", "sessions": ["oops"]}
    with pytest.raises(MalformedDataError):
        restore_backup(store, {"version": "1.0.0", "data": _document_with(profile, dailyLogs={"2026-02-11": log})})
    with pytest.raises(MalformedDataError):
        restore_backup(store, {"version": "1.0.0", "data": _document_with(profile, notifications=["hi"])})
    assert store.get(STORAGE_KEY) is None
