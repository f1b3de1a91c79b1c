"""Persistence for StreaX: key/value JSON store, app data, backups.

The store keeps one JSON document per key under ``<root>/store``. The
whole application state is a single AppData document under STORAGE_KEY.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from streax.config import now_local, store_dir
from streax.errors import IncompatibleBackupError, MalformedDataError, NoDataError, ValidationError
from streax.fileio import read_json, remove_file, write_json_atomic
from streax.models import SCHEMA_VERSION, AppData, BackupData, StreakData, UserProfile

logger = logging.getLogger(__name__)

STORAGE_KEY = "STREAX_DATA"
TIMER_STATE_KEY = "streax-pomodoro-state"


class JsonStore:
    """Directory-backed key/value store of JSON documents."""

    def __init__(self, directory: Path | None = None):
        self.directory = directory if directory is not None else store_dir()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Any:
        """Return the stored value, or None if missing. Raises on corrupt JSON."""
        return read_json(self._path(key))

    def set(self, key: str, value: Any) -> None:
        write_json_atomic(self._path(key), value)

    def clear(self, key: str) -> bool:
        return remove_file(self._path(key))


# ── Onboarding ────────────────────────────────────────────────


def create_profile(
    name: str,
    daily_commitment_minutes: int,
    role: str = "",
    long_term_goal: str = "",
    theme: str = "dark",
) -> UserProfile:
    """Build a validated profile for a new installation."""
    if not name or not name.strip():
        raise ValidationError("Name is required")
    if daily_commitment_minutes <= 0:
        raise ValidationError("Daily commitment must be greater than 0")
    if theme not in ("light", "dark"):
        raise ValidationError(f"Unknown theme: {theme!r}")
    return UserProfile(
        name=name.strip(),
        role=role.strip(),
        long_term_goal=long_term_goal.strip(),
        daily_commitment_minutes=int(daily_commitment_minutes),
        created_at=now_local().isoformat(timespec="seconds"),
        theme=theme,
    )


def default_app_data(profile: UserProfile) -> AppData:
    return AppData(
        profile=profile,
        daily_logs={},
        streak_data=StreakData(),
        version=SCHEMA_VERSION,
        last_updated=now_local().isoformat(timespec="seconds"),
    )


# ── Load / save ───────────────────────────────────────────────


def load_app_data(store: JsonStore) -> AppData | None:
    """Load the app document. Corrupt or malformed data is treated as no data."""
    try:
        raw = store.get(STORAGE_KEY)
    except json.JSONDecodeError as e:
        logger.warning("Stored app data is not valid JSON, ignoring it: %s", e)
        return None
    if raw is None:
        return None
    try:
        return AppData.from_dict(raw)
    except MalformedDataError as e:
        logger.warning("Stored app data is malformed, ignoring it: %s", e)
        return None


def save_app_data(store: JsonStore, data: AppData) -> None:
    data.last_updated = now_local().isoformat(timespec="seconds")
    store.set(STORAGE_KEY, data.to_dict())


def has_completed_onboarding(store: JsonStore) -> bool:
    data = load_app_data(store)
    return data is not None and data.profile.daily_commitment_minutes > 0


def clear_all_data(store: JsonStore) -> None:
    store.clear(STORAGE_KEY)
    store.clear(TIMER_STATE_KEY)
    logger.info("All StreaX data cleared")


# ── Backup / restore ──────────────────────────────────────────


def export_backup(store: JsonStore) -> BackupData:
    data = load_app_data(store)
    if data is None:
        raise NoDataError("No data to export")
    return BackupData(
        data=data,
        version=SCHEMA_VERSION,
        export_date=now_local().isoformat(timespec="seconds"),
    )


def backup_filename(day: str) -> str:
    return f"streax-backup-{day}.json"


def parse_backup(payload: dict[str, Any]) -> AppData:
    """Validate a backup payload fully and return its AppData."""
    if not isinstance(payload, dict):
        raise MalformedDataError("Backup must be a JSON object")
    version = payload.get("version")
    if version != SCHEMA_VERSION:
        raise IncompatibleBackupError(str(version), SCHEMA_VERSION)
    if "data" not in payload:
        raise MalformedDataError("Backup has no 'data' section")
    return AppData.from_dict(payload["data"])


def restore_backup(store: JsonStore, payload: dict[str, Any]) -> AppData:
    """Replace the stored document with the backup's data.

    Nothing is written unless the whole payload validates. The document
    is stored as-is, so export followed by restore reproduces it exactly.
    """
    data = parse_backup(payload)
    store.set(STORAGE_KEY, data.to_dict())
    logger.info("Restored backup exported at %s", payload.get("exportDate", "?"))
    return data
