"""Data root, settings, clock and logging helpers for StreaX."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from streax.fileio import read_yaml
from streax.models import SessionPreset

logger = logging.getLogger(__name__)

DEFAULT_PRESETS = [
    SessionPreset("Test", 1, 1),
    SessionPreset("Classic (25/5)", 25, 5),
    SessionPreset("Extended (50/10)", 50, 10),
    SessionPreset("Long (120/20)", 120, 20),
    SessionPreset("Ultra (180/30)", 180, 30),
]

DEFAULT_NOTIFICATION_LIMIT = 50


def data_root() -> Path:
    """Get the data directory (holds settings.yaml, hooks.yaml and store/)."""
    return Path(
        os.environ.get("STREAX_ROOT", str(Path.home() / ".streax"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "settings.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "hooks.yaml"


def store_dir(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "store"


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    presets: list[SessionPreset] = field(default_factory=lambda: list(DEFAULT_PRESETS))
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        presets = [SessionPreset.from_dict(p) for p in (d.get("presets") or []) if isinstance(p, dict)]
        return cls(
            presets=presets or list(DEFAULT_PRESETS),
            notification_limit=max(1, int(d.get("notification_limit", DEFAULT_NOTIFICATION_LIMIT))),
            log_level=str(d.get("log_level", "INFO")).upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "presets": [p.to_dict() for p in self.presets],
            "notification_limit": self.notification_limit,
            "log_level": self.log_level,
        }


def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml, falling back to defaults when it is missing or unreadable."""
    path = settings_path(root)
    try:
        return Settings.from_dict(read_yaml(path))
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return Settings()


# ── Clock ─────────────────────────────────────────────────────


def now_local() -> datetime:
    """Current local device time (no time zone handling)."""
    return datetime.now()


def today_str() -> str:
    """Today's local calendar date as YYYY-MM-DD."""
    return date.today().isoformat()


# ── Logging ───────────────────────────────────────────────────


def configure_logging(level: str | None = None, root: Path | None = None) -> None:
    """Configure root logging for the front-ends. Library modules never call this."""
    if level is None:
        level = os.environ.get("STREAX_LOG_LEVEL") or load_settings(root).log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
