"""Shared test fixtures for StreaX tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from streax.models import AppData, DailyLog, StreakData, UserProfile
from streax.storage import JsonStore


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Create a temporary data root and point STREAX_ROOT at it."""
    root = tmp_path / "streax"
    (root / "store").mkdir(parents=True)
    os.environ["STREAX_ROOT"] = str(root)
    yield root
    if "STREAX_ROOT" in os.environ:
        del os.environ["STREAX_ROOT"]


@pytest.fixture
def store(root: Path) -> JsonStore:
    return JsonStore(root / "store")


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        name="Ada",
        role="Engineer",
        long_term_goal="Ship the compiler",
        daily_commitment_minutes=240,
        created_at="2026-02-01T09:00:00",
    )


@pytest.fixture
def app_data(profile: UserProfile) -> AppData:
    """A fresh document with no history."""
    return AppData(profile=profile, streak_data=StreakData(), last_updated="2026-02-01T09:00:00")


def make_log(day: str, productive: int, goal: int = 240, backlog: int = 0, **kwargs) -> DailyLog:
    return DailyLog(date=day, productive_minutes=productive, goal_minutes=goal, backlog_minutes=backlog, **kwargs)
