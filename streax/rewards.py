"""Free-time reward table for StreaX.

Productive hours unlock free time in tiers. Each tier's ``cumulative``
field is already the running total, so only the highest tier reached
counts.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RewardTier:
    hours: float
    free_time_minutes: int
    cumulative: int


REWARD_TIERS: tuple[RewardTier, ...] = (
    RewardTier(hours=2, free_time_minutes=15, cumulative=15),
    RewardTier(hours=4, free_time_minutes=20, cumulative=35),
    RewardTier(hours=6, free_time_minutes=30, cumulative=65),
    RewardTier(hours=8, free_time_minutes=40, cumulative=105),
)


def calculate_free_time_rewards(productive_minutes: float) -> int:
    """Free-time minutes earned for a day's productive minutes.

    Returns the cumulative value of the highest tier whose hour threshold
    is met, or 0 below the first tier.
    """
    hours = productive_minutes / 60
    earned = 0
    for tier in REWARD_TIERS:
        if hours >= tier.hours:
            earned = tier.cumulative
    return earned


def next_reward_tier(productive_minutes: float) -> RewardTier | None:
    """The first tier not yet reached, or None once the top tier is unlocked."""
    hours = productive_minutes / 60
    for tier in REWARD_TIERS:
        if hours < tier.hours:
            return tier
    return None


def get_goal_progress(productive_minutes: float, goal_minutes: float) -> float:
    """Percentage of the goal reached, capped at 100."""
    if goal_minutes <= 0:
        return 100.0
    return min(100.0, productive_minutes / goal_minutes * 100)
