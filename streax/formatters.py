"""Formatting helpers for minutes, percentages and date ranges."""

from __future__ import annotations

from datetime import date, timedelta


def format_minutes(minutes: int) -> str:
    """Format minutes as e.g. '2h 30m', '45m', '3h'."""
    minutes = int(minutes)
    if minutes == 0:
        return "0m"
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_hours(minutes: int) -> str:
    hours = f"{minutes / 60:.1f}"
    return f"{hours} {'hour' if hours == '1.0' else 'hours'}"


def format_percent(value: float, total: float) -> int:
    if total == 0:
        return 0
    return round(value / total * 100)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural or singular + 's'}"


def week_range(day: date) -> tuple[str, str]:
    """Monday..Sunday of the week containing *day*."""
    monday = day - timedelta(days=day.weekday())
    sunday = monday + timedelta(days=6)
    return monday.isoformat(), sunday.isoformat()


def month_range(day: date) -> tuple[str, str]:
    start = day.replace(day=1)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return start.isoformat(), (next_month - timedelta(days=1)).isoformat()


def date_range(start: str, end: str) -> list[str]:
    """All YYYY-MM-DD dates from *start* to *end* inclusive."""
    current = date.fromisoformat(start)
    last = date.fromisoformat(end)
    out = []
    while current <= last:
        out.append(current.isoformat())
        current += timedelta(days=1)
    return out
