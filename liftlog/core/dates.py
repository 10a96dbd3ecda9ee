"""Millisecond timestamps and local calendar-day helpers."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS


def to_datetime(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / SECOND_MS)


def from_datetime(value: datetime) -> int:
    return int(round(value.timestamp() * SECOND_MS))


def from_date(value: date) -> int:
    """Local midnight of ``value`` as a millisecond timestamp."""
    return from_datetime(datetime.combine(value, time.min))


def calendar_day(timestamp_ms: int) -> date:
    return to_datetime(timestamp_ms).date()


def truncate_to_day(timestamp_ms: int) -> int:
    return from_date(calendar_day(timestamp_ms))


def add_days(timestamp_ms: int, days: int) -> int:
    """Shift by whole calendar days, keeping the wall-clock time."""
    shifted = to_datetime(timestamp_ms) + timedelta(days=days)
    return from_datetime(shifted)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def iso_day(timestamp_ms: int) -> str:
    return calendar_day(timestamp_ms).isoformat()


def parse_day(raw: str) -> int:
    try:
        return from_date(date.fromisoformat(raw.strip()))
    except ValueError as exc:
        raise ValueError(f"Invalid date '{raw}', expected YYYY-MM-DD") from exc
