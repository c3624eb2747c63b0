from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def count_business_days(start: date, end: date) -> int:
    """Count Monday-Friday dates between start and end, both inclusive."""
    return sum(1 for d in iter_days(start, end) if d.weekday() < 5)


def format_hms(total_seconds: int) -> str:
    """Render a non-negative duration as HH:MM:SS (hours may exceed 24)."""
    if total_seconds <= 0:
        return "00:00:00"
    hours, rest = divmod(int(total_seconds), 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def to_local_naive(value: datetime) -> datetime:
    """Aware datetimes are moved to local time and stripped; naive ones are taken as local."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
