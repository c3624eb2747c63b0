from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, today: date, workday_start: time, grace_minutes: int) -> AttendanceStrategy:
        # Anything after the cutoff instant, even by a second, is late.
        cutoff = datetime.combine(today, workday_start) + timedelta(minutes=grace_minutes)
        if now <= cutoff:
            return NormalStrategy()
        return LateStrategy()
