from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..common.datetime_utils import format_hms
from ..core.constants import HALF_DAY_DURATION
from ..core.enums import AttendanceStatus, CheckMethod

_HOURS_Q = Decimal("0.01")


def seconds_to_hours(seconds: int) -> Decimal:
    return (Decimal(int(seconds)) / Decimal(3600)).quantize(_HOURS_Q, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar date.

    Work and overtime durations are kept as whole seconds; the decimal-hour
    and HH:MM:SS views are derived from them.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: datetime
    check_in_method: CheckMethod
    check_out_time: Optional[datetime]
    check_out_method: Optional[CheckMethod]
    status: AttendanceStatus
    break_minutes: int = 0
    work_seconds: int = 0
    overtime_seconds: int = 0
    note: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.check_out_time is not None

    @property
    def work_hours(self) -> Decimal:
        return seconds_to_hours(self.work_seconds)

    @property
    def overtime_hours(self) -> Decimal:
        return seconds_to_hours(self.overtime_seconds)

    @property
    def work_hours_formatted(self) -> str:
        return format_hms(self.work_seconds)

    @property
    def overtime_hours_formatted(self) -> str:
        return format_hms(self.overtime_seconds)

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "check_in": self.check_in_time.isoformat(),
            "check_in_method": self.check_in_method.value,
            "check_out": self.check_out_time.isoformat() if self.check_out_time else None,
            "check_out_method": self.check_out_method.value if self.check_out_method else None,
            "status": self.status.value,
            "break_minutes": self.break_minutes,
            "work_hours": str(self.work_hours),
            "work_hours_formatted": self.work_hours_formatted,
            "overtime_hours": str(self.overtime_hours),
            "overtime_hours_formatted": self.overtime_hours_formatted,
            "note": self.note,
        }


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model folded from attendance records over a date range."""

    total_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0
    half_days: int = 0
    on_leave_days: int = 0
    leave_days: Decimal = Decimal("0")
    total_work_hours: Decimal = Decimal("0")
    average_work_hours: Decimal = Decimal("0")
    total_overtime_hours: Decimal = Decimal("0")

    @classmethod
    def from_records(cls, records: Iterable[AttendanceRecord]) -> "AttendanceSummary":
        counts = {status: 0 for status in AttendanceStatus}
        total = 0
        work_seconds = 0
        overtime_seconds = 0

        for r in records:
            total += 1
            counts[r.status] += 1
            work_seconds += r.work_seconds
            overtime_seconds += r.overtime_seconds

        total_hours = seconds_to_hours(work_seconds)
        average = (total_hours / total).quantize(_HOURS_Q, rounding=ROUND_HALF_UP) if total else Decimal("0")

        return cls(
            total_days=total,
            present_days=counts[AttendanceStatus.PRESENT],
            absent_days=counts[AttendanceStatus.ABSENT],
            late_days=counts[AttendanceStatus.LATE],
            half_days=counts[AttendanceStatus.HALF_DAY],
            on_leave_days=counts[AttendanceStatus.ON_LEAVE],
            leave_days=Decimal(counts[AttendanceStatus.ON_LEAVE])
            + Decimal(HALF_DAY_DURATION) * counts[AttendanceStatus.HALF_DAY],
            total_work_hours=total_hours,
            average_work_hours=average,
            total_overtime_hours=seconds_to_hours(overtime_seconds),
        )

    def to_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "late_days": self.late_days,
            "half_days": self.half_days,
            "on_leave_days": self.on_leave_days,
            "leave_days": str(self.leave_days),
            "total_work_hours": str(self.total_work_hours),
            "average_work_hours": str(self.average_work_hours),
            "total_overtime_hours": str(self.total_overtime_hours),
        }
