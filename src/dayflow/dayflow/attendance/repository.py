from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, CheckMethod
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        method: CheckMethod,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> Optional[int]:
        """Insert-if-absent. Returns None when (employee, date) is already taken."""

        raise NotImplementedError

    def complete_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        method: CheckMethod,
        break_minutes: int,
        work_seconds: int,
        overtime_seconds: int,
    ) -> bool:
        """Conditional write: only succeeds while check-out is still unset."""

        raise NotImplementedError
