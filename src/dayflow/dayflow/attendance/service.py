from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Sequence

from ..common.datetime_utils import now_local, to_local_naive
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LATE_GRACE_MINUTES, DEFAULT_WORKDAY_START, STANDARD_WORKDAY_HOURS
from ..core.enums import AttendanceStatus, CheckMethod
from ..core.exceptions import ConflictError, NotFoundError, StateError, ValidationError
from ..employees.repository import EmployeeRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceSummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def compute_work_seconds(check_in: datetime, check_out: datetime, break_minutes: int) -> tuple[int, int]:
    """Return (work, overtime) seconds: span minus breaks, floored at 0."""
    span = int((check_out - check_in).total_seconds())
    work = max(0, span - int(break_minutes) * 60)
    overtime = max(0, work - STANDARD_WORKDAY_HOURS * 3600)
    return work, overtime


class AttendanceRecorder:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        workday_start: time = DEFAULT_WORKDAY_START,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    ):
        self._attendance = attendance
        self._employees = employees
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._workday_start = workday_start
        self._grace_minutes = int(grace_minutes)

    def check_in(
        self,
        employee_id: int,
        *,
        work_date: date | None = None,
        now: datetime | None = None,
        method: CheckMethod = CheckMethod.WEB,
        status: AttendanceStatus | None = None,
        note: str | None = None,
    ) -> AttendanceRecord:
        now = to_local_naive(now) if now else now_local()
        work_date = work_date or now.date()

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        if self._attendance.get_for_employee_and_date(employee_id, work_date):
            raise ConflictError("Attendance already marked for this employee on this date")

        if status is None:
            strategy = self._factory.for_checkin(
                now=now, today=work_date, workday_start=self._workday_start, grace_minutes=self._grace_minutes
            )
            decision = strategy.decide_checkin(
                now=now, today=work_date, workday_start=self._workday_start, grace_minutes=self._grace_minutes
            )
            status = decision.status
            note = note or decision.note

        attendance_id = self._attendance.create_checkin(
            employee_id=employee_id,
            work_date=work_date,
            check_in_time=now,
            method=method,
            status=status,
            note=note,
        )
        if attendance_id is None:
            # Another request inserted the same key between our read and write.
            raise ConflictError("Attendance already marked for this employee on this date")

        logger.info(
            "check-in recorded",
            extra={"employee_id": employee_id, "work_date": work_date.isoformat(), "status": status.value},
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            check_in_time=now,
            check_in_method=method,
            check_out_time=None,
            check_out_method=None,
            status=status,
            note=note,
        )

    def check_out(
        self,
        employee_id: int,
        *,
        work_date: date | None = None,
        now: datetime | None = None,
        method: CheckMethod = CheckMethod.WEB,
        break_minutes: int | None = None,
    ) -> AttendanceRecord:
        now = to_local_naive(now) if now else now_local()
        work_date = work_date or now.date()

        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if not record:
            raise NotFoundError("No check-in found for this date")
        if record.is_complete:
            raise StateError("Already checked out for this date")
        if now < record.check_in_time:
            raise ValidationError("Check-out time cannot be before check-in time")

        breaks = record.break_minutes if break_minutes is None else int(break_minutes)
        if breaks < 0:
            raise ValidationError("Break minutes cannot be negative")

        work_seconds, overtime_seconds = compute_work_seconds(record.check_in_time, now, breaks)
        ok = self._attendance.complete_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            method=method,
            break_minutes=breaks,
            work_seconds=work_seconds,
            overtime_seconds=overtime_seconds,
        )
        if not ok:
            logger.warning("check-out lost race", extra={"attendance_id": record.attendance_id})
            raise StateError("Already checked out for this date")

        completed = AttendanceRecord(
            attendance_id=record.attendance_id,
            employee_id=record.employee_id,
            work_date=record.work_date,
            check_in_time=record.check_in_time,
            check_in_method=record.check_in_method,
            check_out_time=now,
            check_out_method=method,
            status=record.status,
            break_minutes=breaks,
            work_seconds=work_seconds,
            overtime_seconds=overtime_seconds,
            note=record.note,
        )
        logger.info(
            "check-out recorded",
            extra={
                "employee_id": employee_id,
                "work_date": work_date.isoformat(),
                "work_hours": completed.work_hours_formatted,
                "overtime_hours": completed.overtime_hours_formatted,
            },
        )
        return completed

    def summarize(self, employee_id: int, start: date, end: date) -> AttendanceSummary:
        require_date_range(start, end)
        records = self._attendance.list_range(employee_id=employee_id, start_date=start, end_date=end)
        return AttendanceSummary.from_records(records)

    def history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_employee(employee_id, int(limit))
