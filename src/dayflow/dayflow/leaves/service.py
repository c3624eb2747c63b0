from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Sequence

from ..common.datetime_utils import count_business_days, now_local, year_bounds
from ..common.validators import require_date_range, require_non_negative
from ..core.constants import HALF_DAY_DURATION
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import NotFoundError, StateError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import BalanceCheck, LeaveRequest, LeaveTypeSummary, bucket_for, types_for_bucket
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def leave_duration(start: date, end: date, *, half_day: bool) -> Decimal:
    if half_day:
        return Decimal(HALF_DAY_DURATION)
    return Decimal(count_business_days(start, end))


class LeaveLedger:
    """Leave request lifecycle and the balance ledger it debits on approval."""

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def apply(
        self,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        *,
        half_day: bool = False,
        reason: str = "",
    ) -> LeaveRequest:
        require_date_range(start_date, end_date)
        if half_day and start_date != end_date:
            raise ValidationError("A half-day leave must start and end on the same date")

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        duration = leave_duration(start_date, end_date, half_day=half_day)
        if duration <= 0:
            raise ValidationError("Leave range contains no business days")

        reason = (reason or "").strip()
        request_id = self._leaves.create(
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            is_half_day=half_day,
            duration=duration,
            reason=reason,
        )
        logger.info(
            "leave applied",
            extra={"request_id": request_id, "employee_id": employee_id, "duration": str(duration)},
        )
        return self._get(request_id)

    def check_balance(
        self,
        employee_id: int,
        leave_type: LeaveType,
        requested_days,
        *,
        today: date | None = None,
    ) -> BalanceCheck:
        requested = require_non_negative(requested_days, "Requested days")
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        bucket = bucket_for(leave_type)
        year_start, year_end = year_bounds((today or now_local().date()).year)
        used = self._leaves.sum_approved_days(
            employee_id=employee_id,
            leave_types=types_for_bucket(bucket),
            start_date=year_start,
            end_date=year_end,
        )
        available = employee.balance_for(bucket)
        remaining = available - used
        return BalanceCheck(
            available_balance=available,
            used_days=used,
            remaining_balance=remaining,
            sufficient=remaining >= requested,
        )

    def approve(self, request_id: int, approver_id: int) -> LeaveRequest:
        req = self._get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise StateError("Leave has already been processed")

        ok = self._leaves.approve(
            request_id=request_id,
            approver_id=approver_id,
            bucket=req.bucket,
            duration=req.duration,
        )
        if not ok:
            logger.warning("leave approval lost race", extra={"request_id": request_id})
            raise StateError("Leave has already been processed")

        logger.info(
            "leave approved",
            extra={
                "request_id": request_id,
                "approver_id": approver_id,
                "bucket": req.bucket.value,
                "duration": str(req.duration),
            },
        )
        return self._get(request_id)

    def reject(self, request_id: int, approver_id: int, reason: str = "") -> LeaveRequest:
        req = self._get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise StateError("Leave has already been processed")

        ok = self._leaves.reject(
            request_id=request_id,
            approver_id=approver_id,
            reason=(reason or "").strip() or "No reason provided",
        )
        if not ok:
            raise StateError("Leave has already been processed")

        logger.info("leave rejected", extra={"request_id": request_id, "approver_id": approver_id})
        return self._get(request_id)

    def cancel(self, request_id: int, employee_id: int) -> LeaveRequest:
        req = self._get(request_id)
        if req.employee_id != employee_id:
            raise ValidationError("Only the requesting employee can cancel a leave request")
        if req.status != LeaveStatus.PENDING:
            raise StateError("Only pending leave requests can be cancelled")

        if not self._leaves.cancel(request_id=request_id):
            raise StateError("Only pending leave requests can be cancelled")

        logger.info("leave cancelled", extra={"request_id": request_id})
        return self._get(request_id)

    def approved_days(self, employee_id: int, start: date, end: date) -> Decimal:
        require_date_range(start, end)
        return self._leaves.sum_approved_days(
            employee_id=employee_id,
            leave_types=list(LeaveType),
            start_date=start,
            end_date=end,
        )

    def yearly_summary(self, employee_id: int, year: int) -> Sequence[LeaveTypeSummary]:
        start, end = year_bounds(int(year))
        totals: dict[LeaveType, dict[LeaveStatus, Decimal]] = defaultdict(lambda: defaultdict(Decimal))
        for req in self._leaves.list_for_employee(employee_id=employee_id, start_date=start, end_date=end):
            totals[req.leave_type][req.status] += req.duration

        out = []
        for leave_type, by_status in totals.items():
            out.append(
                LeaveTypeSummary(
                    leave_type=leave_type,
                    total_days=sum(by_status.values(), Decimal("0")),
                    approved_days=by_status[LeaveStatus.APPROVED],
                    pending_days=by_status[LeaveStatus.PENDING],
                    rejected_days=by_status[LeaveStatus.REJECTED],
                )
            )
        out.sort(key=lambda s: s.leave_type.value)
        return out

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_employee(employee_id=employee_id)

    def _get(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get(request_id=request_id)
        if not req:
            raise NotFoundError("Leave request not found")
        return req
