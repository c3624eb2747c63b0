from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveBucket, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        is_half_day: bool,
        duration: Decimal,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(
        self,
        *,
        employee_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Requests whose start date falls in the optional range."""

        raise NotImplementedError

    def approve(self, *, request_id: int, approver_id: int, bucket: LeaveBucket, duration: Decimal) -> bool:
        """Approve and debit the employee's bucket as one transaction.

        Guarded by ``status = pending``: returns False, touching nothing,
        when the request is no longer pending. A bucket with no stored row
        is created at its opening balance before the debit.
        """

        raise NotImplementedError

    def reject(self, *, request_id: int, approver_id: int, reason: str) -> bool:
        raise NotImplementedError

    def cancel(self, *, request_id: int) -> bool:
        raise NotImplementedError

    def sum_approved_days(
        self,
        *,
        employee_id: int,
        leave_types: Sequence[LeaveType],
        start_date: date,
        end_date: date,
    ) -> Decimal:
        raise NotImplementedError
