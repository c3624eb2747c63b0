from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..attendance.model import AttendanceSummary
from ..core.enums import PaymentStatus
from .model import PayPeriod, PayrollBreakdown, PayrollRecord


class PayrollRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        breakdown: PayrollBreakdown,
        attendance: AttendanceSummary,
        payment_status: PaymentStatus,
        processed_by: Optional[int] = None,
    ) -> Optional[int]:
        """Insert-if-absent on (employee, period start, period end).

        Returns None when a record for the period already exists.
        """

        raise NotImplementedError

    def get(self, *, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_period(self, *, employee_id: int, period: PayPeriod) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        statuses: Sequence[PaymentStatus],
    ) -> Sequence[PayrollRecord]:
        """Records whose whole period lies inside [start_date, end_date]."""

        raise NotImplementedError

    def transition_status(
        self,
        *,
        payroll_id: int,
        from_statuses: Sequence[PaymentStatus],
        to_status: PaymentStatus,
    ) -> bool:
        """Conditional write: succeeds only while the current status is in from_statuses."""

        raise NotImplementedError
