from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..attendance.service import AttendanceRecorder
from ..common.validators import require_date_range
from ..core.enums import PaymentStatus
from ..core.exceptions import ConflictError, NotFoundError, StateError
from ..employees.repository import EmployeeRepository
from ..leaves.service import LeaveLedger
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayPeriod, PayrollBreakdown, PayrollRecord, PeriodTotals
from .policy import PayrollPolicy
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

# pending -> processing -> paid; failed/cancelled reachable from pending or processing.
PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PROCESSING, PaymentStatus.FAILED, PaymentStatus.CANCELLED}),
    PaymentStatus.PROCESSING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.CANCELLED}),
    PaymentStatus.PAID: frozenset(),
    PaymentStatus.FAILED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}

REPORTED_STATUSES = (PaymentStatus.PROCESSING, PaymentStatus.PAID)


def allowed_predecessors(target: PaymentStatus) -> list[PaymentStatus]:
    return [s for s, targets in PAYMENT_TRANSITIONS.items() if target in targets]


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRecorder,
        leaves: LeaveLedger,
        *,
        calculator: Optional[PayrollCalculator] = None,
        policy: Optional[PayrollPolicy] = None,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._calculator = calculator or StandardPayrollCalculator()
        self._policy = policy

    def preview(self, employee_id: int, period: PayPeriod, *, policy: Optional[PayrollPolicy] = None) -> PayrollBreakdown:
        """Compute without persisting anything."""
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        summary = self._period_summary(employee_id, period)
        return self._calculator.compute(employee.compensation, summary, period, policy or self._policy)

    def generate(
        self,
        employee_id: int,
        period: PayPeriod,
        *,
        processed_by: Optional[int] = None,
        policy: Optional[PayrollPolicy] = None,
    ) -> PayrollRecord:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        if self._payrolls.get_for_period(employee_id=employee_id, period=period):
            raise ConflictError("Payroll already processed for this period")

        summary = self._period_summary(employee_id, period)
        breakdown = self._calculator.compute(employee.compensation, summary, period, policy or self._policy)

        payroll_id = self._payrolls.create(
            employee_id=employee_id,
            breakdown=breakdown,
            attendance=summary,
            payment_status=PaymentStatus.PROCESSING,
            processed_by=processed_by,
        )
        if payroll_id is None:
            raise ConflictError("Payroll already processed for this period")

        logger.info(
            "payroll generated",
            extra={
                "payroll_id": payroll_id,
                "employee_id": employee_id,
                "period_start": period.start_date.isoformat(),
                "period_end": period.end_date.isoformat(),
                "net_pay": str(breakdown.net_pay),
            },
        )
        return PayrollRecord(
            payroll_id=payroll_id,
            employee_id=employee_id,
            breakdown=breakdown,
            attendance=summary,
            payment_status=PaymentStatus.PROCESSING,
            processed_by=processed_by,
        )

    def update_payment_status(self, payroll_id: int, status: PaymentStatus) -> PayrollRecord:
        record = self._get(payroll_id)
        if status not in PAYMENT_TRANSITIONS[record.payment_status]:
            raise StateError(f"Cannot move payment from {record.payment_status.value} to {status.value}")

        ok = self._payrolls.transition_status(
            payroll_id=payroll_id,
            from_statuses=allowed_predecessors(status),
            to_status=status,
        )
        if not ok:
            logger.warning("payment status transition lost race", extra={"payroll_id": payroll_id})
            raise StateError("Payment status changed concurrently; reload and retry")

        logger.info("payment status updated", extra={"payroll_id": payroll_id, "payment_status": status.value})
        return self._get(payroll_id)

    def payslips(self, employee_id: int) -> Sequence[PayrollRecord]:
        return self._payrolls.list_for_employee(employee_id=employee_id)

    def period_totals(self, start: date, end: date) -> PeriodTotals:
        require_date_range(start, end)
        records = self._payrolls.list_in_range(start_date=start, end_date=end, statuses=REPORTED_STATUSES)
        gross = sum((r.gross_earnings for r in records), Decimal("0"))
        deductions = sum((r.breakdown.total_deductions for r in records), Decimal("0"))
        net = sum((r.net_pay for r in records), Decimal("0"))
        average = (net / len(records)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) if records else Decimal("0")
        return PeriodTotals(
            total_payrolls=len(records),
            total_gross=gross,
            total_deductions=deductions,
            total_net=net,
            average_net=average,
        )

    def _period_summary(self, employee_id: int, period: PayPeriod):
        summary = self._attendance.summarize(employee_id, period.start_date, period.end_date)
        leave_days = self._leaves.approved_days(employee_id, period.start_date, period.end_date)
        return replace(summary, leave_days=leave_days)

    def _get(self, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get(payroll_id=payroll_id)
        if not record:
            raise NotFoundError("Payroll record not found")
        return record
