from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from dayflow.attendance.model import AttendanceRecord
from dayflow.attendance.service import AttendanceRecorder
from dayflow.core.enums import AttendanceStatus, CheckMethod, PaymentStatus
from dayflow.core.exceptions import ConflictError, NotFoundError, StateError
from dayflow.employees.model import CompensationProfile, EmployeeProfile
from dayflow.leaves.service import LeaveLedger
from dayflow.payroll.model import PayPeriod, PayrollRecord
from dayflow.payroll.service import PayrollService

JANUARY = PayPeriod(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))


@dataclass
class InMemoryEmployees:
    employees: dict[int, EmployeeProfile]

    def get_by_id(self, employee_id: int) -> Optional[EmployeeProfile]:
        return self.employees.get(employee_id)


@dataclass
class InMemoryAttendance:
    records: list[AttendanceRecord] = field(default_factory=list)

    def list_range(self, *, employee_id, start_date, end_date):
        return [r for r in self.records if r.employee_id == employee_id and start_date <= r.work_date <= end_date]


@dataclass
class FixedLeaves:
    days: Decimal = Decimal("0")

    def sum_approved_days(self, *, employee_id, leave_types, start_date, end_date):
        return self.days


@dataclass
class InMemoryPayrolls:
    records: dict[int, PayrollRecord] = field(default_factory=dict)
    # another worker inserted the same (employee, period) first
    lose_insert_race: bool = False

    def create(self, *, employee_id, breakdown, attendance, payment_status, processed_by=None):
        if self.lose_insert_race:
            return None
        payroll_id = len(self.records) + 1
        self.records[payroll_id] = PayrollRecord(
            payroll_id=payroll_id,
            employee_id=employee_id,
            breakdown=breakdown,
            attendance=attendance,
            payment_status=payment_status,
            processed_by=processed_by,
        )
        return payroll_id

    def get(self, *, payroll_id):
        return self.records.get(payroll_id)

    def get_for_period(self, *, employee_id, period):
        for r in self.records.values():
            if r.employee_id == employee_id and r.breakdown.period == period:
                return r
        return None

    def list_for_employee(self, *, employee_id):
        return [r for r in self.records.values() if r.employee_id == employee_id]

    def list_in_range(self, *, start_date, end_date, statuses):
        return [
            r for r in self.records.values()
            if r.payment_status in statuses
            and r.breakdown.period.start_date >= start_date
            and r.breakdown.period.end_date <= end_date
        ]

    def transition_status(self, *, payroll_id, from_statuses, to_status):
        r = self.records[payroll_id]
        if r.payment_status not in from_statuses:
            return False
        paid_at = datetime(2025, 2, 1, 10, 0) if to_status == PaymentStatus.PAID else r.paid_at
        self.records[payroll_id] = replace(r, payment_status=to_status, paid_at=paid_at)
        return True


def _employee(employee_id: int, basic: str) -> EmployeeProfile:
    return EmployeeProfile(
        employee_id=employee_id,
        employee_code=None,
        compensation=CompensationProfile(
            employee_id=employee_id,
            basic_salary=Decimal(basic),
            currency="INR",
            company_name="DayFlow",
            first_name="John",
            last_name="Doe",
        ),
    )


def _overtime_day(employee_id: int, day: int, overtime_hours: int) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=day,
        employee_id=employee_id,
        work_date=date(2025, 1, day),
        check_in_time=datetime(2025, 1, day, 9, 0),
        check_in_method=CheckMethod.WEB,
        check_out_time=datetime(2025, 1, day, 17 + overtime_hours, 0),
        check_out_method=CheckMethod.WEB,
        status=AttendanceStatus.PRESENT,
        work_seconds=(8 + overtime_hours) * 3600,
        overtime_seconds=overtime_hours * 3600,
    )


def _service(payrolls: Optional[InMemoryPayrolls] = None, attendance: Optional[InMemoryAttendance] = None):
    employees = InMemoryEmployees({1: _employee(1, "50000"), 2: _employee(2, "48000")})
    recorder = AttendanceRecorder(attendance or InMemoryAttendance(), employees)
    ledger = LeaveLedger(FixedLeaves(Decimal("2.5")), employees)
    payrolls = payrolls or InMemoryPayrolls()
    return PayrollService(payrolls, employees, recorder, ledger), payrolls


def test_generate_persists_processing_record():
    svc, payrolls = _service()

    record = svc.generate(1, JANUARY, processed_by=9)

    assert record.payment_status == PaymentStatus.PROCESSING
    assert record.net_pay == Decimal("61850.00")
    assert record.processed_by == 9
    assert record.attendance.leave_days == Decimal("2.5")
    assert len(payrolls.records) == 1


def test_generate_twice_for_same_period_conflicts():
    svc, payrolls = _service()
    svc.generate(1, JANUARY)

    with pytest.raises(ConflictError):
        svc.generate(1, JANUARY)
    assert len(payrolls.records) == 1


def test_generate_losing_insert_race_conflicts():
    svc, _ = _service(InMemoryPayrolls(lose_insert_race=True))

    with pytest.raises(ConflictError):
        svc.generate(1, JANUARY)


def test_generate_unknown_employee():
    svc, _ = _service()

    with pytest.raises(NotFoundError):
        svc.generate(99, JANUARY)


def test_generate_pays_overtime_from_attendance():
    attendance = InMemoryAttendance([_overtime_day(2, 6, 2), _overtime_day(2, 7, 1)])
    svc, _ = _service(attendance=attendance)

    record = svc.generate(2, JANUARY)

    assert record.attendance.total_overtime_hours == Decimal("3.00")
    assert record.breakdown.earnings.overtime_amount == Decimal("900.00")


def test_preview_does_not_persist():
    svc, payrolls = _service()

    breakdown = svc.preview(1, JANUARY)

    assert breakdown.gross_earnings == Decimal("72850.00")
    assert payrolls.records == {}


def test_payment_status_moves_forward_to_paid():
    svc, _ = _service()
    record = svc.generate(1, JANUARY)

    paid = svc.update_payment_status(record.payroll_id, PaymentStatus.PAID)

    assert paid.payment_status == PaymentStatus.PAID
    assert paid.paid_at is not None


def test_paid_record_cannot_be_cancelled():
    svc, _ = _service()
    record = svc.generate(1, JANUARY)
    svc.update_payment_status(record.payroll_id, PaymentStatus.PAID)

    with pytest.raises(StateError):
        svc.update_payment_status(record.payroll_id, PaymentStatus.CANCELLED)


def test_processing_cannot_go_back_to_pending():
    svc, _ = _service()
    record = svc.generate(1, JANUARY)

    with pytest.raises(StateError):
        svc.update_payment_status(record.payroll_id, PaymentStatus.PENDING)


def test_period_totals_cover_reported_records():
    svc, _ = _service()
    first = svc.generate(1, JANUARY)
    svc.generate(2, JANUARY)
    svc.update_payment_status(first.payroll_id, PaymentStatus.FAILED)

    totals = svc.period_totals(date(2025, 1, 1), date(2025, 12, 31))

    assert totals.total_payrolls == 1
    assert totals.total_gross == Decimal("70050.00")
    assert totals.total_net == totals.average_net


def test_payslips_for_employee():
    svc, _ = _service()
    svc.generate(1, JANUARY)
    svc.generate(1, PayPeriod(start_date=date(2025, 2, 1), end_date=date(2025, 2, 28)))

    assert len(svc.payslips(1)) == 2
    assert svc.payslips(2) == []
