from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from dayflow.core.enums import LeaveBucket, LeaveStatus, LeaveType
from dayflow.core.exceptions import NotFoundError, StateError, ValidationError
from dayflow.employees.model import CompensationProfile, EmployeeProfile
from dayflow.leaves.model import LeaveRequest, bucket_for, types_for_bucket
from dayflow.leaves.service import LeaveLedger, leave_duration


def _employee(employee_id: int, **balance) -> EmployeeProfile:
    return EmployeeProfile(
        employee_id=employee_id,
        employee_code=None,
        compensation=CompensationProfile(
            employee_id=employee_id,
            basic_salary=Decimal("30000"),
            currency="INR",
            company_name="DayFlow",
            first_name="Jane",
            last_name="Roe",
        ),
        leave_balance={LeaveBucket(k): Decimal(v) for k, v in balance.items()},
    )


@dataclass
class InMemoryEmployees:
    employees: dict[int, EmployeeProfile]

    def get_by_id(self, employee_id: int) -> Optional[EmployeeProfile]:
        return self.employees.get(employee_id)


@dataclass
class InMemoryLeaves:
    employees: InMemoryEmployees
    requests: dict[int, LeaveRequest] = field(default_factory=dict)

    def create(self, *, employee_id, leave_type, start_date, end_date, is_half_day, duration, reason):
        request_id = len(self.requests) + 1
        self.requests[request_id] = LeaveRequest(
            request_id=request_id,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            is_half_day=is_half_day,
            duration=duration,
            reason=reason,
            status=LeaveStatus.PENDING,
            applied_at=datetime(2025, 1, 2, 10, 0),
        )
        return request_id

    def get(self, *, request_id):
        return self.requests.get(request_id)

    def list_for_employee(self, *, employee_id, start_date=None, end_date=None):
        rows = [r for r in self.requests.values() if r.employee_id == employee_id]
        if start_date and end_date:
            rows = [r for r in rows if start_date <= r.start_date <= end_date]
        return rows

    def approve(self, *, request_id, approver_id, bucket, duration):
        req = self.requests[request_id]
        if req.status != LeaveStatus.PENDING:
            return False
        self.requests[request_id] = replace(req, status=LeaveStatus.APPROVED, approved_by=approver_id)
        employee = self.employees.employees[req.employee_id]
        employee.leave_balance[bucket] = max(employee.balance_for(bucket) - duration, Decimal("0"))
        return True

    def reject(self, *, request_id, approver_id, reason):
        req = self.requests[request_id]
        if req.status != LeaveStatus.PENDING:
            return False
        self.requests[request_id] = replace(
            req, status=LeaveStatus.REJECTED, rejected_by=approver_id, rejection_reason=reason
        )
        return True

    def cancel(self, *, request_id):
        req = self.requests[request_id]
        if req.status != LeaveStatus.PENDING:
            return False
        self.requests[request_id] = replace(req, status=LeaveStatus.CANCELLED)
        return True

    def sum_approved_days(self, *, employee_id, leave_types, start_date, end_date):
        return sum(
            (
                r.duration
                for r in self.requests.values()
                if r.employee_id == employee_id
                and r.status == LeaveStatus.APPROVED
                and r.leave_type in leave_types
                and start_date <= r.start_date <= end_date
            ),
            Decimal("0"),
        )


def _ledger(**balance):
    employees = InMemoryEmployees({1: _employee(1, **balance), 2: _employee(2)})
    leaves = InMemoryLeaves(employees)
    return LeaveLedger(leaves, employees), leaves, employees


def test_monday_to_friday_is_five_days():
    ledger, _, _ = _ledger()

    req = ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 6), date(2025, 1, 10))

    assert req.duration == Decimal("5")
    assert req.status == LeaveStatus.PENDING


def test_weekend_is_not_counted():
    assert leave_duration(date(2025, 1, 10), date(2025, 1, 13), half_day=False) == Decimal("2")


def test_half_day_is_half():
    ledger, _, _ = _ledger()

    req = ledger.apply(1, LeaveType.SICK, date(2025, 1, 7), date(2025, 1, 7), half_day=True)

    assert req.duration == Decimal("0.5")


def test_half_day_spanning_dates_is_rejected():
    ledger, _, _ = _ledger()

    with pytest.raises(ValidationError):
        ledger.apply(1, LeaveType.SICK, date(2025, 1, 7), date(2025, 1, 8), half_day=True)


def test_weekend_only_range_is_rejected():
    ledger, _, _ = _ledger()

    with pytest.raises(ValidationError):
        ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 11), date(2025, 1, 12))


def test_inverted_range_is_rejected():
    ledger, _, _ = _ledger()

    with pytest.raises(ValidationError):
        ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 10), date(2025, 1, 6))


def test_apply_for_unknown_employee():
    ledger, _, _ = _ledger()

    with pytest.raises(NotFoundError):
        ledger.apply(42, LeaveType.ANNUAL, date(2025, 1, 6), date(2025, 1, 6))


def test_approve_debits_bucket_once():
    ledger, _, employees = _ledger(annual="12")
    req = ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 6), date(2025, 1, 10))

    approved = ledger.approve(req.request_id, approver_id=7)
    with pytest.raises(StateError):
        ledger.approve(req.request_id, approver_id=8)

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approved_by == 7
    assert employees.employees[1].balance_for(LeaveBucket.ANNUAL) == Decimal("7")


def test_approve_floors_balance_at_zero():
    ledger, _, employees = _ledger(casual="1")
    req = ledger.apply(1, LeaveType.EMERGENCY, date(2025, 1, 6), date(2025, 1, 8))

    ledger.approve(req.request_id, approver_id=7)

    assert employees.employees[1].balance_for(LeaveBucket.CASUAL) == Decimal("0")


def test_approval_lost_to_concurrent_decision_is_state_error(monkeypatch):
    ledger, leaves, employees = _ledger(annual="12")
    req = ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 6), date(2025, 1, 6))
    # another approver flipped the status after our read
    monkeypatch.setattr(leaves, "approve", lambda **kwargs: False)

    with pytest.raises(StateError):
        ledger.approve(req.request_id, approver_id=8)
    assert employees.employees[1].balance_for(LeaveBucket.ANNUAL) == Decimal("12")


def test_reject_sets_default_reason():
    ledger, _, _ = _ledger()
    req = ledger.apply(1, LeaveType.PERSONAL, date(2025, 1, 6), date(2025, 1, 6))

    rejected = ledger.reject(req.request_id, approver_id=7)

    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.rejection_reason == "No reason provided"


def test_reject_after_approval_is_state_error():
    ledger, _, _ = _ledger(personal="5")
    req = ledger.apply(1, LeaveType.PERSONAL, date(2025, 1, 6), date(2025, 1, 6))
    ledger.approve(req.request_id, approver_id=7)

    with pytest.raises(StateError):
        ledger.reject(req.request_id, approver_id=7, reason="too late")


def test_only_owner_can_cancel():
    ledger, _, _ = _ledger()
    req = ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 6), date(2025, 1, 6))

    with pytest.raises(ValidationError):
        ledger.cancel(req.request_id, employee_id=2)

    assert ledger.cancel(req.request_id, employee_id=1).status == LeaveStatus.CANCELLED


def test_cancel_of_decided_request_is_state_error():
    ledger, _, _ = _ledger()
    req = ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 6), date(2025, 1, 6))
    ledger.reject(req.request_id, approver_id=7)

    with pytest.raises(StateError):
        ledger.cancel(req.request_id, employee_id=1)


def test_missing_request_is_not_found():
    ledger, _, _ = _ledger()

    with pytest.raises(NotFoundError):
        ledger.approve(999, approver_id=7)


def test_check_balance_counts_same_bucket_usage_this_year():
    ledger, _, _ = _ledger(casual="7")
    emergency = ledger.apply(1, LeaveType.EMERGENCY, date(2025, 1, 6), date(2025, 1, 7))
    other = ledger.apply(1, LeaveType.OTHER, date(2025, 2, 3), date(2025, 2, 3))
    ledger.approve(emergency.request_id, approver_id=7)
    ledger.approve(other.request_id, approver_id=7)

    result = ledger.check_balance(1, LeaveType.MATERNITY, "3", today=date(2025, 3, 1))

    assert result.available_balance == Decimal("4")
    assert result.used_days == Decimal("3")
    assert result.remaining_balance == Decimal("1")
    assert result.sufficient is False


def test_check_balance_ignores_other_years():
    ledger, _, _ = _ledger(annual="12")
    req = ledger.apply(1, LeaveType.ANNUAL, date(2024, 12, 2), date(2024, 12, 3))
    ledger.approve(req.request_id, approver_id=7)

    result = ledger.check_balance(1, LeaveType.ANNUAL, 2, today=date(2025, 1, 15))

    assert result.used_days == Decimal("0")
    assert result.sufficient is True


def test_bucket_mapping():
    assert bucket_for(LeaveType.ANNUAL) == LeaveBucket.ANNUAL
    assert bucket_for(LeaveType.SICK) == LeaveBucket.SICK
    assert bucket_for(LeaveType.PERSONAL) == LeaveBucket.PERSONAL
    assert bucket_for(LeaveType.UNPAID) == LeaveBucket.CASUAL
    assert LeaveType.ANNUAL not in types_for_bucket(LeaveBucket.CASUAL)
    assert LeaveType.PATERNITY in types_for_bucket(LeaveBucket.CASUAL)


def test_approved_days_and_yearly_summary():
    ledger, _, _ = _ledger(annual="12", sick="10")
    a = ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 6), date(2025, 1, 8))
    s = ledger.apply(1, LeaveType.SICK, date(2025, 1, 20), date(2025, 1, 20), half_day=True)
    ledger.apply(1, LeaveType.SICK, date(2025, 2, 3), date(2025, 2, 3))
    ledger.approve(a.request_id, approver_id=7)
    ledger.approve(s.request_id, approver_id=7)

    assert ledger.approved_days(1, date(2025, 1, 1), date(2025, 1, 31)) == Decimal("3.5")

    summary = {row.leave_type: row for row in ledger.yearly_summary(1, 2025)}
    assert summary[LeaveType.ANNUAL].approved_days == Decimal("3")
    assert summary[LeaveType.SICK].approved_days == Decimal("0.5")
    assert summary[LeaveType.SICK].pending_days == Decimal("1")
    assert summary[LeaveType.SICK].total_days == Decimal("1.5")


def test_approve_without_stored_bucket_debits_opening_balance():
    ledger, _, employees = _ledger()
    req = ledger.apply(1, LeaveType.ANNUAL, date(2025, 1, 6), date(2025, 1, 10))

    ledger.approve(req.request_id, approver_id=7)

    assert employees.employees[1].leave_balance[LeaveBucket.ANNUAL] == Decimal("7")


def test_opening_balances():
    employee = _employee(3)

    assert employee.balance_for(LeaveBucket.ANNUAL) == Decimal("12")
    assert employee.balance_for(LeaveBucket.SICK) == Decimal("10")
    assert employee.balance_for(LeaveBucket.PERSONAL) == Decimal("5")
    assert employee.balance_for(LeaveBucket.CASUAL) == Decimal("7")
