from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..attendance.model import AttendanceSummary
from ..core.enums import PaymentStatus
from ..core.exceptions import ValidationError

ZERO = Decimal("0")


@dataclass(frozen=True)
class PayPeriod:
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValidationError("Pay period end must be on or after its start")

    @property
    def pay_date(self) -> date:
        return self.end_date


@dataclass(frozen=True)
class Earnings:
    overtime_hours: Decimal = ZERO
    overtime_rate: Decimal = ZERO
    overtime_amount: Decimal = ZERO
    bonus: Decimal = ZERO
    hra: Decimal = ZERO
    conveyance: Decimal = ZERO
    medical: Decimal = ZERO
    lta: Decimal = ZERO
    other_allowance: Decimal = ZERO
    reimbursements: Decimal = ZERO

    @property
    def allowances(self) -> Decimal:
        return self.hra + self.conveyance + self.medical + self.lta + self.other_allowance


@dataclass(frozen=True)
class Deductions:
    income_tax: Decimal = ZERO
    professional_tax: Decimal = ZERO
    pf_employee: Decimal = ZERO
    # Employer contribution is reported, never deducted from the employee.
    pf_employer: Decimal = ZERO
    insurance: Decimal = ZERO
    loan_repayment: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return (
            self.income_tax
            + self.professional_tax
            + self.pf_employee
            + self.insurance
            + self.loan_repayment
            + self.other
        )


@dataclass(frozen=True)
class PayrollBreakdown:
    """Components of one pay computation; totals are always derived."""

    period: PayPeriod
    currency: str
    basic_salary: Decimal
    earnings: Earnings
    deductions: Deductions
    floor_net_pay: bool = False

    @property
    def gross_earnings(self) -> Decimal:
        e = self.earnings
        return self.basic_salary + e.allowances + e.bonus + e.overtime_amount + e.reimbursements

    @property
    def total_deductions(self) -> Decimal:
        return self.deductions.total

    @property
    def net_pay(self) -> Decimal:
        net = self.gross_earnings - self.total_deductions
        if self.floor_net_pay and net < 0:
            return ZERO
        return net

    def to_dict(self) -> dict:
        e = self.earnings
        d = self.deductions
        return {
            "period": {"start_date": self.period.start_date.isoformat(), "end_date": self.period.end_date.isoformat()},
            "pay_date": self.period.pay_date.isoformat(),
            "currency": self.currency,
            "basic_salary": str(self.basic_salary),
            "earnings": {
                "overtime": {
                    "hours": str(e.overtime_hours),
                    "rate": str(e.overtime_rate),
                    "amount": str(e.overtime_amount),
                },
                "bonus": str(e.bonus),
                "allowances": {
                    "hra": str(e.hra),
                    "conveyance": str(e.conveyance),
                    "medical": str(e.medical),
                    "lta": str(e.lta),
                    "other": str(e.other_allowance),
                },
                "reimbursements": str(e.reimbursements),
            },
            "deductions": {
                "tax": {"income_tax": str(d.income_tax), "professional_tax": str(d.professional_tax)},
                "provident_fund": {"employee": str(d.pf_employee), "employer": str(d.pf_employer)},
                "insurance": str(d.insurance),
                "loan_repayment": str(d.loan_repayment),
                "other": str(d.other),
            },
            "gross_earnings": str(self.gross_earnings),
            "total_deductions": str(self.total_deductions),
            "net_pay": str(self.net_pay),
        }


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    employee_id: int
    breakdown: PayrollBreakdown
    attendance: AttendanceSummary
    payment_status: PaymentStatus
    processed_by: Optional[int] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def gross_earnings(self) -> Decimal:
        return self.breakdown.gross_earnings

    @property
    def net_pay(self) -> Decimal:
        return self.breakdown.net_pay

    def to_dict(self) -> dict:
        out = {
            "payroll_id": self.payroll_id,
            "employee_id": self.employee_id,
            "payment_status": self.payment_status.value,
            "processed_by": self.processed_by,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            "attendance_summary": self.attendance.to_dict(),
        }
        out.update(self.breakdown.to_dict())
        return out


@dataclass(frozen=True)
class PeriodTotals:
    total_payrolls: int
    total_gross: Decimal
    total_deductions: Decimal
    total_net: Decimal
    average_net: Decimal

    def to_dict(self) -> dict:
        return {
            "total_payrolls": self.total_payrolls,
            "total_gross": str(self.total_gross),
            "total_deductions": str(self.total_deductions),
            "total_net": str(self.total_net),
            "average_net": str(self.average_net),
        }
