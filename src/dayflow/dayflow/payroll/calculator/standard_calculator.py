from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...attendance.model import AttendanceSummary
from ...core.exceptions import ValidationError
from ...employees.model import CompensationProfile
from ..model import Deductions, Earnings, PayPeriod, PayrollBreakdown
from ..policy import DEFAULT_POLICY, PayrollPolicy
from .base import PayrollCalculator

_CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: percentage allowances and deductions on basic, flat extras,
    and overtime paid at 1.5x the hourly rate of a 30 day, 8 hour month."""

    def compute(
        self,
        profile: CompensationProfile,
        summary: AttendanceSummary,
        period: PayPeriod,
        policy: Optional[PayrollPolicy] = None,
    ) -> PayrollBreakdown:
        policy = policy or DEFAULT_POLICY
        basic = Decimal(profile.basic_salary)
        if basic < 0:
            raise ValidationError("Basic salary cannot be negative")

        hourly = basic / Decimal(policy.days_per_month * policy.hours_per_day)
        overtime_hours = Decimal(summary.total_overtime_hours)

        earnings = Earnings(
            overtime_hours=overtime_hours,
            overtime_rate=money(hourly * policy.overtime_multiplier),
            overtime_amount=money(overtime_hours * hourly * policy.overtime_multiplier),
            bonus=money(policy.bonus),
            hra=money(basic * policy.hra_rate),
            conveyance=money(policy.conveyance),
            medical=money(policy.medical),
            lta=money(policy.lta),
            other_allowance=money(policy.other_allowance),
            reimbursements=money(policy.reimbursements),
        )
        deductions = Deductions(
            income_tax=money(basic * policy.income_tax_rate),
            professional_tax=money(policy.professional_tax),
            pf_employee=money(basic * policy.pf_employee_rate),
            pf_employer=money(basic * policy.pf_employer_rate),
            insurance=money(policy.insurance),
            loan_repayment=money(policy.loan_repayment),
            other=money(policy.other_deduction),
        )
        return PayrollBreakdown(
            period=period,
            currency=profile.currency,
            basic_salary=money(basic),
            earnings=earnings,
            deductions=deductions,
            floor_net_pay=policy.floor_net_pay,
        )
