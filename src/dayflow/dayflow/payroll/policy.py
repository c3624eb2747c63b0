from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PayrollPolicy:
    """Every allowance and deduction input with its explicit default.

    Rates are fractions of basic salary; the rest are flat monthly amounts.
    """

    # allowances
    hra_rate: Decimal = Decimal("0.40")
    conveyance: Decimal = Decimal("1600")
    medical: Decimal = Decimal("1250")
    lta: Decimal = Decimal("0")
    other_allowance: Decimal = Decimal("0")
    bonus: Decimal = Decimal("0")
    reimbursements: Decimal = Decimal("0")

    # deductions
    pf_employee_rate: Decimal = Decimal("0.12")
    pf_employer_rate: Decimal = Decimal("0.12")
    income_tax_rate: Decimal = Decimal("0.10")
    professional_tax: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")
    loan_repayment: Decimal = Decimal("0")
    other_deduction: Decimal = Decimal("0")

    # overtime: hourly rate = basic / (days_per_month * hours_per_day) * multiplier
    overtime_multiplier: Decimal = Decimal("1.5")
    days_per_month: int = 30
    hours_per_day: int = 8

    floor_net_pay: bool = False


DEFAULT_POLICY = PayrollPolicy()
