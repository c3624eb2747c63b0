from datetime import date
from decimal import Decimal

from dayflow.attendance.model import AttendanceSummary
from dayflow.employees.model import CompensationProfile
from dayflow.payroll.calculator.standard_calculator import StandardPayrollCalculator, money
from dayflow.payroll.model import PayPeriod
from dayflow.payroll.policy import PayrollPolicy

PERIOD = PayPeriod(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))


def _profile(basic: str) -> CompensationProfile:
    return CompensationProfile(
        employee_id=1,
        basic_salary=Decimal(basic),
        currency="INR",
        company_name="DayFlow",
        first_name="John",
        last_name="Doe",
    )


def test_default_policy_breakdown():
    result = StandardPayrollCalculator().compute(_profile("50000"), AttendanceSummary(), PERIOD)

    assert result.earnings.hra == Decimal("20000.00")
    assert result.earnings.conveyance == Decimal("1600.00")
    assert result.earnings.medical == Decimal("1250.00")
    assert result.gross_earnings == Decimal("72850.00")
    assert result.deductions.pf_employee == Decimal("6000.00")
    assert result.deductions.pf_employer == Decimal("6000.00")
    assert result.deductions.income_tax == Decimal("5000.00")
    assert result.total_deductions == Decimal("11000.00")
    assert result.net_pay == Decimal("61850.00")
    assert result.period.pay_date == date(2025, 1, 31)


def test_overtime_paid_at_one_and_a_half_hourly():
    summary = AttendanceSummary(total_overtime_hours=Decimal("3.50"))

    result = StandardPayrollCalculator().compute(_profile("48000"), summary, PERIOD)

    # 48000 / (30 * 8) = 200 per hour
    assert result.earnings.overtime_rate == Decimal("300.00")
    assert result.earnings.overtime_amount == Decimal("1050.00")
    assert result.gross_earnings == Decimal("48000") + Decimal("19200") + Decimal("2850") + Decimal("1050")


def test_net_pay_may_go_negative_without_floor():
    policy = PayrollPolicy(loan_repayment=Decimal("20000"))

    result = StandardPayrollCalculator().compute(_profile("1000"), AttendanceSummary(), PERIOD, policy)

    assert result.net_pay < 0


def test_floor_policy_clamps_net_pay():
    policy = PayrollPolicy(loan_repayment=Decimal("20000"), floor_net_pay=True)

    result = StandardPayrollCalculator().compute(_profile("1000"), AttendanceSummary(), PERIOD, policy)

    assert result.net_pay == Decimal("0")


def test_money_rounds_half_up():
    assert money(Decimal("0.125")) == Decimal("0.13")
    assert money(Decimal("2.675")) == Decimal("2.68")
