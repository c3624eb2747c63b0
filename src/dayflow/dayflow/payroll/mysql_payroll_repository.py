from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..attendance.model import AttendanceSummary
from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Deductions, Earnings, PayPeriod, PayrollBreakdown, PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    payroll_id, employee_id, period_start, period_end, currency, basic_salary,
    overtime_hours, overtime_rate, overtime_amount, bonus, hra, conveyance, medical, lta,
    other_allowance, reimbursements, income_tax, professional_tax, pf_employee, pf_employer,
    insurance, loan_repayment, other_deduction, floor_net_pay,
    total_days, present_days, absent_days, late_days, half_days, on_leave_days,
    leave_days, total_work_hours, average_work_hours, total_overtime_hours,
    payment_status, processed_by, paid_at, created_at
"""

# Attendance snapshot columns, named after the AttendanceSummary fields.
_SUMMARY_COUNTS = ("total_days", "present_days", "absent_days", "late_days", "half_days", "on_leave_days")
_SUMMARY_AMOUNTS = ("leave_days", "total_work_hours", "average_work_hours", "total_overtime_hours")

_INSERT_COLUMNS = (
    "employee_id", "period_start", "period_end", "pay_date", "currency", "basic_salary",
    "overtime_hours", "overtime_rate", "overtime_amount", "bonus", "hra", "conveyance", "medical", "lta",
    "other_allowance", "reimbursements", "income_tax", "professional_tax", "pf_employee", "pf_employer",
    "insurance", "loan_repayment", "other_deduction", "gross_earnings", "net_pay", "floor_net_pay",
    *_SUMMARY_COUNTS,
    *_SUMMARY_AMOUNTS,
    "payment_status", "processed_by",
)
_INSERT_SQL = "INSERT INTO payroll_records({}) VALUES({})".format(
    ", ".join(_INSERT_COLUMNS), ", ".join(["%s"] * len(_INSERT_COLUMNS))
)


def _to_record(r: Dict[str, Any]) -> PayrollRecord:
    # gross_earnings / net_pay columns exist for reporting queries only;
    # the record recomputes both from the stored components.
    breakdown = PayrollBreakdown(
        period=PayPeriod(start_date=r["period_start"], end_date=r["period_end"]),
        currency=r["currency"],
        basic_salary=as_decimal(r["basic_salary"]),
        earnings=Earnings(
            overtime_hours=as_decimal(r["overtime_hours"]),
            overtime_rate=as_decimal(r["overtime_rate"]),
            overtime_amount=as_decimal(r["overtime_amount"]),
            bonus=as_decimal(r["bonus"]),
            hra=as_decimal(r["hra"]),
            conveyance=as_decimal(r["conveyance"]),
            medical=as_decimal(r["medical"]),
            lta=as_decimal(r["lta"]),
            other_allowance=as_decimal(r["other_allowance"]),
            reimbursements=as_decimal(r["reimbursements"]),
        ),
        deductions=Deductions(
            income_tax=as_decimal(r["income_tax"]),
            professional_tax=as_decimal(r["professional_tax"]),
            pf_employee=as_decimal(r["pf_employee"]),
            pf_employer=as_decimal(r["pf_employer"]),
            insurance=as_decimal(r["insurance"]),
            loan_repayment=as_decimal(r["loan_repayment"]),
            other=as_decimal(r["other_deduction"]),
        ),
        floor_net_pay=bool(r.get("floor_net_pay")),
    )
    attendance = AttendanceSummary(
        **{name: int(r.get(name) or 0) for name in _SUMMARY_COUNTS},
        **{name: as_decimal(r.get(name)) for name in _SUMMARY_AMOUNTS},
    )
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        breakdown=breakdown,
        attendance=attendance,
        payment_status=PaymentStatus(r["payment_status"]),
        processed_by=r.get("processed_by"),
        paid_at=r.get("paid_at"),
        created_at=r.get("created_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        breakdown: PayrollBreakdown,
        attendance: AttendanceSummary,
        payment_status: PaymentStatus,
        processed_by: Optional[int] = None,
    ) -> Optional[int]:
        e = breakdown.earnings
        d = breakdown.deductions
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    _INSERT_SQL,
                    (
                        int(employee_id),
                        breakdown.period.start_date,
                        breakdown.period.end_date,
                        breakdown.period.pay_date,
                        breakdown.currency,
                        breakdown.basic_salary,
                        e.overtime_hours,
                        e.overtime_rate,
                        e.overtime_amount,
                        e.bonus,
                        e.hra,
                        e.conveyance,
                        e.medical,
                        e.lta,
                        e.other_allowance,
                        e.reimbursements,
                        d.income_tax,
                        d.professional_tax,
                        d.pf_employee,
                        d.pf_employer,
                        d.insurance,
                        d.loan_repayment,
                        d.other,
                        breakdown.gross_earnings,
                        breakdown.net_pay,
                        int(breakdown.floor_net_pay),
                        *(getattr(attendance, name) for name in _SUMMARY_COUNTS),
                        *(getattr(attendance, name) for name in _SUMMARY_AMOUNTS),
                        payment_status.value,
                        processed_by,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                logger.debug(
                    "payroll period taken",
                    extra={"employee_id": employee_id, "period_start": breakdown.period.start_date},
                )
                return None
            raise

    def get(self, *, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_period(self, *, employee_id: int, period: PayPeriod) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE employee_id=%s AND period_start=%s AND period_end=%s
                """,
                (int(employee_id), period.start_date, period.end_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, *, employee_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE employee_id=%s
                ORDER BY pay_date DESC
                """,
                (int(employee_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        statuses: Sequence[PaymentStatus],
    ) -> Sequence[PayrollRecord]:
        if not statuses:
            return []

        placeholders = ",".join(["%s"] * len(statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE period_start>=%s AND period_end<=%s
                  AND payment_status IN ({placeholders})
                ORDER BY period_start ASC, employee_id ASC
                """,
                (start_date, end_date, *[s.value for s in statuses]),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def transition_status(
        self,
        *,
        payroll_id: int,
        from_statuses: Sequence[PaymentStatus],
        to_status: PaymentStatus,
    ) -> bool:
        if not from_statuses:
            return False

        placeholders = ",".join(["%s"] * len(from_statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE payroll_records
                SET payment_status=%s,
                    paid_at=CASE WHEN %s='paid' THEN NOW() ELSE paid_at END
                WHERE payroll_id=%s AND payment_status IN ({placeholders})
                """,
                (to_status.value, to_status.value, int(payroll_id), *[s.value for s in from_statuses]),
            )
            return cur.rowcount > 0
