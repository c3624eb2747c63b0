from __future__ import annotations

from typing import Optional

from ..core.enums import LeaveBucket
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import CompensationProfile, EmployeeProfile
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[EmployeeProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, employee_code, first_name, last_name, company_name,
                       basic_salary, currency, is_active
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None

            cur.execute(
                "SELECT bucket, days FROM employee_leave_balances WHERE employee_id=%s",
                (int(employee_id),),
            )
            balance = {LeaveBucket(r["bucket"]): as_decimal(r["days"]) for r in fetchall(cur)}

            return EmployeeProfile(
                employee_id=int(row["employee_id"]),
                employee_code=row.get("employee_code"),
                compensation=CompensationProfile(
                    employee_id=int(row["employee_id"]),
                    basic_salary=as_decimal(row["basic_salary"]),
                    currency=row["currency"],
                    company_name=row["company_name"],
                    first_name=row["first_name"],
                    last_name=row["last_name"],
                ),
                leave_balance=balance,
                is_active=bool(row.get("is_active", True)),
            )
