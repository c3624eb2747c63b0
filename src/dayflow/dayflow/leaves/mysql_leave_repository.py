from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.constants import DEFAULT_LEAVE_BALANCES
from ..core.enums import LeaveBucket, LeaveStatus, LeaveType
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, employee_id, leave_type, start_date, end_date, is_half_day, duration,
    reason, status, applied_at, approved_by, approved_at, rejected_by, rejected_at,
    rejection_reason
"""


def _to_request(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        is_half_day=bool(r["is_half_day"]),
        duration=as_decimal(r["duration"]),
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        applied_at=r["applied_at"],
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejected_by=r.get("rejected_by"),
        rejected_at=r.get("rejected_at"),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        is_half_day: bool,
        duration: Decimal,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, is_half_day, duration, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    int(bool(is_half_day)),
                    duration,
                    reason,
                    LeaveStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_employee(
        self,
        *,
        employee_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]

        if start_date is not None:
            clauses.append("start_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("start_date<=%s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY start_date DESC, request_id DESC
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def approve(self, *, request_id: int, approver_id: int, bucket: LeaveBucket, duration: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (LeaveStatus.APPROVED.value, int(approver_id), int(request_id), LeaveStatus.PENDING.value),
            )
            if cur.rowcount == 0:
                return False

            # Same transaction: the row lock taken above serializes competing approvals.
            cur.execute("SELECT employee_id FROM leave_requests WHERE request_id=%s", (int(request_id),))
            employee_id = int(fetchone(cur)["employee_id"])

            # An employee without a stored bucket starts from the opening balance.
            cur.execute(
                """
                INSERT INTO employee_leave_balances(employee_id, bucket, days)
                VALUES(%s, %s, %s)
                ON DUPLICATE KEY UPDATE days = days
                """,
                (employee_id, bucket.value, Decimal(DEFAULT_LEAVE_BALANCES[bucket.value])),
            )
            cur.execute(
                """
                UPDATE employee_leave_balances
                SET days = GREATEST(days - %s, 0)
                WHERE employee_id=%s AND bucket=%s
                """,
                (duration, employee_id, bucket.value),
            )
            if cur.rowcount == 0:
                # Raising inside db_cursor rolls the status change back too.
                raise NotFoundError(f"No {bucket.value} leave balance for employee {employee_id}")
            return True

    def reject(self, *, request_id: int, approver_id: int, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, rejected_by=%s, rejected_at=NOW(), rejection_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    LeaveStatus.REJECTED.value,
                    int(approver_id),
                    reason,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def cancel(self, *, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_requests SET status=%s WHERE request_id=%s AND status=%s",
                (LeaveStatus.CANCELLED.value, int(request_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def sum_approved_days(
        self,
        *,
        employee_id: int,
        leave_types: Sequence[LeaveType],
        start_date: date,
        end_date: date,
    ) -> Decimal:
        if not leave_types:
            return Decimal("0")

        placeholders = ",".join(["%s"] * len(leave_types))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COALESCE(SUM(duration), 0) AS used
                FROM leave_requests
                WHERE employee_id=%s AND status=%s
                  AND leave_type IN ({placeholders})
                  AND start_date BETWEEN %s AND %s
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, *[t.value for t in leave_types], start_date, end_date),
            )
            row = fetchone(cur)
            return as_decimal(row["used"] if row else 0)
