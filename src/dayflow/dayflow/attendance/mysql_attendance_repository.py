from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus, CheckMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    attendance_id, employee_id, work_date, check_in_time, check_in_method,
    check_out_time, check_out_method, break_minutes, work_seconds, overtime_seconds,
    status, note
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_in_method=CheckMethod(r["check_in_method"]),
        check_out_time=r.get("check_out_time"),
        check_out_method=CheckMethod(r["check_out_method"]) if r.get("check_out_method") else None,
        status=AttendanceStatus(r["status"]),
        break_minutes=int(r.get("break_minutes") or 0),
        work_seconds=int(r.get("work_seconds") or 0),
        overtime_seconds=int(r.get("overtime_seconds") or 0),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        method: CheckMethod,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, check_in_time, check_in_method, status, note)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, check_in_time, method.value, status.value, note),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                logger.debug("attendance key taken", extra={"employee_id": employee_id, "work_date": work_date})
                return None
            raise

    def complete_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        method: CheckMethod,
        break_minutes: int,
        work_seconds: int,
        overtime_seconds: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_method=%s, break_minutes=%s,
                    work_seconds=%s, overtime_seconds=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (
                    check_out_time,
                    method.value,
                    int(break_minutes),
                    int(work_seconds),
                    int(overtime_seconds),
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0
