from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceRecorder
from .core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_WORKDAY_START
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveLedger
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .sequences.mysql_counter_repository import MySQLCounterRepository
from .sequences.service import SequenceIssuer


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    leaves_repo: MySQLLeaveRepository
    payroll_repo: MySQLPayrollRepository
    counters_repo: MySQLCounterRepository

    attendance_service: AttendanceRecorder
    leave_service: LeaveLedger
    payroll_service: PayrollService
    sequence_issuer: SequenceIssuer


def build_container(
    *,
    db_config: dict,
    workday_start: time = DEFAULT_WORKDAY_START,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    counters_repo = MySQLCounterRepository(conn)

    attendance_service = AttendanceRecorder(
        attendance_repo,
        employees_repo,
        strategy_factory=AttendanceStrategyFactory(),
        workday_start=workday_start,
        grace_minutes=grace_minutes,
    )
    leave_service = LeaveLedger(leaves_repo, employees_repo)
    payroll_service = PayrollService(payroll_repo, employees_repo, attendance_service, leave_service)
    sequence_issuer = SequenceIssuer(counters_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        counters_repo=counters_repo,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
        sequence_issuer=sequence_issuer,
    )
