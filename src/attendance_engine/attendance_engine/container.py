from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveNotifier, LeaveService
from .users.mysql_employee_repository import MySQLEmployeeRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    leave_repo: MySQLLeaveRepository

    attendance_service: AttendanceService
    leave_service: LeaveService


def build_container(*, db_config: dict, notifier: Optional[LeaveNotifier] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        attendance_service=AttendanceService(attendance_repo, employees_repo),
        leave_service=LeaveService(leave_repo, employees_repo, notifier=notifier),
    )
