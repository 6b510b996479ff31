from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, paging_clause
from .model import (
    AttendanceDeletion,
    AttendanceFilter,
    AttendanceRecord,
    AttendanceRow,
    AttendanceUpdate,
    NewAttendance,
)
from .repository import AttendanceRepository


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, check_in_time, check_out_time, note
                FROM attendance_records
                WHERE attendance_id=%s
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, check_in_time, check_out_time, note
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_user(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, check_in_time, check_out_time, note
                FROM attendance_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY check_in_time DESC
                """,
                (int(user_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_rows(self, criteria: AttendanceFilter) -> Sequence[AttendanceRow]:
        clauses: list[str] = []
        params: list[object] = []

        if criteria.from_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(criteria.from_date)
        if criteria.to_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(criteria.to_date)
        if criteria.user_id is not None:
            clauses.append("ar.user_id=%s")
            params.append(int(criteria.user_id))
        if criteria.department:
            clauses.append("u.department=%s")
            params.append(criteria.department)
        if criteria.status == "completed":
            clauses.append("ar.check_out_time IS NOT NULL")
        elif criteria.status == "active":
            clauses.append("ar.check_out_time IS NULL")

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        limit, limit_params = paging_clause(criteria.page_size, criteria.offset)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ar.attendance_id, ar.user_id, u.full_name, u.department,
                       ar.check_in_time, ar.check_out_time, ar.note
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                {where}
                ORDER BY ar.check_in_time DESC{limit}
                """,
                tuple(params + limit_params),
            )
            return [
                AttendanceRow(
                    attendance_id=int(r["attendance_id"]),
                    user_id=int(r["user_id"]),
                    full_name=r["full_name"],
                    department=r.get("department"),
                    check_in_time=r["check_in_time"],
                    check_out_time=r.get("check_out_time"),
                    note=r.get("note"),
                )
                for r in fetchall(cur)
            ]

    def create(self, entry: NewAttendance) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, check_in_time, check_out_time, note)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(entry.user_id),
                    entry.check_in_time.date(),
                    entry.check_in_time,
                    entry.check_out_time,
                    entry.note,
                ),
            )
            return int(cur.lastrowid)

    def update(self, update: AttendanceUpdate) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET work_date=%s, check_in_time=%s, check_out_time=%s
                WHERE attendance_id=%s
                """,
                (
                    update.check_in_time.date(),
                    update.check_in_time,
                    update.check_out_time,
                    int(update.attendance_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, deletion: AttendanceDeletion) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE attendance_id=%s",
                (int(deletion.attendance_id),),
            )
            return cur.rowcount > 0
