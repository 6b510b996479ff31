from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, paging_clause
from .model import (
    LeaveDeletion,
    LeaveFilter,
    LeaveRequest,
    LeaveRequestRow,
    LeaveTransition,
    LeaveUpdate,
    NewLeaveRequest,
)
from .repository import LeaveRepository

_COLUMNS = """
    lr.request_id, lr.user_id, lr.start_date, lr.end_date, lr.reason,
    lr.status, lr.leave_type, lr.created_at, lr.decided_by, lr.admin_note
"""


def _to_request(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        leave_type=LeaveType(r.get("leave_type") or LeaveType.ANNUAL.value),
        created_at=r.get("created_at"),
        decided_by=r.get("decided_by"),
        admin_note=r.get("admin_note"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests lr WHERE lr.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests lr
                WHERE lr.user_id=%s
                ORDER BY lr.start_date DESC, lr.request_id DESC
                """,
                (int(user_id),),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_rows(self, criteria: LeaveFilter) -> Sequence[LeaveRequestRow]:
        clauses: list[str] = []
        params: list[object] = []

        if criteria.status is not None:
            clauses.append("lr.status=%s")
            params.append(criteria.status.value)
        if criteria.leave_type is not None:
            clauses.append("lr.leave_type=%s")
            params.append(criteria.leave_type.value)
        if criteria.department:
            clauses.append("u.department=%s")
            params.append(criteria.department)
        if criteria.user_id is not None:
            clauses.append("lr.user_id=%s")
            params.append(int(criteria.user_id))
        if criteria.from_date is not None:
            clauses.append("lr.start_date >= %s")
            params.append(criteria.from_date)
        if criteria.to_date is not None:
            clauses.append("lr.end_date <= %s")
            params.append(criteria.to_date)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        limit, limit_params = paging_clause(criteria.page_size, criteria.offset)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.full_name, u.username, u.department, u.position
                FROM leave_requests lr
                JOIN users u ON u.user_id = lr.user_id
                {where}
                ORDER BY lr.created_at DESC, lr.request_id DESC{limit}
                """,
                tuple(params + limit_params),
            )
            return [
                LeaveRequestRow(
                    request=_to_request(r),
                    full_name=r["full_name"],
                    username=r["username"],
                    department=r.get("department"),
                    position=r.get("position"),
                )
                for r in fetchall(cur)
            ]

    def create(self, entry: NewLeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, start_date, end_date, reason, leave_type, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(entry.user_id),
                    entry.start_date,
                    entry.end_date,
                    entry.reason,
                    entry.leave_type.value,
                    entry.status.value,
                ),
            )
            return int(cur.lastrowid)

    def update(self, update: LeaveUpdate) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET start_date=%s, end_date=%s, reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    update.start_date,
                    update.end_date,
                    update.reason,
                    int(update.request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def apply_transition(self, transition: LeaveTransition) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s,
                    decided_by=COALESCE(%s, decided_by),
                    admin_note=COALESCE(%s, admin_note)
                WHERE request_id=%s AND status=%s
                """,
                (
                    transition.to_status.value,
                    transition.decided_by,
                    transition.admin_note,
                    int(transition.request_id),
                    transition.from_status.value,
                ),
            )
            return cur.rowcount > 0

    def delete(self, deletion: LeaveDeletion) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(deletion.request_id),))
            return cur.rowcount > 0
