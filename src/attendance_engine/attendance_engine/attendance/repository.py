from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceDeletion, AttendanceFilter, AttendanceRecord, AttendanceRow, AttendanceUpdate, NewAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Records whose check-in date lies in [start_date, end_date], newest first."""

        raise NotImplementedError

    def list_rows(self, criteria: AttendanceFilter) -> Sequence[AttendanceRow]:
        """Filtered, paged rows joined with the owning employee."""

        raise NotImplementedError

    def create(self, entry: NewAttendance) -> int:
        raise NotImplementedError

    def update(self, update: AttendanceUpdate) -> bool:
        raise NotImplementedError

    def delete(self, deletion: AttendanceDeletion) -> bool:
        raise NotImplementedError
