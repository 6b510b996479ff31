from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.constants import DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi chấm công."""

    attendance_id: int
    user_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    note: Optional[str] = None

    @property
    def work_date(self) -> date:
        return self.check_in_time.date()

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None


@dataclass(frozen=True)
class NewAttendance:
    """Mutation: append a record."""

    user_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceUpdate:
    """Mutation: full resulting field set for an existing record."""

    attendance_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime]


@dataclass(frozen=True)
class AttendanceDeletion:
    attendance_id: int


@dataclass(frozen=True)
class CheckInOutcome:
    entry: NewAttendance
    is_late: bool
    message: str


@dataclass(frozen=True)
class CheckOutOutcome:
    update: AttendanceUpdate
    duration: timedelta
    is_early_leave: bool
    message: str


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model phục vụ báo cáo (bản ghi + thông tin nhân viên)."""

    attendance_id: int
    user_id: int
    full_name: str
    department: Optional[str]
    check_in_time: datetime
    check_out_time: Optional[datetime]
    note: Optional[str] = None

    def to_record(self) -> AttendanceRecord:
        return AttendanceRecord(
            attendance_id=self.attendance_id,
            user_id=self.user_id,
            check_in_time=self.check_in_time,
            check_out_time=self.check_out_time,
            note=self.note,
        )


@dataclass(frozen=True)
class AttendanceFilter:
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    user_id: Optional[int] = None
    department: Optional[str] = None
    status: Optional[str] = None  # "completed" | "active" | None
    page_number: int = 1
    page_size: Optional[int] = DEFAULT_PAGE_SIZE  # None: no paging

    @property
    def offset(self) -> int:
        return (max(self.page_number, 1) - 1) * (self.page_size or 0)
