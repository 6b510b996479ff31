from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import format_duration, format_hhmm
from ..core.constants import EARLY_LEAVE_PENALTY_WEIGHT, LATE_PENALTY_WEIGHT, SHORT_DAY_DURATION
from . import policy
from .model import AttendanceRecord


def working_duration(record: AttendanceRecord) -> Optional[timedelta]:
    """``check_out - check_in``; ``None`` while the record is in progress."""
    if record.check_out_time is None:
        return None
    return record.check_out_time - record.check_in_time


def is_late(record: AttendanceRecord) -> bool:
    return policy.is_late_checkin(record.check_in_time.time())


def is_early_leave(record: AttendanceRecord) -> Optional[bool]:
    if record.check_out_time is None:
        return None
    return policy.is_early_checkout(record.check_out_time.time())


def is_full_day(record: AttendanceRecord) -> bool:
    duration = working_duration(record)
    return duration is not None and policy.is_full_day(duration)


def working_hours_status(record: AttendanceRecord) -> str:
    duration = working_duration(record)
    if duration is None:
        return "Chưa hoàn thành"
    if policy.is_full_day(duration):
        return "Đủ giờ"
    if duration >= SHORT_DAY_DURATION:
        return "Thiếu giờ"
    return "Làm việc ngắn"


def attendance_score(*, present_days: int, late_count: int, early_leave_count: int) -> float:
    """Quality score in [0, 100].

    -5 points per percent of late check-ins and -3 per percent of early
    check-outs, floored at 0 after each penalty. No records scores 0.
    """
    if present_days <= 0:
        return 0.0
    score = 100.0
    score = max(0.0, score - (late_count / present_days) * 100 * LATE_PENALTY_WEIGHT)
    score = max(0.0, score - (early_leave_count / present_days) * 100 * EARLY_LEAVE_PENALTY_WEIGHT)
    return score


@dataclass(frozen=True)
class RecordMetrics:
    record: AttendanceRecord
    duration: Optional[timedelta]
    is_late: bool
    is_early_leave: Optional[bool]
    is_full_day: bool
    status_label: str

    @classmethod
    def of(cls, record: AttendanceRecord) -> "RecordMetrics":
        return cls(
            record=record,
            duration=working_duration(record),
            is_late=is_late(record),
            is_early_leave=is_early_leave(record),
            is_full_day=is_full_day(record),
            status_label=working_hours_status(record),
        )

    def to_ui(self) -> dict:
        r = self.record
        return {
            "attendance_id": r.attendance_id,
            "date": r.work_date.strftime("%d/%m/%Y"),
            "check_in": format_hhmm(r.check_in_time),
            "check_out": format_hhmm(r.check_out_time),
            "working_hours": format_duration(self.duration),
            "status": "Hoàn thành" if r.check_out_time else "Đang làm việc",
            "css_class": "bg-success" if r.check_out_time else "bg-primary",
            "working_hours_status": self.status_label,
        }


@dataclass(frozen=True)
class AttendanceReport:
    """Thống kê chấm công của một nhân viên trong một khoảng ngày."""

    user_id: int
    from_date: date
    to_date: date
    records: list[RecordMetrics] = field(default_factory=list)
    employee_name: str = ""
    department: str = ""

    @property
    def total_present_days(self) -> int:
        return len(self.records)

    @property
    def total_working_days(self) -> int:
        return sum(1 for m in self.records if m.duration is not None)

    @property
    def total_working_hours(self) -> timedelta:
        return sum((m.duration for m in self.records if m.duration is not None), timedelta())

    @property
    def average_working_hours(self) -> float:
        if self.total_working_days == 0:
            return 0.0
        return self.total_working_hours.total_seconds() / 3600 / self.total_working_days

    @property
    def late_count(self) -> int:
        return sum(1 for m in self.records if m.is_late)

    @property
    def early_leave_count(self) -> int:
        return sum(1 for m in self.records if m.is_early_leave)

    @property
    def full_day_count(self) -> int:
        return sum(1 for m in self.records if m.is_full_day)

    @property
    def attendance_score(self) -> float:
        return attendance_score(
            present_days=self.total_present_days,
            late_count=self.late_count,
            early_leave_count=self.early_leave_count,
        )


def build_report(
    records: Iterable[AttendanceRecord],
    *,
    user_id: int,
    from_date: date,
    to_date: date,
    employee_name: str = "",
    department: str = "",
) -> AttendanceReport:
    """Aggregate one employee's records whose check-in date lies in [from_date, to_date]."""
    selected = [
        r for r in records if r.user_id == user_id and from_date <= r.work_date <= to_date
    ]
    selected.sort(key=lambda r: r.check_in_time, reverse=True)
    return AttendanceReport(
        user_id=user_id,
        from_date=from_date,
        to_date=to_date,
        records=[RecordMetrics.of(r) for r in selected],
        employee_name=employee_name,
        department=department,
    )
