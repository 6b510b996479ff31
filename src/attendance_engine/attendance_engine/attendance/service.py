from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.enums import FailureKind, Role
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..users.repository import EmployeeRepository
from . import policy
from .metrics import AttendanceReport, RecordMetrics, build_report
from .model import AttendanceFilter, AttendanceRecord, AttendanceRow, CheckInOutcome, CheckOutOutcome
from .repository import AttendanceRepository
from .validator import AttendanceValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodayAttendanceStatus:
    has_checked_in: bool = False
    has_checked_out: bool = False
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    attendance_id: Optional[int] = None
    current_working_time: Optional[timedelta] = None

    @property
    def can_check_in(self) -> bool:
        return not self.has_checked_in

    @property
    def can_check_out(self) -> bool:
        return self.has_checked_in and not self.has_checked_out

    @property
    def status_message(self) -> str:
        if not self.has_checked_in:
            return "Chưa chấm công"
        if not self.has_checked_out:
            return "Đang làm việc"
        return "Đã hoàn thành"

    @property
    def css_class(self) -> str:
        if not self.has_checked_in:
            return "bg-warning text-dark"
        if not self.has_checked_out:
            return "bg-primary"
        return "bg-success"


def _require_role(current_role: Role, allowed: set[Role]) -> None:
    if current_role not in allowed:
        raise AuthorizationError("Bạn không có quyền", kind=FailureKind.FORBIDDEN)


class AttendanceService:
    """Caller side of the attendance rules: fetch snapshots, validate, persist."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        validator: AttendanceValidator | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._validator = validator or AttendanceValidator()

    def _existing_on(self, user_id: int, day: date) -> list[AttendanceRecord]:
        rec = self._attendance.get_for_user_and_date(user_id, day)
        return [rec] if rec else []

    def check_in(self, user_id: int, *, now: datetime, timestamp: datetime | None = None) -> CheckInOutcome:
        """Self check-in. ``timestamp`` defaults to ``now`` (the value stored)."""
        timestamp = timestamp or now
        try:
            outcome = self._validator.check_in(
                user_id,
                timestamp,
                existing=self._existing_on(user_id, timestamp.date()),
                now=now,
            )
        except DomainError as exc:
            logger.info("Check-in rejected for user %s: %s", user_id, exc.kind.value)
            raise

        self._attendance.create(outcome.entry)
        logger.info("User %s checked in at %s (late=%s)", user_id, timestamp, outcome.is_late)
        return outcome

    def check_out(self, user_id: int, *, now: datetime, timestamp: datetime | None = None) -> CheckOutOutcome:
        timestamp = timestamp or now
        record = self._attendance.get_for_user_and_date(user_id, now.date())
        try:
            outcome = self._validator.check_out(record, timestamp)
        except DomainError as exc:
            logger.info("Check-out rejected for user %s: %s", user_id, exc.kind.value)
            raise

        if not self._attendance.update(outcome.update):
            raise ValidationError("Cập nhật chấm công thất bại", kind=FailureKind.PERSISTENCE_FAILED)
        logger.info("User %s checked out at %s, worked %s", user_id, timestamp, outcome.duration)
        return outcome

    def add_manual_attendance(
        self,
        *,
        current_role: Role,
        user_id: int,
        check_in: datetime,
        check_out: datetime | None,
        reason: str,
        now: datetime,
    ) -> int:
        _require_role(current_role, {Role.ADMIN, Role.MANAGER})

        employee = self._employees.get_by_id(int(user_id))
        entry = self._validator.manual_entry(
            employee,
            check_in,
            check_out,
            reason,
            existing=self._existing_on(int(user_id), check_in.date()),
            now=now,
        )
        attendance_id = self._attendance.create(entry)
        logger.info(
            "Manual attendance added for user %s on %s. CheckIn: %s, CheckOut: %s. Reason: %s",
            user_id, check_in.date(), check_in, check_out, entry.note,
        )
        return attendance_id

    def update_attendance(
        self,
        *,
        current_role: Role,
        attendance_id: int,
        check_in: datetime | None = None,
        check_out: datetime | None = None,
        clear_check_out: bool = False,
        now: datetime,
    ) -> None:
        _require_role(current_role, {Role.ADMIN})

        record = self._attendance.get_by_id(int(attendance_id))
        update = self._validator.edit(
            record,
            check_in=check_in,
            check_out=check_out,
            clear_check_out=clear_check_out,
            now=now,
        )
        if not self._attendance.update(update):
            raise ValidationError("Cập nhật bản ghi chấm công thất bại", kind=FailureKind.PERSISTENCE_FAILED)
        logger.info(
            "Attendance %s updated. CheckIn: %s -> %s, CheckOut: %s -> %s",
            attendance_id, record.check_in_time, update.check_in_time, record.check_out_time, update.check_out_time,
        )

    def delete_attendance(self, *, current_role: Role, attendance_id: int, now: datetime) -> None:
        _require_role(current_role, {Role.ADMIN})

        record = self._attendance.get_by_id(int(attendance_id))
        deletion = self._validator.delete(record, now=now)
        if not self._attendance.delete(deletion):
            raise ValidationError("Xóa bản ghi chấm công thất bại", kind=FailureKind.PERSISTENCE_FAILED)
        logger.warning(
            "Attendance record %s deleted for user %s. CheckIn was: %s",
            attendance_id, record.user_id, record.check_in_time,
        )

    def get_today_status(self, user_id: int, *, now: datetime) -> TodayAttendanceStatus:
        record = self._attendance.get_for_user_and_date(user_id, now.date())
        if not record:
            return TodayAttendanceStatus()
        return TodayAttendanceStatus(
            has_checked_in=True,
            has_checked_out=not record.is_open,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            attendance_id=record.attendance_id,
            current_working_time=(now - record.check_in_time) if record.is_open else None,
        )

    def get_history(self, user_id: int, *, start: date, end: date) -> list[RecordMetrics]:
        rows = self._attendance.list_for_user(user_id, start_date=start, end_date=end)
        return [RecordMetrics.of(r) for r in rows]

    def generate_user_report(self, user_id: int, *, start: date, end: date) -> AttendanceReport:
        employee = self._employees.get_by_id(int(user_id))
        records = self._attendance.list_for_user(user_id, start_date=start, end_date=end)
        return build_report(
            records,
            user_id=user_id,
            from_date=start,
            to_date=end,
            employee_name=employee.full_name if employee else "",
            department=(employee.department or "") if employee else "",
        )

    def generate_report(self, criteria: AttendanceFilter, *, today: date) -> AttendanceReport:
        """Report over a filtered row set; the date range defaults to the last month."""
        start = criteria.from_date or (today - timedelta(days=30))
        end = criteria.to_date or today
        rows = self._attendance.list_rows(criteria)
        employee_name, department = "", ""
        if criteria.user_id is not None:
            employee = self._employees.get_by_id(int(criteria.user_id))
            if employee:
                employee_name, department = employee.full_name, employee.department or ""
        records = [r.to_record() for r in rows if start <= r.check_in_time.date() <= end]
        return AttendanceReport(
            user_id=criteria.user_id or 0,
            from_date=start,
            to_date=end,
            records=[RecordMetrics.of(r) for r in sorted(records, key=lambda r: r.check_in_time, reverse=True)],
            employee_name=employee_name,
            department=department,
        )

    def list_attendance(self, criteria: AttendanceFilter) -> list[AttendanceRow]:
        return list(self._attendance.list_rows(criteria))

    def get_department_attendance(self, department: str, *, day: date | None = None) -> list[AttendanceRow]:
        criteria = AttendanceFilter(from_date=day, to_date=day, department=department, page_size=None)
        return list(self._attendance.list_rows(criteria))

    def get_late_check_ins(self, day: date) -> list[AttendanceRow]:
        rows = self._attendance.list_rows(AttendanceFilter(from_date=day, to_date=day, page_size=None))
        late = [r for r in rows if policy.is_late_checkin(r.check_in_time.time())]
        return sorted(late, key=lambda r: r.check_in_time, reverse=True)

    def get_early_check_outs(self, day: date) -> list[AttendanceRow]:
        rows = self._attendance.list_rows(AttendanceFilter(from_date=day, to_date=day, page_size=None))
        early = [
            r for r in rows
            if r.check_out_time is not None and policy.is_early_checkout(r.check_out_time.time())
        ]
        return sorted(early, key=lambda r: r.check_out_time)

    def count_active_users(self, day: date) -> int:
        rows = self._attendance.list_rows(AttendanceFilter(from_date=day, to_date=day, page_size=None))
        return len({r.user_id for r in rows})
