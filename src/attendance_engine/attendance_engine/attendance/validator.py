from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import days_between, format_duration
from ..common.validators import require_reason
from ..core.constants import BACKFILL_HORIZON_DAYS, CHECKIN_WINDOW_START, DELETE_HORIZON_DAYS, EDIT_HORIZON_DAYS
from ..core.enums import FailureKind
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Employee
from . import policy
from .model import (
    AttendanceDeletion,
    AttendanceRecord,
    AttendanceUpdate,
    CheckInOutcome,
    CheckOutOutcome,
    NewAttendance,
)


def _has_record_on(existing: Iterable[AttendanceRecord], user_id: int, day: date) -> bool:
    return any(r.user_id == user_id and r.work_date == day for r in existing)


class AttendanceValidator:
    """Decides whether an attendance action is legal.

    Every method is a pure function of its arguments: existing records are
    supplied by the caller and ``now`` is the single reference clock for the
    whole operation. On success a mutation is returned; on failure a
    ``DomainError`` carrying a ``FailureKind`` is raised.
    """

    def check_in(
        self,
        employee_id: int,
        timestamp: datetime,
        *,
        existing: Iterable[AttendanceRecord],
        now: datetime,
    ) -> CheckInOutcome:
        if _has_record_on(existing, employee_id, timestamp.date()):
            raise ValidationError("Bạn đã chấm công vào hôm nay rồi.", kind=FailureKind.DUPLICATE_CHECK_IN)

        # Window is evaluated at submission time; lateness uses the stored timestamp.
        submitted = now.time()
        if not policy.is_within_checkin_window(submitted):
            if submitted < CHECKIN_WINDOW_START:
                message = "Chấm công quá sớm. Vui lòng chấm công sau 5:00 sáng."
            else:
                message = "Chấm công quá muộn. Vui lòng liên hệ quản lý để được hỗ trợ."
            raise ValidationError(message, kind=FailureKind.OUT_OF_WINDOW)

        is_late = policy.is_late_checkin(timestamp.time())
        if is_late:
            message = "Chấm công thành công. Lưu ý: Bạn đã chấm công muộn."
        else:
            message = "Chấm công thành công. Chúc bạn một ngày làm việc hiệu quả!"

        return CheckInOutcome(
            entry=NewAttendance(user_id=employee_id, check_in_time=timestamp),
            is_late=is_late,
            message=message,
        )

    def check_out(self, record: Optional[AttendanceRecord], timestamp: datetime) -> CheckOutOutcome:
        if record is None or not record.is_open:
            raise NotFoundError(
                "Không tìm thấy bản ghi chấm công hoặc bạn đã chấm công ra rồi.",
                kind=FailureKind.RECORD_NOT_FOUND,
            )
        if timestamp <= record.check_in_time:
            raise ValidationError("Thời gian chấm công ra không hợp lệ.", kind=FailureKind.INVALID_ORDER)

        duration = timestamp - record.check_in_time
        is_early = policy.is_early_checkout(timestamp.time())
        worked = format_duration(duration)
        if is_early:
            message = f"Chấm công ra thành công. Lưu ý: Bạn đã ra sớm. Thời gian làm việc: {worked}"
        else:
            message = f"Chấm công ra thành công. Thời gian làm việc: {worked}. Cảm ơn bạn đã làm việc chăm chỉ!"

        return CheckOutOutcome(
            update=AttendanceUpdate(
                attendance_id=record.attendance_id,
                check_in_time=record.check_in_time,
                check_out_time=timestamp,
            ),
            duration=duration,
            is_early_leave=is_early,
            message=message,
        )

    def manual_entry(
        self,
        employee: Optional[Employee],
        check_in: datetime,
        check_out: Optional[datetime],
        reason: Optional[str],
        *,
        existing: Iterable[AttendanceRecord],
        now: datetime,
    ) -> NewAttendance:
        if employee is None:
            raise NotFoundError("Không tìm thấy người dùng.", kind=FailureKind.UNKNOWN_EMPLOYEE)

        reason = require_reason(reason, "Lý do thêm chấm công thủ công")

        if _has_record_on(existing, employee.user_id, check_in.date()):
            raise ValidationError(
                f"Đã có bản ghi chấm công cho ngày {check_in:%d/%m/%Y}. "
                "Vui lòng sử dụng chức năng cập nhật thay vì thêm mới.",
                kind=FailureKind.DUPLICATE_CHECK_IN,
            )

        self._check_checkin_clock(check_in)
        if check_out is not None:
            if check_out <= check_in:
                raise ValidationError(
                    "Thời gian chấm công ra phải sau thời gian chấm công vào.",
                    kind=FailureKind.INVALID_ORDER,
                )
            self._check_checkout_clock(check_out)
            self._check_duration(check_out - check_in)

        today = now.date()
        if not policy.is_within_backfill_horizon(check_in.date(), today):
            if check_in.date() > today:
                message = "Không thể thêm chấm công cho ngày trong tương lai."
            else:
                message = f"Không thể thêm chấm công cho ngày quá {BACKFILL_HORIZON_DAYS} ngày trước."
            raise ValidationError(message, kind=FailureKind.DATE_OUT_OF_HORIZON)

        return NewAttendance(
            user_id=employee.user_id,
            check_in_time=check_in,
            check_out_time=check_out,
            note=reason,
        )

    def edit(
        self,
        record: Optional[AttendanceRecord],
        *,
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
        clear_check_out: bool = False,
        now: datetime,
    ) -> AttendanceUpdate:
        """Validate an administrative edit.

        ``None`` for ``check_in``/``check_out`` keeps the stored value;
        ``clear_check_out=True`` reopens the record.
        """
        if record is None:
            raise NotFoundError("Không tìm thấy bản ghi chấm công.", kind=FailureKind.RECORD_NOT_FOUND)

        new_check_in = check_in or record.check_in_time
        if clear_check_out:
            new_check_out = None
        else:
            new_check_out = check_out or record.check_out_time

        if new_check_out is not None and new_check_out <= new_check_in:
            raise ValidationError(
                "Thời gian chấm công ra phải sau thời gian chấm công vào.",
                kind=FailureKind.INVALID_ORDER,
            )

        # Both the stored day and the day it is moved to must lie inside the horizon.
        if not (
            policy.is_within_edit_horizon(record.work_date, now.date())
            and policy.is_within_edit_horizon(new_check_in.date(), now.date())
        ):
            raise ValidationError(
                f"Không thể chỉnh sửa chấm công quá {EDIT_HORIZON_DAYS} ngày.",
                kind=FailureKind.DATE_OUT_OF_HORIZON,
            )

        self._check_checkin_clock(new_check_in)
        if new_check_out is not None:
            self._check_checkout_clock(new_check_out)
            self._check_duration(new_check_out - new_check_in)

        return AttendanceUpdate(
            attendance_id=record.attendance_id,
            check_in_time=new_check_in,
            check_out_time=new_check_out,
        )

    def delete(self, record: Optional[AttendanceRecord], *, now: datetime) -> AttendanceDeletion:
        if record is None:
            raise NotFoundError("Không tìm thấy bản ghi chấm công.", kind=FailureKind.RECORD_NOT_FOUND)

        if not policy.is_within_delete_horizon(record.work_date, now.date()):
            raise ValidationError(
                f"Không thể xóa bản ghi chấm công quá {DELETE_HORIZON_DAYS} ngày tuổi "
                f"({days_between(record.work_date, now.date())} ngày). Vui lòng liên hệ quản trị viên.",
                kind=FailureKind.TOO_OLD,
            )
        return AttendanceDeletion(attendance_id=record.attendance_id)

    @staticmethod
    def _check_checkin_clock(check_in: datetime) -> None:
        if not policy.is_valid_manual_checkin(check_in.time()):
            raise ValidationError(
                "Thời gian chấm công vào không hợp lệ (4:00 - 23:59).",
                kind=FailureKind.OUT_OF_WINDOW,
            )

    @staticmethod
    def _check_checkout_clock(check_out: datetime) -> None:
        if not policy.is_valid_manual_checkout(check_out.time()):
            raise ValidationError(
                "Thời gian chấm công ra không hợp lệ (6:00 - 23:59).",
                kind=FailureKind.OUT_OF_WINDOW,
            )

    @staticmethod
    def _check_duration(duration: timedelta) -> None:
        if policy.is_duration_too_long(duration):
            raise ValidationError(
                "Thời gian làm việc không được vượt quá 16 giờ.",
                kind=FailureKind.DURATION_OUT_OF_BOUNDS,
            )
        if policy.is_duration_too_short(duration):
            raise ValidationError(
                "Thời gian làm việc tối thiểu là 30 phút.",
                kind=FailureKind.DURATION_OUT_OF_BOUNDS,
            )
