from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.attendance_engine.attendance_engine.attendance.model import AttendanceRecord
from src.attendance_engine.attendance_engine.attendance.validator import AttendanceValidator
from src.attendance_engine.attendance_engine.core.enums import FailureKind, Role
from src.attendance_engine.attendance_engine.core.exceptions import DomainError, NotFoundError, ValidationError
from src.attendance_engine.attendance_engine.users.model import Employee

NOW = datetime(2025, 6, 16, 8, 30)
EMPLOYEE = Employee(user_id=7, full_name="Trần Thị B", username="tranthib", role=Role.EMPLOYEE, department="HR")


def _record(check_in: datetime, check_out: datetime | None = None, *, attendance_id: int = 1, user_id: int = 7):
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user_id,
        check_in_time=check_in,
        check_out_time=check_out,
    )


def test_check_in_then_check_out_full_day():
    validator = AttendanceValidator()

    outcome = validator.check_in(7, NOW, existing=[], now=NOW)
    assert outcome.is_late is False
    assert outcome.entry.user_id == 7
    assert outcome.entry.check_in_time == NOW

    record = _record(outcome.entry.check_in_time)
    out = validator.check_out(record, datetime(2025, 6, 16, 17, 0))

    assert out.duration == timedelta(hours=8, minutes=30)
    assert out.is_early_leave is True
    assert out.update.check_out_time == datetime(2025, 6, 16, 17, 0)
    assert "8h 30m" in out.message


def test_check_in_duplicate_same_day():
    validator = AttendanceValidator()
    existing = [_record(datetime(2025, 6, 16, 7, 55))]

    with pytest.raises(ValidationError) as e:
        validator.check_in(7, NOW, existing=existing, now=NOW)

    assert e.value.kind == FailureKind.DUPLICATE_CHECK_IN


def test_check_in_other_employee_or_day_is_not_duplicate():
    validator = AttendanceValidator()
    existing = [
        _record(datetime(2025, 6, 16, 7, 55), user_id=8),
        _record(datetime(2025, 6, 15, 8, 0), datetime(2025, 6, 15, 17, 45)),
    ]

    outcome = validator.check_in(7, NOW, existing=existing, now=NOW)

    assert outcome.entry.check_in_time == NOW


@pytest.mark.parametrize("clock", [(4, 59), (12, 0), (13, 15)])
def test_check_in_outside_window(clock):
    now = NOW.replace(hour=clock[0], minute=clock[1])

    with pytest.raises(ValidationError) as e:
        AttendanceValidator().check_in(7, now, existing=[], now=now)

    assert e.value.kind == FailureKind.OUT_OF_WINDOW


def test_check_in_late_flag_is_strict():
    validator = AttendanceValidator()
    at_nine = NOW.replace(hour=9, minute=0)
    after_nine = NOW.replace(hour=9, minute=1)

    assert validator.check_in(7, at_nine, existing=[], now=at_nine).is_late is False
    late = validator.check_in(7, after_nine, existing=[], now=after_nine)
    assert late.is_late is True
    assert "muộn" in late.message


def test_window_uses_now_and_lateness_uses_timestamp():
    validator = AttendanceValidator()

    # submitted inside the window, stored timestamp after it
    outcome = validator.check_in(7, NOW.replace(hour=12, minute=30), existing=[], now=NOW.replace(hour=11))
    assert outcome.is_late is True

    # submitted after the window closed, even with an early timestamp
    with pytest.raises(ValidationError) as e:
        validator.check_in(7, NOW.replace(hour=8), existing=[], now=NOW.replace(hour=12, minute=30))
    assert e.value.kind == FailureKind.OUT_OF_WINDOW


def test_check_out_without_open_record():
    validator = AttendanceValidator()

    with pytest.raises(NotFoundError) as e:
        validator.check_out(None, NOW)
    assert e.value.kind == FailureKind.RECORD_NOT_FOUND

    closed = _record(datetime(2025, 6, 16, 8, 0), datetime(2025, 6, 16, 17, 30))
    with pytest.raises(NotFoundError) as e:
        validator.check_out(closed, NOW.replace(hour=18))
    assert e.value.kind == FailureKind.RECORD_NOT_FOUND


def test_check_out_not_after_check_in():
    record = _record(datetime(2025, 6, 16, 8, 30))

    with pytest.raises(ValidationError) as e:
        AttendanceValidator().check_out(record, datetime(2025, 6, 16, 8, 30))

    assert e.value.kind == FailureKind.INVALID_ORDER


def test_manual_entry_happy_path_keeps_reason_as_note():
    entry = AttendanceValidator().manual_entry(
        EMPLOYEE,
        datetime(2025, 6, 10, 8, 0),
        datetime(2025, 6, 10, 17, 30),
        "  Quên chấm công  ",
        existing=[],
        now=NOW,
    )

    assert entry.user_id == 7
    assert entry.check_out_time == datetime(2025, 6, 10, 17, 30)
    assert entry.note == "Quên chấm công"


def test_manual_entry_without_check_out_is_allowed():
    entry = AttendanceValidator().manual_entry(
        EMPLOYEE, datetime(2025, 6, 10, 8, 0), None, "Quên chấm công", existing=[], now=NOW
    )

    assert entry.check_out_time is None


@pytest.mark.parametrize(
    "employee, check_in, check_out, reason, kind",
    [
        (None, datetime(2025, 6, 10, 8, 0), None, "ok", FailureKind.UNKNOWN_EMPLOYEE),
        (EMPLOYEE, datetime(2025, 6, 10, 8, 0), None, "   ", FailureKind.MISSING_REASON),
        (EMPLOYEE, datetime(2025, 6, 10, 8, 0), None, "x" * 501, FailureKind.MISSING_REASON),
        (EMPLOYEE, datetime(2025, 6, 10, 3, 59), None, "ok", FailureKind.OUT_OF_WINDOW),
        (EMPLOYEE, datetime(2025, 6, 10, 9, 0), datetime(2025, 6, 10, 8, 0), "ok", FailureKind.INVALID_ORDER),
        (EMPLOYEE, datetime(2025, 6, 10, 4, 10), datetime(2025, 6, 10, 5, 30), "ok", FailureKind.OUT_OF_WINDOW),
        (EMPLOYEE, datetime(2025, 6, 10, 8, 0), datetime(2025, 6, 10, 8, 20), "ok", FailureKind.DURATION_OUT_OF_BOUNDS),
        (EMPLOYEE, datetime(2025, 6, 10, 5, 0), datetime(2025, 6, 10, 22, 30), "ok", FailureKind.DURATION_OUT_OF_BOUNDS),
        (EMPLOYEE, datetime(2025, 6, 17, 8, 0), None, "ok", FailureKind.DATE_OUT_OF_HORIZON),
        (EMPLOYEE, datetime(2025, 5, 16, 8, 0), None, "ok", FailureKind.DATE_OUT_OF_HORIZON),
    ],
)
def test_manual_entry_rejections(employee, check_in, check_out, reason, kind):
    with pytest.raises(DomainError) as e:
        AttendanceValidator().manual_entry(employee, check_in, check_out, reason, existing=[], now=NOW)

    assert e.value.kind == kind


def test_manual_entry_oldest_allowed_day():
    entry = AttendanceValidator().manual_entry(
        EMPLOYEE, datetime(2025, 5, 17, 8, 0), None, "Bổ sung", existing=[], now=NOW
    )

    assert entry.check_in_time.date() == (NOW - timedelta(days=30)).date()


def test_manual_entry_duplicate_day():
    existing = [_record(datetime(2025, 6, 10, 8, 5))]

    with pytest.raises(ValidationError) as e:
        AttendanceValidator().manual_entry(
            EMPLOYEE, datetime(2025, 6, 10, 8, 0), None, "ok", existing=existing, now=NOW
        )

    assert e.value.kind == FailureKind.DUPLICATE_CHECK_IN


def test_edit_keeps_unspecified_fields():
    record = _record(datetime(2025, 6, 12, 8, 0), datetime(2025, 6, 12, 17, 0), attendance_id=4)

    update = AttendanceValidator().edit(record, check_out=datetime(2025, 6, 12, 18, 0), now=NOW)

    assert update.attendance_id == 4
    assert update.check_in_time == datetime(2025, 6, 12, 8, 0)
    assert update.check_out_time == datetime(2025, 6, 12, 18, 0)


def test_edit_can_reopen_record():
    record = _record(datetime(2025, 6, 12, 8, 0), datetime(2025, 6, 12, 17, 0))

    update = AttendanceValidator().edit(record, clear_check_out=True, now=NOW)

    assert update.check_out_time is None


def test_edit_validates_resulting_order():
    record = _record(datetime(2025, 6, 12, 8, 0), datetime(2025, 6, 12, 17, 0))

    with pytest.raises(ValidationError) as e:
        AttendanceValidator().edit(record, check_in=datetime(2025, 6, 12, 17, 30), now=NOW)

    assert e.value.kind == FailureKind.INVALID_ORDER


def test_edit_outside_horizon():
    record = _record(datetime(2025, 5, 1, 8, 0), datetime(2025, 5, 1, 17, 0))

    with pytest.raises(ValidationError) as e:
        AttendanceValidator().edit(record, check_out=datetime(2025, 5, 1, 18, 0), now=NOW)

    assert e.value.kind == FailureKind.DATE_OUT_OF_HORIZON


def test_edit_duration_too_long():
    record = _record(datetime(2025, 6, 12, 5, 0), datetime(2025, 6, 12, 17, 0))

    with pytest.raises(ValidationError) as e:
        AttendanceValidator().edit(record, check_out=datetime(2025, 6, 12, 21, 30), now=NOW)

    assert e.value.kind == FailureKind.DURATION_OUT_OF_BOUNDS


@pytest.mark.parametrize(
    "stored, check_in, check_out, kind",
    [
        # old record moved to today
        (
            (datetime(2025, 4, 1, 8, 0), datetime(2025, 4, 1, 17, 0)),
            datetime(2025, 6, 16, 8, 0),
            datetime(2025, 6, 16, 17, 0),
            FailureKind.DATE_OUT_OF_HORIZON,
        ),
        # recent record moved far into the past
        (
            (datetime(2025, 6, 12, 8, 0), datetime(2025, 6, 12, 17, 0)),
            datetime(2025, 5, 1, 8, 0),
            datetime(2025, 5, 1, 17, 0),
            FailureKind.DATE_OUT_OF_HORIZON,
        ),
        (
            (datetime(2025, 6, 12, 8, 0), datetime(2025, 6, 12, 17, 0)),
            datetime(2025, 6, 12, 3, 30),
            None,
            FailureKind.OUT_OF_WINDOW,
        ),
        (
            (datetime(2025, 6, 12, 8, 0), datetime(2025, 6, 12, 17, 0)),
            datetime(2025, 6, 12, 4, 30),
            datetime(2025, 6, 12, 5, 30),
            FailureKind.OUT_OF_WINDOW,
        ),
        (
            (datetime(2025, 6, 12, 8, 0), datetime(2025, 6, 12, 17, 0)),
            None,
            datetime(2025, 6, 12, 8, 20),
            FailureKind.DURATION_OUT_OF_BOUNDS,
        ),
    ],
)
def test_edit_rejections(stored, check_in, check_out, kind):
    record = _record(*stored)

    with pytest.raises(ValidationError) as e:
        AttendanceValidator().edit(record, check_in=check_in, check_out=check_out, now=NOW)

    assert e.value.kind == kind


def test_edit_missing_record():
    with pytest.raises(NotFoundError) as e:
        AttendanceValidator().edit(None, now=NOW)

    assert e.value.kind == FailureKind.RECORD_NOT_FOUND


def test_delete_too_old_after_ten_days():
    record = _record(NOW - timedelta(days=10))

    with pytest.raises(ValidationError) as e:
        AttendanceValidator().delete(record, now=NOW)

    assert e.value.kind == FailureKind.TOO_OLD
    assert "10 ngày" in e.value.message


def test_delete_missing_record():
    with pytest.raises(NotFoundError) as e:
        AttendanceValidator().delete(None, now=NOW)

    assert e.value.kind == FailureKind.RECORD_NOT_FOUND


def test_delete_within_seven_days():
    record = _record(NOW - timedelta(days=7), attendance_id=9)

    deletion = AttendanceValidator().delete(record, now=NOW)

    assert deletion.attendance_id == 9
