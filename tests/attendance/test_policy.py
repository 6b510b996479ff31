from datetime import date, time, timedelta

from src.attendance_engine.attendance_engine.attendance import policy


def test_checkin_window_is_half_open():
    assert policy.is_within_checkin_window(time(5, 0))
    assert policy.is_within_checkin_window(time(11, 59, 59))
    assert not policy.is_within_checkin_window(time(4, 59, 59))
    assert not policy.is_within_checkin_window(time(12, 0))


def test_late_only_strictly_after_nine():
    assert not policy.is_late_checkin(time(8, 59))
    assert not policy.is_late_checkin(time(9, 0))
    assert policy.is_late_checkin(time(9, 0, 1))


def test_early_checkout_before_half_past_five():
    assert policy.is_early_checkout(time(17, 29))
    assert not policy.is_early_checkout(time(17, 30))
    assert not policy.is_early_checkout(time(19, 0))


def test_manual_clock_ranges():
    assert policy.is_valid_manual_checkin(time(4, 0))
    assert not policy.is_valid_manual_checkin(time(3, 59))
    assert policy.is_valid_manual_checkin(time(23, 59))

    assert policy.is_valid_manual_checkout(time(6, 0))
    assert not policy.is_valid_manual_checkout(time(5, 59))


def test_duration_bounds_are_inclusive():
    assert policy.is_duration_within_bounds(timedelta(minutes=30))
    assert policy.is_duration_within_bounds(timedelta(hours=16))
    assert policy.is_duration_too_short(timedelta(minutes=29))
    assert policy.is_duration_too_long(timedelta(hours=16, minutes=1))


def test_full_day_from_eight_hours():
    assert policy.is_full_day(timedelta(hours=8))
    assert not policy.is_full_day(timedelta(hours=7, minutes=59))


def test_edit_horizon_both_directions():
    today = date(2025, 6, 15)
    assert policy.is_within_edit_horizon(today - timedelta(days=30), today)
    assert policy.is_within_edit_horizon(today + timedelta(days=30), today)
    assert not policy.is_within_edit_horizon(today - timedelta(days=31), today)
    assert not policy.is_within_edit_horizon(today + timedelta(days=31), today)


def test_delete_horizon_by_age():
    today = date(2025, 6, 15)
    assert policy.is_within_delete_horizon(today - timedelta(days=7), today)
    assert not policy.is_within_delete_horizon(today - timedelta(days=8), today)
    # future-dated records are not too old
    assert policy.is_within_delete_horizon(today + timedelta(days=2), today)


def test_backfill_horizon_never_after_today():
    today = date(2025, 6, 15)
    assert policy.is_within_backfill_horizon(today, today)
    assert policy.is_within_backfill_horizon(today - timedelta(days=30), today)
    assert not policy.is_within_backfill_horizon(today - timedelta(days=31), today)
    assert not policy.is_within_backfill_horizon(today + timedelta(days=1), today)


def test_day_arithmetic_uses_calendar_dates():
    # leap year
    assert policy.is_within_backfill_horizon(date(2024, 2, 1), date(2024, 3, 2))
    assert not policy.is_within_backfill_horizon(date(2024, 1, 31), date(2024, 3, 2))
