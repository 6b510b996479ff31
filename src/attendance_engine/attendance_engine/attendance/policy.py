"""Time window policy: pure predicates over a clock time, a duration or a date.

Nothing here reads the system clock; "today" is always passed in.
"""

from __future__ import annotations

from datetime import date, time, timedelta

from ..common.datetime_utils import days_between
from ..core.constants import (
    BACKFILL_HORIZON_DAYS,
    CHECKIN_WINDOW_END,
    CHECKIN_WINDOW_START,
    DELETE_HORIZON_DAYS,
    EARLY_LEAVE_THRESHOLD,
    EDIT_HORIZON_DAYS,
    FULL_DAY_DURATION,
    LATE_THRESHOLD,
    MANUAL_CHECKIN_EARLIEST,
    MANUAL_CHECKOUT_EARLIEST,
    MANUAL_LATEST,
    MAX_WORKED_DURATION,
    MIN_WORKED_DURATION,
)


def is_within_checkin_window(clock: time) -> bool:
    return CHECKIN_WINDOW_START <= clock < CHECKIN_WINDOW_END


def is_late_checkin(clock: time) -> bool:
    return clock > LATE_THRESHOLD


def is_early_checkout(clock: time) -> bool:
    return clock < EARLY_LEAVE_THRESHOLD


def is_valid_manual_checkin(clock: time) -> bool:
    return MANUAL_CHECKIN_EARLIEST <= clock <= MANUAL_LATEST


def is_valid_manual_checkout(clock: time) -> bool:
    return MANUAL_CHECKOUT_EARLIEST <= clock <= MANUAL_LATEST


def is_duration_too_long(duration: timedelta) -> bool:
    return duration > MAX_WORKED_DURATION


def is_duration_too_short(duration: timedelta) -> bool:
    return duration < MIN_WORKED_DURATION


def is_duration_within_bounds(duration: timedelta) -> bool:
    return not is_duration_too_long(duration) and not is_duration_too_short(duration)


def is_full_day(duration: timedelta) -> bool:
    return duration >= FULL_DAY_DURATION


def is_within_edit_horizon(target: date, today: date) -> bool:
    """Admin edits are allowed up to 30 days either side of today."""
    return abs(days_between(today, target)) <= EDIT_HORIZON_DAYS


def is_within_delete_horizon(target: date, today: date) -> bool:
    return days_between(target, today) <= DELETE_HORIZON_DAYS


def is_within_backfill_horizon(target: date, today: date) -> bool:
    """Manual back-entry: at most 30 days in the past and never after today."""
    age = days_between(target, today)
    return 0 <= age <= BACKFILL_HORIZON_DAYS
