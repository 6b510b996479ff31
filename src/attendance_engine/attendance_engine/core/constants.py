"""Policy constants for attendance and leave rules.

Note: These are fixed business rules, not settings. Keep them here to avoid
magic numbers spread across validators and calculators.
"""

from datetime import time, timedelta

# Self check-in window [start, end)
CHECKIN_WINDOW_START = time(5, 0)
CHECKIN_WINDOW_END = time(12, 0)

LATE_THRESHOLD = time(9, 0)
EARLY_LEAVE_THRESHOLD = time(17, 30)

# Manual entry / admin edit clock ranges (inclusive)
MANUAL_CHECKIN_EARLIEST = time(4, 0)
MANUAL_CHECKOUT_EARLIEST = time(6, 0)
MANUAL_LATEST = time(23, 59, 59)

MIN_WORKED_DURATION = timedelta(minutes=30)
MAX_WORKED_DURATION = timedelta(hours=16)
FULL_DAY_DURATION = timedelta(hours=8)
SHORT_DAY_DURATION = timedelta(hours=6)

EDIT_HORIZON_DAYS = 30
DELETE_HORIZON_DAYS = 7
BACKFILL_HORIZON_DAYS = 30

REASON_MAX_LENGTH = 500
MAX_LEAVE_DAYS = 30

LATE_PENALTY_WEIGHT = 5
EARLY_LEAVE_PENALTY_WEIGHT = 3

RECENT_REQUESTS_LIMIT = 5
DEFAULT_UPCOMING_DAYS = 7
DEFAULT_PAGE_SIZE = 20
