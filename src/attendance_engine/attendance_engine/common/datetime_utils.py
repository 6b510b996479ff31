from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional


def days_inclusive(start: date, end: date) -> int:
    """Number of calendar days in the closed range [start, end]."""
    return (end.toordinal() - start.toordinal()) + 1


def days_between(earlier: date, later: date) -> int:
    return later.toordinal() - earlier.toordinal()


def format_duration(value: Optional[timedelta]) -> str:
    """Render a worked duration as e.g. ``8h 30m``."""
    if value is None:
        return "--:--"
    minutes = int(value.total_seconds() // 60)
    return f"{minutes // 60}h {minutes % 60}m"


def format_hhmm(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "--:--"
