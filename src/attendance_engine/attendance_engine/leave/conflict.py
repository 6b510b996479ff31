from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..core.enums import LeaveStatus
from .model import LeaveRequest


def ranges_overlap(a: date, b: date, c: date, d: date) -> bool:
    """Closed intervals [a, b] and [c, d] share at least one day."""
    return a <= d and c <= b


def find_conflicts(
    employee_id: int,
    start: date,
    end: date,
    existing: Iterable[LeaveRequest],
    *,
    exclude_request_id: Optional[int] = None,
) -> list[LeaveRequest]:
    return [
        r
        for r in existing
        if r.user_id == employee_id
        and r.status == LeaveStatus.APPROVED
        and r.request_id != exclude_request_id
        and ranges_overlap(start, end, r.start_date, r.end_date)
    ]


def has_conflict(
    employee_id: int,
    start: date,
    end: date,
    existing: Iterable[LeaveRequest],
    *,
    exclude_request_id: Optional[int] = None,
) -> bool:
    """True iff an approved leave of the same employee overlaps [start, end].

    Pending, rejected and cancelled requests never block.
    """
    return bool(find_conflicts(employee_id, start, end, existing, exclude_request_id=exclude_request_id))
