from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import days_inclusive
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Thực thể miền (domain): Đơn nghỉ phép."""

    request_id: int
    user_id: int
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    leave_type: LeaveType = LeaveType.ANNUAL
    created_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    admin_note: Optional[str] = None

    @property
    def total_days(self) -> int:
        return days_inclusive(self.start_date, self.end_date)

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    def to_ui(self) -> dict:
        return {
            "request_id": self.request_id,
            "user_id": self.user_id,
            "date_range": f"{self.start_date:%d/%m/%Y} - {self.end_date:%d/%m/%Y}",
            "total_days": self.total_days,
            "leave_type": self.leave_type.label,
            "reason": self.reason,
            "status": self.status.label,
            "css_class": self.status.badge_class,
            "can_edit": self.is_pending,
            "can_cancel": self.is_pending,
        }


@dataclass(frozen=True)
class LeaveRequestRow:
    """Read-model: đơn nghỉ phép kèm thông tin nhân viên."""

    request: LeaveRequest
    full_name: str
    username: str
    department: Optional[str]
    position: Optional[str] = None


@dataclass(frozen=True)
class NewLeaveRequest:
    user_id: int
    start_date: date
    end_date: date
    reason: str
    leave_type: LeaveType
    status: LeaveStatus = LeaveStatus.PENDING


@dataclass(frozen=True)
class LeaveUpdate:
    request_id: int
    start_date: date
    end_date: date
    reason: str


@dataclass(frozen=True)
class LeaveTransition:
    """Mutation: status change, plus whether the owner should be told about it."""

    request_id: int
    from_status: LeaveStatus
    to_status: LeaveStatus
    notify_owner: bool = False
    decided_by: Optional[int] = None
    admin_note: Optional[str] = None


@dataclass(frozen=True)
class LeaveDeletion:
    request_id: int


@dataclass(frozen=True)
class LeaveFilter:
    status: Optional[LeaveStatus] = None
    department: Optional[str] = None
    leave_type: Optional[LeaveType] = None
    user_id: Optional[int] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    page_number: int = 1
    page_size: Optional[int] = DEFAULT_PAGE_SIZE  # None: no paging

    @property
    def offset(self) -> int:
        return (max(self.page_number, 1) - 1) * (self.page_size or 0)
