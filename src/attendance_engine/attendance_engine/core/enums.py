from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class LeaveStatus(str, Enum):
    """Trạng thái đơn nghỉ phép."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"

    @property
    def label(self) -> str:
        return {
            LeaveStatus.PENDING: "Chờ duyệt",
            LeaveStatus.APPROVED: "Đã duyệt",
            LeaveStatus.REJECTED: "Đã từ chối",
            LeaveStatus.CANCELLED: "Đã hủy",
        }[self]

    @property
    def badge_class(self) -> str:
        return {
            LeaveStatus.PENDING: "bg-warning text-dark",
            LeaveStatus.APPROVED: "bg-success",
            LeaveStatus.REJECTED: "bg-danger",
            LeaveStatus.CANCELLED: "bg-secondary",
        }[self]


class LeaveType(str, Enum):
    """Loại nghỉ phép (quyết định hạn mức)."""

    ANNUAL = "Annual"
    SICK = "Sick"
    PERSONAL = "Personal"
    MATERNITY = "Maternity"
    EMERGENCY = "Emergency"

    @property
    def label(self) -> str:
        return {
            LeaveType.ANNUAL: "Nghỉ phép năm",
            LeaveType.SICK: "Nghỉ ốm",
            LeaveType.PERSONAL: "Nghỉ cá nhân",
            LeaveType.MATERNITY: "Nghỉ thai sản",
            LeaveType.EMERGENCY: "Nghỉ khẩn cấp",
        }[self]


class FailureKind(str, Enum):
    """Closed set of rule violations surfaced to callers."""

    DUPLICATE_CHECK_IN = "DuplicateCheckIn"
    OUT_OF_WINDOW = "OutOfWindow"
    INVALID_ORDER = "InvalidOrder"
    MISSING_REASON = "MissingReason"
    DURATION_OUT_OF_BOUNDS = "DurationOutOfBounds"
    DATE_OUT_OF_HORIZON = "DateOutOfHorizon"
    TOO_OLD = "TooOld"
    RECORD_NOT_FOUND = "RecordNotFound"
    INVALID_RANGE = "InvalidRange"
    RANGE_TOO_LONG = "RangeTooLong"
    PAST_DATE = "PastDate"
    UNKNOWN_EMPLOYEE = "UnknownEmployee"
    CONFLICT = "Conflict"
    QUOTA_EXCEEDED = "QuotaExceeded"
    NOT_OWNER = "NotOwner"
    NOT_PENDING = "NotPending"
    ALREADY_CANCELLED = "AlreadyCancelled"
    ALREADY_STARTED = "AlreadyStarted"
    APPROVED_AND_STARTED = "ApprovedAndStarted"
    NOT_FOUND = "NotFound"
    FORBIDDEN = "Forbidden"
    PERSISTENCE_FAILED = "PersistenceFailed"
