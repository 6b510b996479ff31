from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import days_inclusive
from ..common.validators import require_reason
from ..core.constants import MAX_LEAVE_DAYS
from ..core.enums import FailureKind, LeaveStatus, LeaveType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.model import Employee
from .balance import LeaveBalanceCalculator
from .conflict import has_conflict
from .model import LeaveDeletion, LeaveRequest, LeaveTransition, LeaveUpdate, NewLeaveRequest

ALLOWED_TRANSITIONS: Mapping[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}),
    # Only while the leave has not started yet (guarded in cancel()).
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.CANCELLED: frozenset(),
}


def can_transition(current: LeaveStatus, target: LeaveStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def _require_request(request: Optional[LeaveRequest]) -> LeaveRequest:
    if request is None:
        raise NotFoundError("Không tìm thấy đơn nghỉ phép.", kind=FailureKind.NOT_FOUND)
    return request


def _require_pending(request: LeaveRequest, message: str) -> None:
    if request.status != LeaveStatus.PENDING:
        raise ValidationError(message, kind=FailureKind.NOT_PENDING)


def _require_owner(request: LeaveRequest, user_id: int, message: str) -> None:
    if request.user_id != user_id:
        raise AuthorizationError(message, kind=FailureKind.NOT_OWNER)


class LeaveRequestStateMachine:
    """Guards every legal move of a leave request.

    Pending is the only initial state. Cancelled is terminal; Approved and
    Rejected may still be cancelled by the owner, Approved only before it starts.
    Methods are pure: the caller supplies the request snapshot, the
    employee's other requests and ``today``, and persists the returned
    mutation.
    """

    def __init__(self, balance_calculator: Optional[LeaveBalanceCalculator] = None):
        self._balances = balance_calculator or LeaveBalanceCalculator()

    def _validate_range(self, start_date: date, end_date: date, today: date, *, action: str) -> None:
        if end_date < start_date:
            raise ValidationError(
                "Ngày kết thúc phải sau hoặc bằng ngày bắt đầu",
                kind=FailureKind.INVALID_RANGE,
            )
        if days_inclusive(start_date, end_date) > MAX_LEAVE_DAYS:
            raise ValidationError(
                f"Thời gian nghỉ phép không được vượt quá {MAX_LEAVE_DAYS} ngày liên tiếp",
                kind=FailureKind.RANGE_TOO_LONG,
            )
        if start_date < today:
            raise ValidationError(
                f"Không thể {action} đơn nghỉ phép cho ngày trong quá khứ",
                kind=FailureKind.PAST_DATE,
            )

    def create(
        self,
        employee: Optional[Employee],
        *,
        start_date: date,
        end_date: date,
        reason: Optional[str],
        leave_type: LeaveType = LeaveType.ANNUAL,
        existing: Iterable[LeaveRequest],
        today: date,
    ) -> NewLeaveRequest:
        self._validate_range(start_date, end_date, today, action="tạo")
        reason = require_reason(reason, "Lý do nghỉ phép")

        if employee is None:
            raise NotFoundError("Không tìm thấy nhân viên.", kind=FailureKind.UNKNOWN_EMPLOYEE)

        existing = list(existing)
        if has_conflict(employee.user_id, start_date, end_date, existing):
            raise ConflictError(
                "Bạn đã có đơn nghỉ phép được duyệt trong khoảng thời gian này.",
                kind=FailureKind.CONFLICT,
            )

        if leave_type == LeaveType.ANNUAL:
            total_days = days_inclusive(start_date, end_date)
            remaining = self._balances.remaining_days(
                employee.user_id, start_date.year, existing, LeaveType.ANNUAL
            )
            if total_days > remaining:
                raise ValidationError(
                    f"Bạn chỉ còn {remaining} ngày nghỉ phép năm. "
                    f"Không thể tạo đơn nghỉ {total_days} ngày.",
                    kind=FailureKind.QUOTA_EXCEEDED,
                )

        return NewLeaveRequest(
            user_id=employee.user_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            leave_type=leave_type,
        )

    def update(
        self,
        request: Optional[LeaveRequest],
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        reason: Optional[str],
        existing: Iterable[LeaveRequest],
        today: date,
    ) -> LeaveUpdate:
        request = _require_request(request)
        _require_owner(request, user_id, "Bạn không có quyền sửa đơn nghỉ phép này.")
        _require_pending(request, "Chỉ có thể sửa đơn nghỉ phép đang chờ duyệt.")

        self._validate_range(start_date, end_date, today, action="sửa")
        reason = require_reason(reason, "Lý do nghỉ phép")

        if has_conflict(request.user_id, start_date, end_date, existing, exclude_request_id=request.request_id):
            raise ConflictError(
                "Thời gian nghỉ phép bị trùng lặp với đơn nghỉ phép khác đã được duyệt.",
                kind=FailureKind.CONFLICT,
            )

        return LeaveUpdate(
            request_id=request.request_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )

    def approve(
        self,
        request: Optional[LeaveRequest],
        *,
        existing: Iterable[LeaveRequest],
        approver_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> LeaveTransition:
        request = _require_request(request)
        _require_pending(request, "Chỉ có thể duyệt đơn nghỉ phép đang chờ xét duyệt.")

        # Another request may have been approved since this one was created.
        if has_conflict(
            request.user_id,
            request.start_date,
            request.end_date,
            existing,
            exclude_request_id=request.request_id,
        ):
            raise ConflictError(
                "Không thể duyệt do trùng lặp với đơn nghỉ phép khác đã được duyệt.",
                kind=FailureKind.CONFLICT,
            )

        return self._transition(request, LeaveStatus.APPROVED, notify_owner=True, decided_by=approver_id, note=note)

    def reject(
        self,
        request: Optional[LeaveRequest],
        *,
        approver_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> LeaveTransition:
        request = _require_request(request)
        _require_pending(request, "Chỉ có thể từ chối đơn nghỉ phép đang chờ xét duyệt.")
        return self._transition(request, LeaveStatus.REJECTED, notify_owner=True, decided_by=approver_id, note=note)

    def cancel(self, request: Optional[LeaveRequest], *, user_id: int, today: date) -> LeaveTransition:
        request = _require_request(request)
        _require_owner(request, user_id, "Bạn không có quyền hủy đơn nghỉ phép này.")

        if request.status == LeaveStatus.CANCELLED:
            raise ValidationError(
                "Đơn nghỉ phép này đã được hủy trước đó.",
                kind=FailureKind.ALREADY_CANCELLED,
            )
        if request.status == LeaveStatus.APPROVED and request.start_date <= today:
            raise ValidationError(
                "Không thể hủy đơn nghỉ phép đã được duyệt và đã bắt đầu.",
                kind=FailureKind.ALREADY_STARTED,
            )

        return self._transition(request, LeaveStatus.CANCELLED, notify_owner=False)

    def delete(self, request: Optional[LeaveRequest], *, today: date) -> LeaveDeletion:
        request = _require_request(request)
        if request.status == LeaveStatus.APPROVED and request.start_date <= today:
            raise ValidationError(
                "Không thể xóa đơn nghỉ phép đã được duyệt và đã bắt đầu.",
                kind=FailureKind.APPROVED_AND_STARTED,
            )
        return LeaveDeletion(request_id=request.request_id)

    @staticmethod
    def _transition(
        request: LeaveRequest,
        target: LeaveStatus,
        *,
        notify_owner: bool,
        decided_by: Optional[int] = None,
        note: Optional[str] = None,
    ) -> LeaveTransition:
        if not can_transition(request.status, target):
            raise ValidationError(
                f"Không thể chuyển đơn từ '{request.status.label}' sang '{target.label}'.",
                kind=FailureKind.NOT_PENDING,
            )
        return LeaveTransition(
            request_id=request.request_id,
            from_status=request.status,
            to_status=target,
            notify_owner=notify_owner,
            decided_by=decided_by,
            admin_note=(note or "").strip() or None,
        )
