from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Protocol

from ..core.constants import DEFAULT_UPCOMING_DAYS
from ..core.enums import FailureKind, LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..users.repository import EmployeeRepository
from .balance import LeaveBalance, LeaveBalanceCalculator
from .model import LeaveFilter, LeaveRequest, LeaveRequestRow, LeaveTransition
from .repository import LeaveRepository
from .state_machine import LeaveRequestStateMachine

logger = logging.getLogger(__name__)

APPROVER_ROLES = {Role.ADMIN, Role.MANAGER}


class LeaveNotifier(Protocol):
    """Delivery of approval/rejection messages lives outside the engine."""

    def notify_leave_decision(self, request: LeaveRequest, transition: LeaveTransition) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class LeaveStatistics:
    total: int = 0
    by_status: dict[LeaveStatus, int] = field(default_factory=dict)
    by_department: dict[str, int] = field(default_factory=dict)
    by_leave_type: dict[LeaveType, int] = field(default_factory=dict)

    def count(self, status: LeaveStatus) -> int:
        return self.by_status.get(status, 0)

    @property
    def approval_rate(self) -> float:
        return self.count(LeaveStatus.APPROVED) / self.total * 100 if self.total else 0.0

    @property
    def rejection_rate(self) -> float:
        return self.count(LeaveStatus.REJECTED) / self.total * 100 if self.total else 0.0


def _require_role(current_role: Role, allowed: set[Role]) -> None:
    if current_role not in allowed:
        raise AuthorizationError("Bạn không có quyền", kind=FailureKind.FORBIDDEN)


class LeaveService:
    def __init__(
        self,
        requests: LeaveRepository,
        employees: EmployeeRepository,
        *,
        state_machine: LeaveRequestStateMachine | None = None,
        balance_calculator: LeaveBalanceCalculator | None = None,
        notifier: LeaveNotifier | None = None,
    ):
        self._requests = requests
        self._employees = employees
        self._balances = balance_calculator or LeaveBalanceCalculator()
        self._machine = state_machine or LeaveRequestStateMachine(self._balances)
        self._notifier = notifier

    # Employee functions

    def create_request(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        reason: str,
        leave_type: LeaveType = LeaveType.ANNUAL,
        today: date,
    ) -> int:
        employee = self._employees.get_by_id(int(user_id))
        try:
            entry = self._machine.create(
                employee,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                leave_type=leave_type,
                existing=self._requests.list_for_user(int(user_id)),
                today=today,
            )
        except DomainError as exc:
            logger.info("Leave request rejected for user %s: %s", user_id, exc.kind.value)
            raise

        request_id = self._requests.create(entry)
        logger.info("Leave request created for user %s from %s to %s", user_id, start_date, end_date)
        return request_id

    def update_request(
        self,
        *,
        user_id: int,
        request_id: int,
        start_date: date,
        end_date: date,
        reason: str,
        today: date,
    ) -> None:
        request = self._requests.get_by_id(int(request_id))
        existing = self._requests.list_for_user(request.user_id) if request else []
        update = self._machine.update(
            request,
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            existing=existing,
            today=today,
        )
        if not self._requests.update(update):
            raise ValidationError("Cập nhật đơn nghỉ phép thất bại", kind=FailureKind.PERSISTENCE_FAILED)
        logger.info("Leave request %s updated by user %s", request_id, user_id)

    def cancel_request(self, *, user_id: int, request_id: int, today: date) -> None:
        request = self._requests.get_by_id(int(request_id))
        transition = self._machine.cancel(request, user_id=int(user_id), today=today)
        self._apply(request, transition)
        logger.info("Leave request %s cancelled by user %s", request_id, user_id)

    def get_balance(self, user_id: int, *, year: int) -> LeaveBalance:
        employee = self._employees.get_by_id(int(user_id))
        return self._balances.balance(
            int(user_id),
            year,
            self._requests.list_for_user(int(user_id)),
            employee_name=employee.full_name if employee else "",
        )

    def get_remaining_days(self, user_id: int, *, year: int, leave_type: LeaveType = LeaveType.ANNUAL) -> int:
        return self._balances.remaining_days(int(user_id), year, self._requests.list_for_user(int(user_id)), leave_type)

    def list_for_user(self, user_id: int) -> list[LeaveRequest]:
        return sorted(self._requests.list_for_user(int(user_id)), key=lambda r: r.start_date, reverse=True)

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        return self._requests.get_by_id(int(request_id))

    # Manager functions

    def approve_request(
        self,
        *,
        current_role: Role,
        approver_id: int,
        request_id: int,
        note: str = "",
    ) -> None:
        _require_role(current_role, APPROVER_ROLES)

        request = self._requests.get_by_id(int(request_id))
        existing = self._requests.list_for_user(request.user_id) if request else []
        transition = self._machine.approve(request, existing=existing, approver_id=int(approver_id), note=note)
        self._apply(request, transition)
        logger.info("Leave request %s approved by %s", request_id, approver_id)

    def reject_request(
        self,
        *,
        current_role: Role,
        approver_id: int,
        request_id: int,
        note: str = "",
    ) -> None:
        _require_role(current_role, APPROVER_ROLES)

        request = self._requests.get_by_id(int(request_id))
        transition = self._machine.reject(request, approver_id=int(approver_id), note=note)
        self._apply(request, transition)
        logger.info("Leave request %s rejected by %s. Reason: %s", request_id, approver_id, transition.admin_note)

    def list_team_requests(self, manager_id: int) -> list[LeaveRequestRow]:
        manager = self._employees.get_by_id(int(manager_id))
        if not manager or not manager.department:
            return []
        rows = self._requests.list_rows(LeaveFilter(department=manager.department, page_size=None))
        return [r for r in rows if r.request.user_id != manager.user_id]

    def list_department_requests(self, department: str) -> list[LeaveRequestRow]:
        return list(self._requests.list_rows(LeaveFilter(department=department, page_size=None)))

    # Admin functions

    def delete_request(self, *, current_role: Role, request_id: int, today: date) -> None:
        _require_role(current_role, {Role.ADMIN})

        request = self._requests.get_by_id(int(request_id))
        deletion = self._machine.delete(request, today=today)
        if not self._requests.delete(deletion):
            raise ValidationError("Xóa đơn nghỉ phép thất bại", kind=FailureKind.PERSISTENCE_FAILED)
        logger.warning("Leave request %s deleted for user %s", request_id, request.user_id)

    def list_filtered(self, criteria: LeaveFilter) -> list[LeaveRequestRow]:
        return list(self._requests.list_rows(criteria))

    def list_pending(self) -> list[LeaveRequestRow]:
        rows = self._requests.list_rows(LeaveFilter(status=LeaveStatus.PENDING, page_size=None))
        return sorted(rows, key=lambda r: r.request.start_date)

    def list_upcoming(self, *, today: date, days: int = DEFAULT_UPCOMING_DAYS) -> list[LeaveRequestRow]:
        horizon = today + timedelta(days=days)
        rows = self._requests.list_rows(LeaveFilter(status=LeaveStatus.APPROVED, page_size=None))
        upcoming = [r for r in rows if today <= r.request.start_date <= horizon]
        return sorted(upcoming, key=lambda r: r.request.start_date)

    def get_statistics(self) -> LeaveStatistics:
        rows = self._requests.list_rows(LeaveFilter(page_size=None))
        return LeaveStatistics(
            total=len(rows),
            by_status=dict(Counter(r.request.status for r in rows)),
            by_department=dict(Counter(r.department or "Unknown" for r in rows)),
            by_leave_type=dict(Counter(r.request.leave_type for r in rows)),
        )

    def get_summary(self, *, year: int, user_id: Optional[int] = None) -> dict:
        criteria = LeaveFilter(user_id=user_id, page_size=None)
        requests = [r.request for r in self._requests.list_rows(criteria) if r.request.start_date.year == year]
        approved = [r for r in requests if r.status == LeaveStatus.APPROVED]

        summary: dict = {
            "total_requests": len(requests),
            "approved_requests": len(approved),
            "pending_requests": sum(1 for r in requests if r.status == LeaveStatus.PENDING),
            "total_approved_days": sum(r.total_days for r in approved),
            "year": year,
        }
        if user_id is not None:
            employee = self._employees.get_by_id(int(user_id))
            summary["user_name"] = employee.full_name if employee else "Unknown"
            summary["remaining_leave"] = self.get_remaining_days(int(user_id), year=year)
        return summary

    def _apply(self, request: LeaveRequest, transition: LeaveTransition) -> None:
        if not self._requests.apply_transition(transition):
            raise ValidationError("Cập nhật trạng thái đơn nghỉ phép thất bại", kind=FailureKind.PERSISTENCE_FAILED)
        if transition.notify_owner and self._notifier is not None:
            self._notifier.notify_leave_decision(request, transition)
