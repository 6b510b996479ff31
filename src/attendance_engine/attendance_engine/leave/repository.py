from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveDeletion, LeaveFilter, LeaveRequest, LeaveRequestRow, LeaveTransition, LeaveUpdate, NewLeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        """All requests of one employee, newest start date first."""

        raise NotImplementedError

    def list_rows(self, criteria: LeaveFilter) -> Sequence[LeaveRequestRow]:
        """Filtered rows joined with the owning employee (UI/report read-model)."""

        raise NotImplementedError

    def create(self, entry: NewLeaveRequest) -> int:
        raise NotImplementedError

    def update(self, update: LeaveUpdate) -> bool:
        raise NotImplementedError

    def apply_transition(self, transition: LeaveTransition) -> bool:
        """Persist a status change only if the stored status still equals ``from_status``."""

        raise NotImplementedError

    def delete(self, deletion: LeaveDeletion) -> bool:
        raise NotImplementedError
