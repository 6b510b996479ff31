from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ..core.constants import RECENT_REQUESTS_LIMIT
from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest

# Days per year. Categories missing here fall back to the annual quota.
LEAVE_QUOTAS: Mapping[LeaveType, int] = {
    LeaveType.ANNUAL: 12,
    LeaveType.SICK: 30,
}


@dataclass(frozen=True)
class CategoryBalance:
    leave_type: LeaveType
    quota: int
    used: int

    @property
    def remaining(self) -> int:
        return max(0, self.quota - self.used)


@dataclass(frozen=True)
class LeaveBalance:
    user_id: int
    year: int
    categories: dict[LeaveType, CategoryBalance]
    recent_requests: list[LeaveRequest] = field(default_factory=list)
    employee_name: str = ""

    def for_type(self, leave_type: LeaveType) -> CategoryBalance:
        return self.categories[leave_type]

    @property
    def total_used(self) -> int:
        return sum(c.used for c in self.categories.values())


class LeaveBalanceCalculator:
    """Computes remaining entitlement per leave category from approved history."""

    def __init__(self, quotas: Optional[Mapping[LeaveType, int]] = None):
        self._quotas = dict(quotas if quotas is not None else LEAVE_QUOTAS)

    def quota_for(self, leave_type: LeaveType) -> int:
        return self._quotas.get(leave_type, self._quotas.get(LeaveType.ANNUAL, LEAVE_QUOTAS[LeaveType.ANNUAL]))

    @staticmethod
    def used_days(
        employee_id: int,
        year: int,
        leave_type: LeaveType,
        requests: Iterable[LeaveRequest],
    ) -> int:
        return sum(
            r.total_days
            for r in requests
            if r.user_id == employee_id
            and r.status == LeaveStatus.APPROVED
            and r.leave_type == leave_type
            and r.start_date.year == year
        )

    def category_balance(
        self,
        employee_id: int,
        year: int,
        leave_type: LeaveType,
        requests: Iterable[LeaveRequest],
    ) -> CategoryBalance:
        return CategoryBalance(
            leave_type=leave_type,
            quota=self.quota_for(leave_type),
            used=self.used_days(employee_id, year, leave_type, requests),
        )

    def remaining_days(
        self,
        employee_id: int,
        year: int,
        requests: Iterable[LeaveRequest],
        leave_type: LeaveType = LeaveType.ANNUAL,
    ) -> int:
        return self.category_balance(employee_id, year, leave_type, requests).remaining

    def balance(
        self,
        employee_id: int,
        year: int,
        requests: Iterable[LeaveRequest],
        *,
        employee_name: str = "",
    ) -> LeaveBalance:
        own = [r for r in requests if r.user_id == employee_id]
        categories = {t: self.category_balance(employee_id, year, t, own) for t in LeaveType}
        recent = sorted(own, key=lambda r: r.start_date, reverse=True)[:RECENT_REQUESTS_LIMIT]
        return LeaveBalance(
            user_id=employee_id,
            year=year,
            categories=categories,
            recent_requests=recent,
            employee_name=employee_name,
        )
