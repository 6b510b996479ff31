from datetime import date

from src.attendance_engine.attendance_engine.core.enums import LeaveStatus, LeaveType
from src.attendance_engine.attendance_engine.leave.balance import LeaveBalanceCalculator
from src.attendance_engine.attendance_engine.leave.conflict import find_conflicts, has_conflict, ranges_overlap
from src.attendance_engine.attendance_engine.leave.model import LeaveRequest


def _req(rid, start, end, status=LeaveStatus.APPROVED, user_id=1, leave_type=LeaveType.ANNUAL):
    return LeaveRequest(
        request_id=rid,
        user_id=user_id,
        start_date=start,
        end_date=end,
        reason="Việc gia đình",
        status=status,
        leave_type=leave_type,
    )


def test_ranges_overlap_closed_intervals():
    assert ranges_overlap(date(2025, 4, 1), date(2025, 4, 5), date(2025, 4, 5), date(2025, 4, 6))
    assert ranges_overlap(date(2025, 4, 3), date(2025, 4, 3), date(2025, 4, 1), date(2025, 4, 5))
    assert not ranges_overlap(date(2025, 4, 1), date(2025, 4, 5), date(2025, 4, 6), date(2025, 4, 8))


def test_only_approved_requests_of_same_employee_conflict():
    existing = [
        _req(1, date(2025, 4, 1), date(2025, 4, 5)),
        _req(2, date(2025, 4, 1), date(2025, 4, 5), status=LeaveStatus.PENDING),
        _req(3, date(2025, 4, 1), date(2025, 4, 5), status=LeaveStatus.REJECTED),
        _req(4, date(2025, 4, 1), date(2025, 4, 5), status=LeaveStatus.CANCELLED),
        _req(5, date(2025, 4, 1), date(2025, 4, 5), user_id=2),
    ]

    assert [r.request_id for r in find_conflicts(1, date(2025, 4, 3), date(2025, 4, 6), existing)] == [1]
    assert not has_conflict(1, date(2025, 4, 3), date(2025, 4, 6), existing, exclude_request_id=1)
    assert not has_conflict(3, date(2025, 4, 3), date(2025, 4, 6), existing)


def test_remaining_days_counts_approved_annual_in_year():
    calc = LeaveBalanceCalculator()
    requests = [
        _req(1, date(2025, 2, 3), date(2025, 2, 7)),                               # 5
        _req(2, date(2025, 3, 10), date(2025, 3, 12)),                             # 3
        _req(3, date(2025, 5, 5), date(2025, 5, 9), status=LeaveStatus.PENDING),
        _req(4, date(2025, 6, 2), date(2025, 6, 4), leave_type=LeaveType.SICK),
        _req(5, date(2024, 12, 20), date(2024, 12, 31)),
        _req(6, date(2025, 7, 1), date(2025, 7, 3), user_id=2),
    ]

    assert calc.remaining_days(1, 2025, requests) == 4
    assert calc.remaining_days(1, 2025, requests, LeaveType.SICK) == 27
    assert calc.remaining_days(1, 2024, requests) == 0


def test_remaining_days_never_negative():
    calc = LeaveBalanceCalculator()
    requests = [_req(1, date(2025, 1, 6), date(2025, 1, 20))]

    assert calc.remaining_days(1, 2025, requests) == 0


def test_quota_fallback_for_other_types():
    calc = LeaveBalanceCalculator()

    assert calc.quota_for(LeaveType.SICK) == 30
    assert calc.quota_for(LeaveType.PERSONAL) == 12


def test_balance_lists_recent_requests():
    calc = LeaveBalanceCalculator()
    requests = [_req(i, date(2025, i, 1), date(2025, i, 1), status=LeaveStatus.PENDING) for i in range(1, 8)]

    balance = calc.balance(1, 2025, requests, employee_name="Nguyễn Văn A")

    assert [r.request_id for r in balance.recent_requests] == [7, 6, 5, 4, 3]
    assert balance.for_type(LeaveType.ANNUAL).remaining == 12
    assert balance.total_used == 0


def test_ranges_overlap_is_symmetric_and_reflexive():
    a, b = date(2025, 4, 1), date(2025, 4, 5)
    c, d = date(2025, 4, 5), date(2025, 4, 9)

    assert ranges_overlap(a, b, a, b)
    assert ranges_overlap(a, b, c, d) == ranges_overlap(c, d, a, b)
    assert ranges_overlap(date(2025, 4, 1), date(2025, 4, 2), date(2025, 4, 3), date(2025, 4, 4)) is False
