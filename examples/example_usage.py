"""Ví dụ: dùng service layer trực tiếp (không qua giao diện).

Chấm công vào/ra cho nhân viên #1 rồi in báo cáo 30 ngày gần nhất và số ngày phép còn lại.
"""

from datetime import datetime, timedelta

from src.attendance_engine.attendance_engine.core.exceptions import DomainError
from src.attendance_engine.attendance_engine.main import bootstrap


def main():
    container = bootstrap()
    now = datetime.now()

    try:
        outcome = container.attendance_service.check_in(1, now=now)
        print(outcome.message)
    except DomainError as exc:
        print(f"[{exc.kind.value}] {exc.message}")

    report = container.attendance_service.generate_user_report(
        1, start=now.date() - timedelta(days=30), end=now.date()
    )
    print(
        f"Ngày có mặt: {report.total_present_days}, đi muộn: {report.late_count}, "
        f"điểm chuyên cần: {report.attendance_score:.1f}"
    )
    print("Ngày phép năm còn lại:", container.leave_service.get_remaining_days(1, year=now.year))


if __name__ == "__main__":
    main()
