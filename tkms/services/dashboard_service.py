"""
Dashboard statistics
"""
from datetime import date
from typing import Dict, Optional

from sqlalchemy.orm import Session

from tkms.models.attendance import Attendance, AttendanceStatus
from tkms.models.user import User, UserRole
from tkms.services.leave_service import users_on_leave
from tkms.utils.datetime_utils import local_today


def get_dashboard_stats(db: Session, day: Optional[date] = None) -> Dict[str, int]:
    """
    Headcounts for a business day (today by default)

    Returns:
        total_employees: active employees
        present_today: attendance rows marked present
        absent_today: active employees not present
        late_today: present rows flagged late
        on_leave_today: users with approved leave covering the day
    """
    day = day or local_today()

    total_employees = db.query(User).filter(
        User.role == UserRole.EMPLOYEE.value,
        User.is_active == True,  # noqa: E712
    ).count()

    present_rows = db.query(Attendance).filter(
        Attendance.date == day,
        Attendance.status == AttendanceStatus.PRESENT.value,
    )
    present_today = present_rows.count()
    late_today = present_rows.filter(Attendance.is_late == True).count()  # noqa: E712

    return {
        "total_employees": total_employees,
        "present_today": present_today,
        "absent_today": max(0, total_employees - present_today),
        "late_today": late_today,
        "on_leave_today": users_on_leave(db, day),
    }
