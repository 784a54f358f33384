"""
Attendance schemas
"""
from datetime import date as date_type
from typing import List, Optional
from tkms.schemas.common import CamelModel, LocalDateTime
from tkms.schemas.user import UserRef


class AttendanceOut(CamelModel):
    id: int
    user_id: int
    date: date_type
    time_in: Optional[LocalDateTime] = None
    time_out: Optional[LocalDateTime] = None
    total_hours: float
    lunch_break_minutes: int
    worked_hours: float
    overtime_minutes: int
    overtime_hours: float
    is_late: bool
    late_minutes: int
    is_early_out: bool
    early_out_minutes: int
    status: str
    user: Optional[UserRef] = None

    @classmethod
    def from_row(cls, row) -> "AttendanceOut":
        """Map the effective punch columns onto timeIn/timeOut"""
        return cls(
            id=row.id,
            user_id=row.user_id,
            date=row.date,
            time_in=row.time_in_at,
            time_out=row.time_out_at,
            total_hours=row.total_hours,
            lunch_break_minutes=row.lunch_break_minutes,
            worked_hours=row.worked_hours,
            overtime_minutes=row.overtime_minutes,
            overtime_hours=row.overtime_hours,
            is_late=row.is_late,
            late_minutes=row.late_minutes,
            is_early_out=row.is_early_out,
            early_out_minutes=row.early_out_minutes,
            status=row.status,
            user=UserRef.model_validate(row.user) if row.user is not None else None,
        )


class AttendanceListResponse(CamelModel):
    success: bool = True
    attendances: List[AttendanceOut]
