"""
Attendance endpoints
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tkms.core.deps import ensure_self_or_admin, get_current_user, get_db
from tkms.models.user import User
from tkms.schemas.attendance import AttendanceListResponse, AttendanceOut
from tkms.services.attendance_service import list_attendance

router = APIRouter()


@router.get("", response_model=AttendanceListResponse)
async def list_attendance_endpoint(
    user_id: Optional[int] = Query(None, alias="userId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Attendance rows, newest day first (max 100)

    Employees only see their own rows; asking for another userId is 403.
    Admins see everyone unless userId narrows it.
    """
    if user_id is not None:
        ensure_self_or_admin(current_user, user_id)
    elif not current_user.is_admin:
        user_id = current_user.id

    rows = list_attendance(db, user_id=user_id, start_date=start_date, end_date=end_date)
    return {"success": True, "attendances": [AttendanceOut.from_row(row) for row in rows]}
