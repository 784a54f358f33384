"""
Time entry (punch) endpoints
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from tkms.core.deps import ensure_self_or_admin, get_current_user, get_db, require_admin
from tkms.models.user import User
from tkms.schemas.attendance import AttendanceOut
from tkms.schemas.time_entry import (
    TimeEntryCreate,
    TimeEntryCreateResponse,
    TimeEntryListResponse,
    TimeEntryResponse,
    TimeEntryStatusUpdate,
)
from tkms.services.time_entry_service import (
    create_time_entry,
    list_time_entries,
    update_time_entry_status,
)
from tkms.services.user_service import get_user

router = APIRouter()


@router.get("", response_model=TimeEntryListResponse)
async def list_time_entries_endpoint(
    user_id: Optional[int] = Query(None, alias="userId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Punches newest first; employees see only their own"""
    if user_id is not None:
        ensure_self_or_admin(current_user, user_id)
    elif not current_user.is_admin:
        user_id = current_user.id

    entries = list_time_entries(db, user_id=user_id, start_date=start_date, end_date=end_date)
    return {"success": True, "time_entries": entries}


@router.post("", response_model=TimeEntryCreateResponse, status_code=201)
async def create_time_entry_endpoint(
    data: TimeEntryCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record a time-in or time-out with a photo and optional location"""
    user = current_user
    if data.user_id is not None and data.user_id != current_user.id:
        ensure_self_or_admin(current_user, data.user_id)
        user = get_user(db, data.user_id)

    entry, attendance = create_time_entry(
        db=db,
        user=user,
        entry_type=data.type,
        photo=data.photo,
        latitude=data.location.latitude if data.location else None,
        longitude=data.location.longitude if data.location else None,
        notes=data.notes,
        request=request,
    )
    return {"success": True, "time_entry": entry, "attendance": AttendanceOut.from_row(attendance)}


@router.patch("/{entry_id}", response_model=TimeEntryResponse)
async def update_time_entry_status_endpoint(
    entry_id: int,
    data: TimeEntryStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Approve or reject a punch (admin)"""
    entry = update_time_entry_status(db, entry_id, data.status, actor=current_user, request=request)
    return {"success": True, "time_entry": entry}
