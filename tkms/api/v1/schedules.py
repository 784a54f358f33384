"""
Schedule endpoints

Update and delete accept the schedule id either as a path segment or as
the `id` query parameter.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from tkms.core.deps import ensure_self_or_admin, get_current_user, get_db, require_admin
from tkms.models.user import User
from tkms.schemas.common import SuccessResponse
from tkms.schemas.schedule import ScheduleCreate, ScheduleListResponse, ScheduleResponse, ScheduleUpdate
from tkms.services.schedule_service import create_schedule, delete_schedule, list_schedules, update_schedule

router = APIRouter()


def _require_id(schedule_id: Optional[int]) -> int:
    if schedule_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Schedule id is required")
    return schedule_id


@router.get("", response_model=ScheduleListResponse)
async def list_schedules_endpoint(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Active schedules; employees only their own"""
    if user_id is not None:
        ensure_self_or_admin(current_user, user_id)
    elif not current_user.is_admin:
        user_id = current_user.id
    return {"success": True, "schedules": list_schedules(db, user_id=user_id)}


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule_endpoint(
    data: ScheduleCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a schedule and deactivate the user's previous ones (Admin-only)"""
    schedule = create_schedule(
        db=db,
        user_id=data.user_id,
        days=data.days,
        time_in=data.time_in,
        time_out=data.time_out,
        lunch_start=data.lunch_start,
        lunch_end=data.lunch_end,
        actor=current_user,
        request=request,
    )
    return {"success": True, "schedule": schedule}


async def _update(schedule_id, data: ScheduleUpdate, request, db, current_user):
    schedule = update_schedule(
        db=db,
        schedule_id=_require_id(schedule_id),
        changes=data.model_dump(exclude_unset=True),
        actor=current_user,
        request=request,
    )
    return {"success": True, "schedule": schedule}


@router.put("", response_model=ScheduleResponse)
@router.patch("", response_model=ScheduleResponse)
async def update_schedule_by_query(
    data: ScheduleUpdate,
    request: Request,
    schedule_id: Optional[int] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Update a schedule given ?id= (Admin-only)"""
    return await _update(schedule_id, data, request, db, current_user)


@router.put("/{schedule_id}", response_model=ScheduleResponse)
@router.patch("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule_endpoint(
    schedule_id: int,
    data: ScheduleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Update a schedule (Admin-only)"""
    return await _update(schedule_id, data, request, db, current_user)


@router.delete("", response_model=SuccessResponse)
async def delete_schedule_by_query(
    request: Request,
    schedule_id: Optional[int] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete a schedule given ?id= (Admin-only)"""
    delete_schedule(db, _require_id(schedule_id), actor=current_user, request=request)
    return {"success": True, "message": "Schedule deleted"}


@router.delete("/{schedule_id}", response_model=SuccessResponse)
async def delete_schedule_endpoint(
    schedule_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete a schedule (Admin-only)"""
    delete_schedule(db, schedule_id, actor=current_user, request=request)
    return {"success": True, "message": "Schedule deleted"}
