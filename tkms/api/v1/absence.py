"""
Absence endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from tkms.core.deps import ensure_self_or_admin, get_current_user, get_db, require_admin
from tkms.models.user import User
from tkms.schemas.absence import AbsenceCreate, AbsenceListResponse, AbsenceResponse
from tkms.services.absence_service import create_absence, list_absences

router = APIRouter()


@router.get("", response_model=AbsenceListResponse)
async def list_absences_endpoint(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Admins see all absences (optionally one user's); employees their own"""
    if user_id is not None:
        ensure_self_or_admin(current_user, user_id)
    elif not current_user.is_admin:
        user_id = current_user.id
    return {"success": True, "absences": list_absences(db, user_id=user_id)}


@router.post("", response_model=AbsenceResponse, status_code=201)
async def create_absence_endpoint(
    data: AbsenceCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Mark a user absent for a date (Admin-only)"""
    absence = create_absence(
        db=db,
        user_id=data.user_id,
        absence_date=data.date,
        reason=data.reason,
        notes=data.notes,
        marked_by=current_user,
        request=request,
    )
    return {"success": True, "absence": absence}
