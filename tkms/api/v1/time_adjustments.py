"""
Time adjustment endpoints (admin)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from tkms.core.deps import get_db, require_admin
from tkms.models.user import User
from tkms.schemas.time_adjustment import (
    TimeAdjustmentCreate,
    TimeAdjustmentListResponse,
    TimeAdjustmentResponse,
)
from tkms.services.adjustment_service import create_adjustment, list_adjustments

router = APIRouter()


@router.get("", response_model=TimeAdjustmentListResponse)
async def list_adjustments_endpoint(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """List time adjustments newest first (Admin-only)"""
    return {"success": True, "adjustments": list_adjustments(db, user_id=user_id)}


@router.post("", response_model=TimeAdjustmentResponse, status_code=201)
async def create_adjustment_endpoint(
    data: TimeAdjustmentCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Record an agreed time correction (Admin-only); gated by system settings"""
    adjustment = create_adjustment(
        db=db,
        user_id=data.user_id,
        adjustment_type=data.adjustment_type,
        adjustment_date=data.date,
        adjusted_time=data.adjusted_time,
        original_time=data.original_time,
        reason=data.reason,
        notes=data.notes,
        actor=current_user,
        request=request,
    )
    return {"success": True, "adjustment": adjustment}
