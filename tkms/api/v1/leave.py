"""
Leave request endpoints
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tkms.core.deps import get_current_user, get_db, require_admin
from tkms.models.user import User
from tkms.schemas.common import SuccessResponse
from tkms.schemas.leave import LeaveCreate, LeaveListResponse, LeaveResponse, LeaveReview
from tkms.services.leave_service import cancel_leave, create_leave, list_leaves, review_leave

router = APIRouter()


@router.get("", response_model=LeaveListResponse)
async def list_leaves_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Admins see the latest 100 requests; employees their own"""
    user_id = None if current_user.is_admin else current_user.id
    return {"success": True, "leaves": list_leaves(db, user_id=user_id)}


@router.post("", response_model=LeaveResponse, status_code=201)
async def create_leave_endpoint(
    data: LeaveCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """File a leave request for the authenticated user"""
    leave = create_leave(
        db=db,
        user=current_user,
        leave_type=data.leave_type,
        start_date=data.start_date,
        end_date=data.end_date,
        reason=data.reason,
        request=request,
    )
    return {"success": True, "leave": leave}


@router.patch("/{leave_id}", response_model=LeaveResponse)
async def review_leave_endpoint(
    leave_id: int,
    data: LeaveReview,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Approve or reject a pending request (Admin-only)"""
    leave = review_leave(
        db=db,
        leave_id=leave_id,
        new_status=data.status,
        admin_notes=data.admin_notes,
        actor=current_user,
        request=request,
    )
    return {"success": True, "leave": leave}


@router.delete("/{leave_id}", response_model=SuccessResponse)
async def cancel_leave_endpoint(
    leave_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Cancel a pending request (owner or admin)"""
    cancel_leave(db, leave_id, actor=current_user, request=request)
    return {"success": True, "message": "Leave request cancelled"}
