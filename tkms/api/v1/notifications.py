"""
Notification endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tkms.core.deps import get_current_user, get_db
from tkms.models.user import User
from tkms.schemas.common import SuccessResponse
from tkms.schemas.notification import NotificationListResponse
from tkms.services.notification_service import (
    count_unread,
    list_notifications_for_user,
    mark_all_as_read_for_user,
)

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Caller's notifications, newest first"""
    return {
        "success": True,
        "notifications": list_notifications_for_user(db, current_user.id),
        "unread_count": count_unread(db, current_user.id),
    }


@router.patch("/read-all", response_model=SuccessResponse)
@router.post("/read-all", response_model=SuccessResponse)
async def read_all(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Mark all of the caller's notifications read"""
    updated = mark_all_as_read_for_user(db, current_user.id)
    return {"success": True, "message": f"{updated} notification(s) marked as read"}
