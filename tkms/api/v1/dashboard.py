"""
Dashboard endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tkms.core.deps import get_current_user, get_db, require_admin
from tkms.models.user import User
from tkms.schemas.dashboard import DashboardStatsResponse
from tkms.services.dashboard_service import get_dashboard_stats

router = APIRouter()


@router.get("")
async def dashboard_index(current_user: User = Depends(get_current_user)):
    """Available dashboard resources for the caller"""
    resources = ["attendance", "leave", "schedules", "notifications"]
    if current_user.is_admin:
        resources.append("stats")
    return {"success": True, "role": current_user.role, "resources": resources}


@router.get("/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Today's headcounts (Admin-only)"""
    return {"success": True, "stats": get_dashboard_stats(db)}
