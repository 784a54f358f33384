"""
System settings endpoints
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tkms.core.deps import get_db, require_super_admin
from tkms.models.user import User
from tkms.schemas.system_settings import SystemSettingsResponse, SystemSettingsUpdate
from tkms.services.settings_service import get_or_create_settings, update_settings

router = APIRouter()


@router.get("", response_model=SystemSettingsResponse)
async def read_settings(db: Session = Depends(get_db)):
    """Public read; the singleton is created with defaults on first access"""
    return {"success": True, "settings": get_or_create_settings(db)}


@router.patch("", response_model=SystemSettingsResponse)
async def patch_settings(
    data: SystemSettingsUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin)
):
    """Update whitelisted settings (Super-admin only)"""
    system_settings = update_settings(
        db, data.model_dump(exclude_unset=True), actor=current_user, request=request
    )
    return {"success": True, "settings": system_settings}
