"""
User management endpoints

Collection endpoints are admin-only and address a single user with the `id`
query parameter; `/users/{id}` is available to the user themself or an admin.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from tkms.core.deps import ensure_self_or_admin, get_current_user, get_db, require_admin
from tkms.models.user import User
from tkms.schemas.common import SuccessResponse
from tkms.schemas.user import (
    AdminSetPasswordRequest,
    ChangePasswordRequest,
    PhotoUploadRequest,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from tkms.services import user_service

router = APIRouter()


def _require_id(user_id: Optional[int]) -> int:
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User id is required")
    return user_id


@router.get("", response_model=UserListResponse)
async def list_users(
    role: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """List users, optionally filtered by role (Admin-only)"""
    return {"success": True, "users": user_service.list_users(db, role=role)}


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a user (Admin-only); employee ID is generated when omitted"""
    profile = data.model_dump(
        exclude={"email", "password", "first_name", "last_name", "role", "employee_id", "leave_credits", "is_active"},
        exclude_none=True,
    )
    user = user_service.create_user(
        db=db,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
        employee_id=data.employee_id,
        leave_credits=data.leave_credits,
        is_active=data.is_active,
        actor=current_user,
        request=request,
        **profile,
    )
    return {"success": True, "user": user}


@router.put("", response_model=UserResponse)
@router.patch("", response_model=UserResponse)
async def update_user_by_query(
    data: UserUpdate,
    request: Request,
    user_id: Optional[int] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Update a user given ?id= (Admin-only)"""
    user = user_service.update_user(
        db, _require_id(user_id), data.model_dump(exclude_unset=True), actor=current_user, request=request
    )
    return {"success": True, "user": user}


@router.delete("", response_model=SuccessResponse)
async def delete_user_by_query(
    request: Request,
    user_id: Optional[int] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete a user given ?id= (Admin-only)"""
    user_service.delete_user(db, _require_id(user_id), actor=current_user, request=request)
    return {"success": True, "message": "User deleted successfully"}


@router.post("/change-password", response_model=SuccessResponse)
async def change_password(
    data: ChangePasswordRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Change the caller's own password"""
    user_service.change_own_password(
        db, current_user, data.current_password, data.new_password, request=request
    )
    return {"success": True, "message": "Password changed successfully"}


@router.post("/password", response_model=SuccessResponse)
async def admin_set_password(
    data: AdminSetPasswordRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Set another user's password (Admin-only)"""
    user_service.set_password(db, data.user_id, data.new_password, actor=current_user, request=request)
    return {"success": True, "message": "Password updated successfully"}


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a user profile (self or admin)"""
    ensure_self_or_admin(current_user, user_id)
    return {"success": True, "user": user_service.get_user(db, user_id)}


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a user profile (self or admin); privileged fields are admin-only"""
    ensure_self_or_admin(current_user, user_id)
    user = user_service.update_user(
        db, user_id, data.model_dump(exclude_unset=True), actor=current_user, request=request
    )
    return {"success": True, "user": user}


@router.post("/{user_id}/photo", response_model=UserResponse)
async def upload_photo(
    user_id: int,
    data: PhotoUploadRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Upload a profile photo (self or admin)"""
    ensure_self_or_admin(current_user, user_id)
    user = user_service.upload_profile_photo(db, user_id, data.photo, actor=current_user, request=request)
    return {"success": True, "user": user}
