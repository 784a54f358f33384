"""
User management service: accounts, passwords and profile photos
"""
import logging
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from tkms.core.config import settings
from tkms.core.constants import DEFAULT_LEAVE_CREDITS, EMPLOYEE_ID_MAX_ATTEMPTS
from tkms.core.security import generate_reset_token, hash_password, validate_password, verify_password
from tkms.models.audit_log import AuditAction, AuditCategory
from tkms.models.user import User, UserRole
from tkms.services.audit_service import log_audit
from tkms.services.email_service import password_reset_email, send_email
from tkms.services.settings_service import get_or_create_settings
from tkms.services.storage_service import decode_base64_payload, save_file
from tkms.utils.datetime_utils import ensure_utc, now_utc
from tkms.utils.employee_id import generate_employee_id
from tkms.utils.enums import enum_to_str

logger = logging.getLogger(__name__)

# Fields only admins may change through a profile update
PRIVILEGED_FIELDS = ("role", "is_active", "leave_credits", "employee_id")

REQUIRED_FIELDS = ("email", "first_name", "last_name", "role", "is_active", "leave_credits")


def _password_or_400(password: Optional[str]) -> str:
    try:
        return validate_password(password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def list_users(db: Session, role: Optional[str] = None) -> List[User]:
    """Users newest first, optionally filtered by role"""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def generate_unique_employee_id(db: Session) -> str:
    """
    Generate an employee ID from the system settings format that is not yet taken

    Raises:
        HTTPException: 500 when no free ID was found within the attempt budget
    """
    system_settings = get_or_create_settings(db)
    for _ in range(EMPLOYEE_ID_MAX_ATTEMPTS):
        candidate = generate_employee_id(
            prefix=system_settings.employee_id_prefix,
            padding=system_settings.employee_id_padding,
            delimiter=system_settings.employee_id_delimiter,
            uppercase=system_settings.employee_id_uppercase,
        )
        if not db.query(User.id).filter(User.employee_id == candidate).first():
            return candidate
    logger.error("Could not generate a unique employee ID")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Could not generate a unique employee ID"
    )


def create_user(
    db: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: UserRole = UserRole.EMPLOYEE,
    employee_id: Optional[str] = None,
    leave_credits: Optional[int] = None,
    is_active: bool = True,
    actor: Optional[User] = None,
    request=None,
    **profile: Any,
) -> User:
    """
    Create a user account

    Args:
        db: Database session
        email: Unique email (stored lower-cased)
        password: Plain password, hashed before storage
        first_name: Given name
        last_name: Family name
        role: employee, admin or super-admin
        employee_id: Explicit employee ID; generated from settings when omitted
        leave_credits: Starting leave credits (default 5)
        is_active: Whether the account can log in
        actor: Admin creating the user, None for self-registration and scripts
        request: Incoming request for audit context
        **profile: Optional profile columns (middle_name, birthday, gender, ...)

    Returns:
        Created User

    Raises:
        HTTPException: 400 for a duplicate email or employee ID, or an invalid password
    """
    email = email.strip().lower()
    password = _password_or_400(password)
    role_value = enum_to_str(role)

    if actor is not None and role_value == UserRole.SUPER_ADMIN.value and actor.role != UserRole.SUPER_ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only super admins can create super admins")

    if get_user_by_email(db, email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    if employee_id:
        if db.query(User.id).filter(User.employee_id == employee_id).first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Employee ID already in use")
    else:
        employee_id = generate_unique_employee_id(db)

    now = now_utc()
    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        role=role_value,
        employee_id=employee_id,
        leave_credits=DEFAULT_LEAVE_CREDITS if leave_credits is None else leave_credits,
        is_active=is_active,
        created_at=now,
        updated_at=now,
    )
    for key, value in profile.items():
        if value is not None and hasattr(User, key):
            setattr(user, key, enum_to_str(value) if isinstance(value, Enum) else value)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} created with employee ID {user.employee_id}")

    log_audit(
        db=db,
        action=AuditAction.USER_CREATED if actor else AuditAction.REGISTER,
        category=AuditCategory.USER if actor else AuditCategory.AUTH,
        description=f"Created new {role_value}: {user.full_name} ({employee_id})",
        user=actor or user,
        request=request,
        meta={"newUserId": user.id, "employeeId": employee_id, "email": email, "role": role_value},
    )
    return user


def update_user(
    db: Session,
    user_id: int,
    changes: Dict[str, Any],
    actor: User,
    request=None,
) -> User:
    """
    Update profile fields

    Non-admins may only edit their own profile and their changes to role,
    active flag, leave credits and employee ID are dropped. Passwords are
    never changed here.
    """
    user = get_user(db, user_id)
    if user.id != actor.id and not actor.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    changes = {
        k: v for k, v in changes.items()
        if k not in ("password", "password_hash") and not (v is None and k in REQUIRED_FIELDS)
    }
    if not actor.is_admin:
        changes = {k: v for k, v in changes.items() if k not in PRIVILEGED_FIELDS}

    if "role" in changes and changes["role"] is not None:
        changes["role"] = enum_to_str(changes["role"])
        if changes["role"] == UserRole.SUPER_ADMIN.value and actor.role != UserRole.SUPER_ADMIN.value:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only super admins can assign super admin")

    if changes.get("email") and changes["email"] != user.email:
        if get_user_by_email(db, changes["email"]):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")
    if changes.get("employee_id") and changes["employee_id"] != user.employee_id:
        if db.query(User.id).filter(User.employee_id == changes["employee_id"]).first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Employee ID already in use")

    for key, value in changes.items():
        if hasattr(User, key):
            setattr(user, key, enum_to_str(value) if key in ("role", "gender") else value)
    user.updated_at = now_utc()
    db.commit()
    db.refresh(user)

    own_profile = user.id == actor.id
    log_audit(
        db=db,
        action=AuditAction.PROFILE_UPDATED if own_profile else AuditAction.USER_UPDATED,
        category=AuditCategory.USER,
        description="Updated own profile" if own_profile else f"Updated user: {user.full_name}",
        user=actor,
        request=request,
        meta={"userId": user.id, "updates": changes},
    )
    return user


def delete_user(db: Session, user_id: int, actor: User, request=None) -> None:
    """Delete a user account (admin); admins cannot delete themselves"""
    user = get_user(db, user_id)
    if user.id == actor.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    if user.role == UserRole.SUPER_ADMIN.value and actor.role != UserRole.SUPER_ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only super admins can delete super admins")

    summary = {"deletedUserId": user.id, "deletedUserName": user.full_name, "deletedUserEmail": user.email}
    db.delete(user)
    db.commit()

    log_audit(
        db=db,
        action=AuditAction.USER_DELETED,
        category=AuditCategory.USER,
        description=f"Deleted user: {summary['deletedUserName']} ({summary['deletedUserEmail']})",
        user=actor,
        request=request,
        meta=summary,
    )


def set_password(db: Session, user_id: int, new_password: str, actor: User, request=None) -> None:
    """Admin sets another user's password"""
    user = get_user(db, user_id)
    user.password_hash = hash_password(_password_or_400(new_password))
    user.updated_at = now_utc()
    db.commit()

    log_audit(
        db=db,
        action=AuditAction.PASSWORD_CHANGED,
        category=AuditCategory.USER,
        description=f"Changed password for user {user.id}",
        user=actor,
        request=request,
        meta={"targetUserId": user.id},
    )


def change_own_password(db: Session, user: User, current_password: str, new_password: str, request=None) -> None:
    """
    Change the caller's password after verifying the current one

    Raises:
        HTTPException: 400 if the current password is wrong or the new one is invalid
    """
    if not verify_password(current_password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
    user.password_hash = hash_password(_password_or_400(new_password))
    user.updated_at = now_utc()
    db.commit()

    log_audit(
        db=db,
        action=AuditAction.PASSWORD_CHANGED,
        category=AuditCategory.USER,
        description="User changed own password",
        user=user,
        request=request,
    )


def upload_profile_photo(db: Session, user_id: int, photo: str, actor: User, request=None) -> User:
    """Store a profile photo and point the user at it (self or admin)"""
    user = get_user(db, user_id)
    if user.id != actor.id and not actor.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    content, mime = decode_base64_payload(photo)
    timestamp = int(now_utc().timestamp())
    stored = save_file(f"profile-photos/{user.id}-{timestamp}.jpg", content, mime or "image/jpeg")

    user.photo_url = stored.url
    user.updated_at = now_utc()
    db.commit()
    db.refresh(user)

    log_audit(
        db=db,
        action=AuditAction.PROFILE_UPDATED,
        category=AuditCategory.USER,
        description=f"Updated profile photo of {user.full_name}",
        user=actor,
        request=request,
        meta={"userId": user.id, "photoUrl": stored.url},
    )
    return user


def request_password_reset(db: Session, email: Optional[str], request=None) -> Optional[str]:
    """
    Issue a reset token for an existing account

    Returns:
        The token, or None when no active account matches. Callers must not
        reveal which case occurred.
    """
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")

    user = get_user_by_email(db, email)
    if not user or not user.is_active:
        logger.info("Password reset requested for unknown or inactive account")
        return None

    token = generate_reset_token()
    user.reset_password_token = token
    user.reset_password_expiry = now_utc() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    user.updated_at = now_utc()
    db.commit()

    result = send_email(user.email, subject="Reset your password", html=password_reset_email(user.full_name, token))
    # undelivered tokens are only surfaced to operators outside prod
    if not result.success and settings.APP_ENV != "prod":
        logger.info(f"Password reset token for user {user.id} ({result.error}): {token}")

    log_audit(
        db=db,
        action=AuditAction.PASSWORD_RESET_REQUESTED,
        category=AuditCategory.AUTH,
        description=f"Password reset requested for {user.email}",
        user=user,
        request=request,
    )
    return token


def reset_password(db: Session, token: Optional[str], new_password: Optional[str], request=None) -> User:
    """
    Set a new password using a reset token

    Raises:
        HTTPException: 400 for a missing, unknown or expired token or an invalid password
    """
    if not token or not new_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token and new password are required")

    user = db.query(User).filter(User.reset_password_token == token).first()
    if not user or not user.reset_password_expiry or ensure_utc(user.reset_password_expiry) < now_utc():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired reset token")

    user.password_hash = hash_password(_password_or_400(new_password))
    user.reset_password_token = None
    user.reset_password_expiry = None
    user.updated_at = now_utc()
    db.commit()
    db.refresh(user)

    log_audit(
        db=db,
        action=AuditAction.PASSWORD_RESET,
        category=AuditCategory.AUTH,
        description=f"Password reset completed for {user.email}",
        user=user,
        request=request,
    )
    return user


def ensure_initial_super_admin(db: Session, email: str, password: str) -> Optional[User]:
    """
    Create the first super-admin when none exists

    Returns:
        The created User, or None when a super-admin is already present
    """
    exists = db.query(User.id).filter(User.role == UserRole.SUPER_ADMIN.value).first()
    if exists:
        logger.info("Super admin already exists, skipping initial bootstrap")
        return None

    logger.info("No super admin found, creating initial super admin")
    user = create_user(
        db=db,
        email=email,
        password=password,
        first_name="Super",
        last_name="Admin",
        role=UserRole.SUPER_ADMIN,
        leave_credits=0,
    )
    logger.info(f"Initial super admin created: {user.email}")
    return user
