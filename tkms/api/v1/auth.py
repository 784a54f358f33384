"""
Authentication endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from tkms.core.deps import get_current_user, get_db
from tkms.core.security import create_access_token, verify_password
from tkms.models.audit_log import AuditAction, AuditCategory, AuditStatus
from tkms.models.user import User, UserRole
from tkms.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
)
from tkms.schemas.common import SuccessResponse
from tkms.schemas.user import UserResponse
from tkms.services.audit_service import log_audit
from tkms.services.user_service import (
    create_user,
    get_user_by_email,
    request_password_reset,
    reset_password,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _login_failed(db: Session, request: Request, email: str, reason: str, user: User = None) -> HTTPException:
    log_audit(
        db=db,
        action=AuditAction.LOGIN_FAILED,
        category=AuditCategory.AUTH,
        description=f"Failed login for {email}: {reason}",
        user=user,
        user_name=email,
        request=request,
        meta={"email": email, "reason": reason},
        status=AuditStatus.FAILED,
    )
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=reason)


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Authenticate with email and password and return a JWT

    Every outcome is audit logged. Unknown emails and wrong passwords get
    the same 401 message.
    """
    if not login_data.email or not login_data.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and password are required")

    email = login_data.email.strip().lower()
    user = get_user_by_email(db, email)

    if not user or not verify_password(login_data.password, user.password_hash):
        raise _login_failed(db, request, email, "Invalid credentials", user)

    if not user.is_active:
        raise _login_failed(db, request, email, "Account is deactivated", user)

    # JWT 'sub' claim must be a string
    token = create_access_token(data={
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
    })

    log_audit(
        db=db,
        action=AuditAction.LOGIN,
        category=AuditCategory.AUTH,
        description=f"{user.full_name} logged in",
        user=user,
        request=request,
    )
    return {"success": True, "token": token, "user": user}


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    data: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """Self-registration; always creates an employee account"""
    if not data.email or not data.password or not data.first_name or not data.last_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="First name, last name, email and password are required"
        )

    user = create_user(
        db=db,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        middle_name=data.middle_name,
        employee_id=data.employee_id,
        role=UserRole.EMPLOYEE,
        request=request,
    )
    return {"success": True, "message": "User registered successfully", "user": user}


@router.post("/forgot-password", response_model=SuccessResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """Issue a reset token; the response never reveals whether the account exists"""
    request_password_reset(db, data.email, request=request)
    return {
        "success": True,
        "message": "If an account exists for that email, a password reset link has been sent",
    }


@router.post("/reset-password", response_model=SuccessResponse)
async def reset_password_endpoint(
    data: ResetPasswordRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """Set a new password with a reset token"""
    reset_password(db, data.token, data.new_password, request=request)
    return {"success": True, "message": "Password has been reset"}


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Profile of the authenticated user"""
    return {"success": True, "user": current_user}


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Tokens are stateless; logout is recorded for the audit trail only"""
    log_audit(
        db=db,
        action=AuditAction.LOGOUT,
        category=AuditCategory.AUTH,
        description=f"{current_user.full_name} logged out",
        user=current_user,
        request=request,
    )
    return {"success": True, "message": "Logged out"}
