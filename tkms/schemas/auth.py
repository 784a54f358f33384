"""
Authentication schemas
"""
from typing import Optional
from pydantic import Field
from tkms.schemas.common import CamelModel
from tkms.schemas.user import UserOut


class LoginRequest(CamelModel):
    """Login request; missing fields are reported as 400 by the endpoint"""
    email: Optional[str] = Field(None, description="Account email")
    password: Optional[str] = Field(None, description="Password")


class LoginResponse(CamelModel):
    success: bool = True
    token: str
    user: UserOut


class RegisterRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    employee_id: Optional[str] = None


class RegisterResponse(CamelModel):
    success: bool = True
    message: str
    user: UserOut


class ForgotPasswordRequest(CamelModel):
    email: Optional[str] = None


class ResetPasswordRequest(CamelModel):
    token: Optional[str] = None
    new_password: Optional[str] = None
