"""
User schemas
"""
from datetime import date
from typing import List, Optional

from pydantic import Field, computed_field, field_validator

from tkms.core.constants import MAX_LEAVE_CREDITS
from tkms.models.user import Gender, UserRole
from tkms.schemas.common import CamelModel, LocalDateTime
from tkms.utils.employee_id import calculate_age


class UserBase(CamelModel):
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    birthday: Optional[date] = None
    gender: Optional[Gender] = None
    mobile_number: Optional[str] = None
    sss: Optional[str] = None
    philhealth: Optional[str] = None
    pagibig: Optional[str] = None
    tin: Optional[str] = None
    photo_url: Optional[str] = None


class UserCreate(UserBase):
    """Schema for creating a user (admin)"""
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., min_length=6, max_length=72, description="Initial password")
    first_name: str
    last_name: str
    role: UserRole = Field(default=UserRole.EMPLOYEE)
    employee_id: Optional[str] = Field(None, description="Generated from system settings when omitted")
    leave_credits: Optional[int] = Field(None, ge=0, le=MAX_LEAVE_CREDITS)
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class UserUpdate(UserBase):
    """Schema for updating a user; password changes go through dedicated endpoints"""
    email: Optional[str] = None
    role: Optional[UserRole] = None
    employee_id: Optional[str] = None
    leave_credits: Optional[int] = Field(None, ge=0, le=MAX_LEAVE_CREDITS)
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


class UserOut(CamelModel):
    """User output, never includes password or reset token"""
    id: int
    email: str
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    role: str
    employee_id: Optional[str] = None
    birthday: Optional[date] = None
    gender: Optional[str] = None
    mobile_number: Optional[str] = None
    sss: Optional[str] = None
    philhealth: Optional[str] = None
    pagibig: Optional[str] = None
    tin: Optional[str] = None
    photo_url: Optional[str] = None
    leave_credits: int
    is_active: bool
    created_at: Optional[LocalDateTime] = None
    updated_at: Optional[LocalDateTime] = None

    @computed_field
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @computed_field
    @property
    def age(self) -> Optional[int]:
        return calculate_age(self.birthday) if self.birthday else None


class UserRef(CamelModel):
    """Minimal user for embedding in other resources"""
    id: int
    first_name: str
    last_name: str
    email: str
    employee_id: Optional[str] = None
    photo_url: Optional[str] = None


class UserResponse(CamelModel):
    success: bool = True
    user: UserOut


class UserListResponse(CamelModel):
    success: bool = True
    users: List[UserOut]


class AdminSetPasswordRequest(CamelModel):
    user_id: int
    new_password: str = Field(..., min_length=6, max_length=72)


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=72)


class PhotoUploadRequest(CamelModel):
    photo: str = Field(..., description="Base64 image data URL")
