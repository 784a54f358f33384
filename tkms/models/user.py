"""
User model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date
from sqlalchemy.sql import func
import enum
from tkms.db.base import Base
from tkms.core.constants import DEFAULT_LEAVE_CREDITS


class UserRole(str, enum.Enum):
    EMPLOYEE = "employee"
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)  # stored lower-cased
    password_hash = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    middle_name = Column(String, nullable=True)
    last_name = Column(String, nullable=False)
    role = Column(String, default=UserRole.EMPLOYEE.value, nullable=False)
    employee_id = Column(String, unique=True, nullable=True, index=True)
    birthday = Column(Date, nullable=True)
    gender = Column(String, nullable=True)
    mobile_number = Column(String, nullable=True)
    # Government contribution numbers
    sss = Column(String, nullable=True)
    philhealth = Column(String, nullable=True)
    pagibig = Column(String, nullable=True)
    tin = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    leave_credits = Column(Integer, default=DEFAULT_LEAVE_CREDITS, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    reset_password_token = Column(String, nullable=True, index=True)
    reset_password_expiry = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value)
