"""
Audit log model (append-only)
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Text
from sqlalchemy.sql import func
import enum
from tkms.db.base import Base


class AuditCategory(str, enum.Enum):
    AUTH = "AUTH"
    ATTENDANCE = "ATTENDANCE"
    LEAVE = "LEAVE"
    SCHEDULE = "SCHEDULE"
    USER = "USER"
    SYSTEM = "SYSTEM"


class AuditStatus(str, enum.Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    user_name = Column(String, nullable=False)
    user_role = Column(String, nullable=False)
    action = Column(String, nullable=False, index=True)  # e.g. LOGIN, TIME_IN, SCHEDULE_CREATED
    category = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    meta_json = Column(JSON, nullable=True)
    status = Column(String, default=AuditStatus.SUCCESS.value, nullable=False)
    # Note: server_default handled by migration (CURRENT_TIMESTAMP for SQLite, now() for PostgreSQL)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False, index=True)


class AuditAction(str, enum.Enum):
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    LOGIN_FAILED = "LOGIN_FAILED"
    REGISTER = "REGISTER"
    PASSWORD_RESET_REQUESTED = "PASSWORD_RESET_REQUESTED"
    PASSWORD_RESET = "PASSWORD_RESET"
    PASSWORD_CHANGED = "PASSWORD_CHANGED"
    TIME_IN = "TIME_IN"
    TIME_OUT = "TIME_OUT"
    TIME_ENTRY_REVIEWED = "TIME_ENTRY_REVIEWED"
    TIME_ADJUSTMENT_CREATED = "TIME_ADJUSTMENT_CREATED"
    ABSENCE_MARKED = "ABSENCE_MARKED"
    LEAVE_REQUEST_CREATED = "LEAVE_REQUEST_CREATED"
    LEAVE_REQUEST_APPROVED = "LEAVE_REQUEST_APPROVED"
    LEAVE_REQUEST_REJECTED = "LEAVE_REQUEST_REJECTED"
    LEAVE_REQUEST_CANCELLED = "LEAVE_REQUEST_CANCELLED"
    SCHEDULE_CREATED = "SCHEDULE_CREATED"
    SCHEDULE_UPDATED = "SCHEDULE_UPDATED"
    SCHEDULE_DELETED = "SCHEDULE_DELETED"
    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    PROFILE_UPDATED = "PROFILE_UPDATED"
    FILE_UPLOADED = "FILE_UPLOADED"
    SYSTEM_ERROR = "SYSTEM_ERROR"
    SETTINGS_UPDATED = "SETTINGS_UPDATED"
