"""
Database models
"""
from tkms.models.user import User, UserRole, Gender
from tkms.models.time_entry import TimeEntry, TimeEntryType, TimeEntryStatus
from tkms.models.attendance import Attendance, AttendanceStatus
from tkms.models.absence import Absence
from tkms.models.leave import Leave, LeaveType, LeaveStatus
from tkms.models.schedule import Schedule
from tkms.models.time_adjustment import TimeAdjustment, AdjustmentType
from tkms.models.audit_log import AuditLog, AuditAction, AuditCategory, AuditStatus
from tkms.models.notification import Notification
from tkms.models.system_settings import SystemSettings

__all__ = [
    "User",
    "UserRole",
    "Gender",
    "TimeEntry",
    "TimeEntryType",
    "TimeEntryStatus",
    "Attendance",
    "AttendanceStatus",
    "Absence",
    "Leave",
    "LeaveType",
    "LeaveStatus",
    "Schedule",
    "TimeAdjustment",
    "AdjustmentType",
    "AuditLog",
    "AuditAction",
    "AuditCategory",
    "AuditStatus",
    "Notification",
    "SystemSettings",
]
