"""
Leave schemas
"""
from datetime import date
from typing import List, Optional
from pydantic import Field
from tkms.models.leave import LeaveStatus, LeaveType
from tkms.schemas.common import CamelModel, LocalDateTime
from tkms.schemas.user import UserRef


class LeaveCreate(CamelModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1)


class LeaveReview(CamelModel):
    status: LeaveStatus
    admin_notes: Optional[str] = None


class LeaveOut(CamelModel):
    id: int
    user_id: int
    leave_type: str
    start_date: date
    end_date: date
    days: int
    reason: str
    status: str
    admin_notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    created_at: Optional[LocalDateTime] = None
    updated_at: Optional[LocalDateTime] = None
    user: Optional[UserRef] = None


class LeaveResponse(CamelModel):
    success: bool = True
    leave: LeaveOut


class LeaveListResponse(CamelModel):
    success: bool = True
    leaves: List[LeaveOut]
