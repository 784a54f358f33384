"""
Schedule schemas
"""
from typing import List, Optional
from pydantic import Field
from tkms.schemas.common import CamelModel, LocalDateTime
from tkms.schemas.user import UserRef


class ScheduleCreate(CamelModel):
    """Required fields are checked by the service so that omissions surface as 400"""
    user_id: Optional[int] = None
    days: Optional[List[str]] = None
    time_in: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    time_out: Optional[str] = None


class ScheduleUpdate(CamelModel):
    days: Optional[List[str]] = None
    time_in: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    time_out: Optional[str] = None
    is_active: Optional[bool] = None


class ScheduleOut(CamelModel):
    id: int
    user_id: int
    days: List[str]
    time_in: str
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    time_out: str
    is_active: bool
    created_at: Optional[LocalDateTime] = None
    updated_at: Optional[LocalDateTime] = None
    user: Optional[UserRef] = Field(None)


class ScheduleResponse(CamelModel):
    success: bool = True
    schedule: ScheduleOut


class ScheduleListResponse(CamelModel):
    success: bool = True
    schedules: List[ScheduleOut]
