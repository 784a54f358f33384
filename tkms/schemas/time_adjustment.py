"""
Time adjustment schemas
"""
from datetime import date as date_type
from typing import List, Optional
from pydantic import Field
from tkms.models.time_adjustment import AdjustmentType
from tkms.schemas.common import CamelModel, LocalDateTime
from tkms.schemas.user import UserRef


class TimeAdjustmentCreate(CamelModel):
    user_id: int
    adjustment_type: AdjustmentType
    date: date_type
    adjusted_time: str = Field(..., description="HH:mm in the business timezone")
    original_time: Optional[str] = Field(None, description="HH:mm in the business timezone")
    reason: str = Field(..., min_length=1)
    notes: Optional[str] = None


class TimeAdjustmentOut(CamelModel):
    id: int
    user_id: int
    adjustment_type: str
    date: date_type
    original_time: Optional[LocalDateTime] = None
    adjusted_time: LocalDateTime
    reason: str
    approved_by: Optional[int] = None
    notes: Optional[str] = None
    status: str
    created_at: Optional[LocalDateTime] = None
    user: Optional[UserRef] = None


class TimeAdjustmentResponse(CamelModel):
    success: bool = True
    adjustment: TimeAdjustmentOut


class TimeAdjustmentListResponse(CamelModel):
    success: bool = True
    adjustments: List[TimeAdjustmentOut]
