"""
Absence schemas
"""
from datetime import date as date_type
from typing import List, Optional
from pydantic import Field
from tkms.schemas.common import CamelModel, LocalDateTime
from tkms.schemas.user import UserRef


class AbsenceCreate(CamelModel):
    user_id: int
    date: date_type
    reason: str = Field(..., min_length=1)
    notes: Optional[str] = None


class AbsenceOut(CamelModel):
    id: int
    user_id: int
    date: date_type
    reason: str
    notes: Optional[str] = None
    marked_by: Optional[int] = None
    created_at: Optional[LocalDateTime] = None
    user: Optional[UserRef] = None


class AbsenceResponse(CamelModel):
    success: bool = True
    absence: AbsenceOut


class AbsenceListResponse(CamelModel):
    success: bool = True
    absences: List[AbsenceOut]
