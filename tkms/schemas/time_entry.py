"""
Time entry schemas
"""
from typing import List, Optional
from pydantic import AliasChoices, Field
from tkms.models.time_entry import TimeEntryStatus, TimeEntryType
from tkms.schemas.common import CamelModel, LocalDateTime
from tkms.schemas.attendance import AttendanceOut
from tkms.schemas.user import UserRef


class Location(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class TimeEntryCreate(CamelModel):
    type: TimeEntryType
    photo: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("photo", "photoBase64"),
        description="Base64 image data URL",
    )
    location: Optional[Location] = None
    notes: Optional[str] = None
    user_id: Optional[int] = Field(None, description="Admins may punch on behalf of a user")


class TimeEntryStatusUpdate(CamelModel):
    status: TimeEntryStatus


class TimeEntryOut(CamelModel):
    id: int
    user_id: int
    type: str
    timestamp: LocalDateTime
    photo_url: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[LocalDateTime] = None
    user: Optional[UserRef] = None


class TimeEntryResponse(CamelModel):
    success: bool = True
    time_entry: TimeEntryOut


class TimeEntryListResponse(CamelModel):
    success: bool = True
    time_entries: List[TimeEntryOut]


class TimeEntryCreateResponse(CamelModel):
    success: bool = True
    time_entry: TimeEntryOut
    attendance: AttendanceOut
