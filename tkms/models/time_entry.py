"""
Time entry (punch) model
"""
from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Text
from sqlalchemy.orm import backref, relationship
from sqlalchemy.sql import func
import enum
from tkms.db.base import Base


class TimeEntryType(str, enum.Enum):
    TIME_IN = "time-in"
    TIME_OUT = "time-out"


class TimeEntryStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)  # UTC
    photo_url = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    status = Column(String, default=TimeEntryStatus.APPROVED.value, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    user = relationship("User", backref=backref("time_entries", passive_deletes=True))
