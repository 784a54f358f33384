"""
Work schedule model
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, String, Boolean, JSON
from sqlalchemy.orm import backref, relationship
from sqlalchemy.sql import func
from tkms.db.base import Base


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    days = Column(JSON, nullable=False)  # ["monday", ...]
    time_in = Column(String(5), nullable=False)  # HH:mm
    lunch_start = Column(String(5), nullable=True)
    lunch_end = Column(String(5), nullable=True)
    time_out = Column(String(5), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    user = relationship("User", backref=backref("schedules", passive_deletes=True))
