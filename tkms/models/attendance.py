"""
Attendance model: one row per user per business day
"""
from sqlalchemy import Column, Integer, Date, DateTime, Float, Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import backref, relationship
from sqlalchemy.sql import func
import enum
from tkms.db.base import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    ON_LEAVE = "on-leave"
    HOLIDAY = "holiday"


class Attendance(Base):
    __tablename__ = "attendances"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)  # business-timezone calendar date
    time_in_entry_id = Column(Integer, ForeignKey("time_entries.id", ondelete="SET NULL"), nullable=True)
    time_out_entry_id = Column(Integer, ForeignKey("time_entries.id", ondelete="SET NULL"), nullable=True)
    # Effective punch instants (UTC); adjustments may override the raw entry times
    time_in_at = Column(DateTime(timezone=True), nullable=True)
    time_out_at = Column(DateTime(timezone=True), nullable=True)
    total_hours = Column(Float, default=0, nullable=False)
    lunch_break_minutes = Column(Integer, default=0, nullable=False)
    worked_hours = Column(Float, default=0, nullable=False)
    overtime_minutes = Column(Integer, default=0, nullable=False)
    overtime_hours = Column(Float, default=0, nullable=False)
    is_late = Column(Boolean, default=False, nullable=False)
    late_minutes = Column(Integer, default=0, nullable=False)
    is_early_out = Column(Boolean, default=False, nullable=False)
    early_out_minutes = Column(Integer, default=0, nullable=False)
    status = Column(String, default=AttendanceStatus.ABSENT.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
    )

    user = relationship("User", backref=backref("attendances", passive_deletes=True))
    time_in_entry = relationship("TimeEntry", foreign_keys=[time_in_entry_id])
    time_out_entry = relationship("TimeEntry", foreign_keys=[time_out_entry_id])
