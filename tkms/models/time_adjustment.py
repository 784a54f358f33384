"""
Manual time adjustment model
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from tkms.db.base import Base


class AdjustmentType(str, enum.Enum):
    EARLY_OUT = "early-out"
    HALF_DAY = "half-day"
    LATE_IN = "late-in"
    OTHER = "other"


class TimeAdjustment(Base):
    __tablename__ = "time_adjustments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    adjustment_type = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    original_time = Column(DateTime(timezone=True), nullable=True)
    adjusted_time = Column(DateTime(timezone=True), nullable=False)
    reason = Column(Text, nullable=False)
    approved_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String, default="approved", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    approver = relationship("User", foreign_keys=[approved_by])
