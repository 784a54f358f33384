"""
Time adjustment service

Manual corrections are gated by system settings flags: the verbal
agreements switch enables the feature as a whole, and each adjustment type
has its own switch.
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from tkms.models.audit_log import AuditAction, AuditCategory
from tkms.models.system_settings import SystemSettings
from tkms.models.time_adjustment import AdjustmentType, TimeAdjustment
from tkms.models.user import User
from tkms.services import attendance_service
from tkms.services.audit_service import log_audit
from tkms.services.notification_service import create_notification
from tkms.services.settings_service import get_or_create_settings
from tkms.utils.datetime_utils import combine_local, now_utc
from tkms.utils.enums import enum_to_str
from tkms.utils.time_calc import is_valid_hhmm

logger = logging.getLogger(__name__)

# adjustment type -> (settings flag, message when the flag is off)
TYPE_FLAGS = {
    AdjustmentType.EARLY_OUT: ("allow_early_out", "Early out adjustments are disabled"),
    AdjustmentType.HALF_DAY: ("allow_half_day", "Half day adjustments are disabled"),
    AdjustmentType.LATE_IN: ("allow_late_in", "Late in adjustments are disabled"),
}


def check_adjustment_allowed(system_settings: SystemSettings, adjustment_type: AdjustmentType) -> None:
    """
    Raise 400 when the feature or the specific adjustment type is switched off
    """
    if not system_settings.enable_verbal_agreements:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Manual time adjustments are currently disabled"
        )
    flag = TYPE_FLAGS.get(adjustment_type)
    if flag and not getattr(system_settings, flag[0]):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=flag[1])


def create_adjustment(
    db: Session,
    user_id: int,
    adjustment_type: AdjustmentType,
    adjustment_date: date,
    adjusted_time: str,
    reason: str,
    actor: User,
    original_time: Optional[str] = None,
    notes: Optional[str] = None,
    request=None,
) -> TimeAdjustment:
    """
    Create an approved adjustment and apply it to the day's attendance

    late-in replaces the effective time-in; early-out and half-day replace
    the effective time-out; other is recorded without touching attendance.

    Args:
        db: Database session
        user_id: Employee whose day is corrected
        adjustment_type: Kind of correction
        adjustment_date: Business-timezone date being corrected
        adjusted_time: Corrected time of day, HH:mm
        reason: Why the correction was agreed
        actor: Admin approving the adjustment
        original_time: Recorded time of day being replaced, HH:mm
        notes: Optional free text
        request: Incoming request for audit context

    Returns:
        Created TimeAdjustment

    Raises:
        HTTPException: 400 when disabled by settings or times are malformed, 404 for an unknown user
    """
    adjustment_type = AdjustmentType(enum_to_str(adjustment_type))
    check_adjustment_allowed(get_or_create_settings(db), adjustment_type)

    if not is_valid_hhmm(adjusted_time):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="adjustedTime must be in HH:mm format")
    if original_time and not is_valid_hhmm(original_time):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="originalTime must be in HH:mm format")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    now = now_utc()
    adjustment = TimeAdjustment(
        user_id=user_id,
        adjustment_type=adjustment_type.value,
        date=adjustment_date,
        original_time=combine_local(adjustment_date, original_time) if original_time else None,
        adjusted_time=combine_local(adjustment_date, adjusted_time),
        reason=reason,
        approved_by=actor.id,
        notes=notes,
        status="approved",
        created_at=now,
        updated_at=now,
    )
    db.add(adjustment)
    db.commit()
    db.refresh(adjustment)

    if adjustment_type != AdjustmentType.OTHER:
        attendance = attendance_service.recompute_for_day(db, user_id, adjustment_date)
        logger.info(
            f"Applied {adjustment_type.value} adjustment {adjustment.id} to attendance {attendance.id}"
        )

    log_audit(
        db=db,
        action=AuditAction.TIME_ADJUSTMENT_CREATED,
        category=AuditCategory.ATTENDANCE,
        description=f"{actor.full_name} recorded a {adjustment_type.value} adjustment for {user.full_name} on {adjustment_date}",
        user=actor,
        request=request,
        meta={"adjustmentId": adjustment.id, "userId": user_id, "type": adjustment_type.value},
    )
    create_notification(
        db,
        recipient_id=user_id,
        actor_id=actor.id,
        title="A time adjustment was recorded",
        description=f"{adjustment_type.value} on {adjustment_date.isoformat()} at {adjusted_time}",
        link="/employee/attendance",
        category="attendance",
        meta={"adjustmentId": adjustment.id},
    )
    return adjustment


def list_adjustments(db: Session, user_id: Optional[int] = None) -> List[TimeAdjustment]:
    """Adjustments newest first"""
    query = db.query(TimeAdjustment).options(joinedload(TimeAdjustment.user))
    if user_id is not None:
        query = query.filter(TimeAdjustment.user_id == user_id)
    return query.order_by(TimeAdjustment.created_at.desc(), TimeAdjustment.id.desc()).all()
