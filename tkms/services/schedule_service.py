"""
Work schedule service
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from tkms.core.constants import WEEKDAYS
from tkms.models.audit_log import AuditAction, AuditCategory
from tkms.models.schedule import Schedule
from tkms.models.user import User
from tkms.services.audit_service import log_audit
from tkms.services.notification_service import create_notification
from tkms.utils.datetime_utils import now_utc
from tkms.utils.time_calc import hhmm_to_minutes, is_valid_hhmm

logger = logging.getLogger(__name__)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def normalize_days(days: Optional[List[str]]) -> List[str]:
    """Lower-case, de-duplicate and order weekday names Monday first"""
    if not days:
        raise _bad_request("At least one day is required")
    normalized = {d.strip().lower() for d in days}
    unknown = normalized - set(WEEKDAYS)
    if unknown:
        raise _bad_request(f"Invalid day(s): {', '.join(sorted(unknown))}")
    return [d for d in WEEKDAYS if d in normalized]


def validate_schedule_times(
    time_in: str,
    time_out: str,
    lunch_start: Optional[str] = None,
    lunch_end: Optional[str] = None,
) -> None:
    """
    Validate HH:mm fields and their ordering

    Raises:
        HTTPException: 400 with a message naming the offending field
    """
    for label, value in (("timeIn", time_in), ("timeOut", time_out)):
        if not is_valid_hhmm(value):
            raise _bad_request(f"{label} must be in HH:mm format")
    for label, value in (("lunchStart", lunch_start), ("lunchEnd", lunch_end)):
        if value and not is_valid_hhmm(value):
            raise _bad_request(f"{label} must be in HH:mm format")

    if hhmm_to_minutes(time_out) <= hhmm_to_minutes(time_in):
        raise _bad_request("Time out must be after time in")

    if bool(lunch_start) != bool(lunch_end):
        raise _bad_request("lunchStart and lunchEnd must be provided together")
    if lunch_start and lunch_end and hhmm_to_minutes(lunch_end) <= hhmm_to_minutes(lunch_start):
        raise _bad_request("Lunch end must be after lunch start")


def _deactivate_active_schedules(db: Session, user_id: int, keep_id: Optional[int] = None) -> int:
    query = db.query(Schedule).filter(Schedule.user_id == user_id, Schedule.is_active == True)  # noqa: E712
    if keep_id is not None:
        query = query.filter(Schedule.id != keep_id)
    return query.update({Schedule.is_active: False, Schedule.updated_at: now_utc()}, synchronize_session=False)


def _notify_schedule_change(db: Session, schedule: Schedule, actor: User, title: str) -> None:
    create_notification(
        db,
        recipient_id=schedule.user_id,
        actor_id=actor.id,
        title=title,
        description=f"{', '.join(d.capitalize() for d in schedule.days)} {schedule.time_in}-{schedule.time_out}",
        link="/employee/schedule",
        category="schedule",
        meta={"scheduleId": schedule.id},
    )


def create_schedule(
    db: Session,
    user_id: Optional[int],
    days: Optional[List[str]],
    time_in: Optional[str],
    time_out: Optional[str],
    lunch_start: Optional[str] = None,
    lunch_end: Optional[str] = None,
    actor: Optional[User] = None,
    request=None,
) -> Schedule:
    """
    Create a user's schedule, deactivating every previously active one

    Args:
        db: Database session
        user_id: Owner of the schedule
        days: Weekday names covered by the schedule
        time_in: Scheduled start, HH:mm
        time_out: Scheduled end, HH:mm (must be after time_in)
        lunch_start: Optional lunch window start, HH:mm
        lunch_end: Optional lunch window end, HH:mm
        actor: Admin creating the schedule
        request: Incoming request for audit context

    Returns:
        The new active Schedule

    Raises:
        HTTPException: 400 on missing or invalid fields, 404 if the user does not exist
    """
    if not user_id or not days or not time_in or not time_out:
        raise _bad_request("userId, days, timeIn and timeOut are required")

    normalized_days = normalize_days(days)
    validate_schedule_times(time_in, time_out, lunch_start, lunch_end)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    deactivated = _deactivate_active_schedules(db, user_id)

    now = now_utc()
    schedule = Schedule(
        user_id=user_id,
        days=normalized_days,
        time_in=time_in,
        lunch_start=lunch_start or None,
        lunch_end=lunch_end or None,
        time_out=time_out,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    logger.info(f"Schedule {schedule.id} created for user {user_id}; {deactivated} previous deactivated")

    if actor:
        log_audit(
            db=db,
            action=AuditAction.SCHEDULE_CREATED,
            category=AuditCategory.SCHEDULE,
            description=f"{actor.full_name} created a schedule for {user.full_name}",
            user=actor,
            request=request,
            meta={"scheduleId": schedule.id, "userId": user_id, "deactivated": deactivated},
        )
        _notify_schedule_change(db, schedule, actor, "Your work schedule was updated")

    return schedule


def list_schedules(db: Session, user_id: Optional[int] = None) -> List[Schedule]:
    """Active schedules, optionally for one user, most recently updated first"""
    query = db.query(Schedule).options(joinedload(Schedule.user)).filter(Schedule.is_active == True)  # noqa: E712
    if user_id is not None:
        query = query.filter(Schedule.user_id == user_id)
    return query.order_by(Schedule.updated_at.desc(), Schedule.id.desc()).all()


def get_schedule(db: Session, schedule_id: int) -> Schedule:
    schedule = db.query(Schedule).filter(Schedule.id == schedule_id).first()
    if not schedule:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    return schedule


def update_schedule(
    db: Session,
    schedule_id: int,
    changes: Dict[str, Any],
    actor: User,
    request=None,
) -> Schedule:
    """
    Update a schedule; the merged result is validated before it is saved

    Re-activating a schedule deactivates the user's other active schedules.
    """
    schedule = get_schedule(db, schedule_id)

    days = normalize_days(changes["days"]) if "days" in changes else schedule.days
    time_in = changes["time_in"] if "time_in" in changes else schedule.time_in
    time_out = changes["time_out"] if "time_out" in changes else schedule.time_out
    lunch_start = changes["lunch_start"] if "lunch_start" in changes else schedule.lunch_start
    lunch_end = changes["lunch_end"] if "lunch_end" in changes else schedule.lunch_end
    validate_schedule_times(time_in, time_out, lunch_start, lunch_end)

    schedule.days = days
    schedule.time_in = time_in
    schedule.time_out = time_out
    schedule.lunch_start = lunch_start or None
    schedule.lunch_end = lunch_end or None
    if changes.get("is_active") is not None:
        schedule.is_active = changes["is_active"]
        if schedule.is_active:
            _deactivate_active_schedules(db, schedule.user_id, keep_id=schedule.id)
    schedule.updated_at = now_utc()
    db.commit()
    db.refresh(schedule)

    log_audit(
        db=db,
        action=AuditAction.SCHEDULE_UPDATED,
        category=AuditCategory.SCHEDULE,
        description=f"{actor.full_name} updated schedule {schedule.id}",
        user=actor,
        request=request,
        meta={"scheduleId": schedule.id, "changes": changes},
    )
    _notify_schedule_change(db, schedule, actor, "Your work schedule was changed")
    return schedule


def delete_schedule(db: Session, schedule_id: int, actor: User, request=None) -> None:
    """Delete a schedule and tell its owner"""
    schedule = get_schedule(db, schedule_id)
    owner_id = schedule.user_id
    db.delete(schedule)
    db.commit()

    log_audit(
        db=db,
        action=AuditAction.SCHEDULE_DELETED,
        category=AuditCategory.SCHEDULE,
        description=f"{actor.full_name} deleted schedule {schedule_id}",
        user=actor,
        request=request,
        meta={"scheduleId": schedule_id, "userId": owner_id},
    )
    create_notification(
        db,
        recipient_id=owner_id,
        actor_id=actor.id,
        title="Your work schedule was removed",
        link="/employee/schedule",
        category="schedule",
        meta={"scheduleId": schedule_id},
    )
