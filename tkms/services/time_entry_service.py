"""
Time entry (punch) service
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from tkms.core.constants import DEFAULT_LIST_LIMIT
from tkms.models.attendance import Attendance
from tkms.models.audit_log import AuditAction, AuditCategory
from tkms.models.time_entry import TimeEntry, TimeEntryStatus, TimeEntryType
from tkms.models.user import User
from tkms.services import attendance_service
from tkms.services.audit_service import log_audit
from tkms.services.notification_service import notify_admins
from tkms.services.storage_service import decode_base64_payload, sanitize_filename, save_file
from tkms.utils.datetime_utils import local_date, local_day_bounds, now_utc, to_local
from tkms.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


def create_time_entry(
    db: Session,
    user: User,
    entry_type: TimeEntryType,
    photo: str,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    notes: Optional[str] = None,
    request=None,
) -> Tuple[TimeEntry, Attendance]:
    """
    Record a punch and fold it into the day's attendance

    Args:
        db: Database session
        user: User punching
        entry_type: time-in or time-out
        photo: Base64 image data URL captured at punch time
        latitude: Optional GPS latitude
        longitude: Optional GPS longitude
        notes: Optional free text
        request: Incoming request for audit context

    Returns:
        (created TimeEntry, updated Attendance)

    Raises:
        HTTPException: 400 if the user already has this punch type today or the photo is invalid
    """
    entry_type = TimeEntryType(enum_to_str(entry_type))
    now = now_utc()
    day = local_date(now)

    start, end = local_day_bounds(day)
    duplicate = db.query(TimeEntry).filter(
        TimeEntry.user_id == user.id,
        TimeEntry.type == entry_type.value,
        TimeEntry.timestamp >= start,
        TimeEntry.timestamp < end,
        TimeEntry.status != TimeEntryStatus.REJECTED.value,
    ).first()
    if duplicate:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Already has {entry_type.value} entry for today"
        )

    content, mime = decode_base64_payload(photo)
    owner = sanitize_filename(user.employee_id or f"user-{user.id}")
    stored = save_file(
        f"attendance-photos/{owner}-{entry_type.value}-{now.strftime('%Y%m%dT%H%M%S%fZ')}.jpg",
        content,
        mime or "image/jpeg",
    )

    entry = TimeEntry(
        user_id=user.id,
        type=entry_type.value,
        timestamp=now,
        photo_url=stored.url,
        latitude=latitude,
        longitude=longitude,
        status=TimeEntryStatus.APPROVED.value,
        notes=notes,
        created_at=now,
        updated_at=now,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    attendance = attendance_service.apply_time_entry(db, entry, day)
    logger.info(f"{entry_type.value} recorded for user {user.id} on {day}")

    is_time_in = entry_type == TimeEntryType.TIME_IN
    log_audit(
        db=db,
        action=AuditAction.TIME_IN if is_time_in else AuditAction.TIME_OUT,
        category=AuditCategory.ATTENDANCE,
        description=f"{user.full_name} timed {'in' if is_time_in else 'out'}",
        user=user,
        request=request,
        meta={"timeEntryId": entry.id, "date": day, "isLate": attendance.is_late},
    )
    notify_admins(
        db,
        title=f"{user.full_name} timed {'in' if is_time_in else 'out'}",
        description=to_local(now).strftime("%I:%M %p"),
        link="/admin/attendance",
        category="attendance",
        actor_id=user.id,
        meta={"timeEntryId": entry.id},
    )
    return entry, attendance


def list_time_entries(
    db: Session,
    user_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> List[TimeEntry]:
    """Punches newest first; dates are inclusive business-timezone days"""
    query = db.query(TimeEntry).options(joinedload(TimeEntry.user))
    if user_id is not None:
        query = query.filter(TimeEntry.user_id == user_id)
    if start_date:
        query = query.filter(TimeEntry.timestamp >= local_day_bounds(start_date)[0])
    if end_date:
        query = query.filter(TimeEntry.timestamp < local_day_bounds(end_date)[1])
    return query.order_by(TimeEntry.timestamp.desc(), TimeEntry.id.desc()).limit(limit).all()


def update_time_entry_status(
    db: Session,
    entry_id: int,
    new_status: TimeEntryStatus,
    actor: User,
    request=None,
) -> TimeEntry:
    """
    Approve or reject a punch and recompute its attendance day

    Raises:
        HTTPException: 400 for a status other than approved/rejected, 404 if the entry does not exist
    """
    new_status = TimeEntryStatus(enum_to_str(new_status))
    if new_status not in (TimeEntryStatus.APPROVED, TimeEntryStatus.REJECTED):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Status must be approved or rejected")

    entry = db.query(TimeEntry).filter(TimeEntry.id == entry_id).first()
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time entry not found")

    entry.status = new_status.value
    entry.updated_at = now_utc()
    db.commit()
    db.refresh(entry)

    attendance_service.recompute_for_day(db, entry.user_id, local_date(entry.timestamp))

    log_audit(
        db=db,
        action=AuditAction.TIME_ENTRY_REVIEWED,
        category=AuditCategory.ATTENDANCE,
        description=f"{actor.full_name} marked time entry {entry.id} {new_status.value}",
        user=actor,
        request=request,
        meta={"timeEntryId": entry.id, "status": new_status.value},
    )
    return entry
