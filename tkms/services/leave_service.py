"""
Leave request service
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from tkms.core.constants import DEFAULT_LIST_LIMIT, MAX_LEAVE_DAYS
from tkms.models.attendance import AttendanceStatus
from tkms.models.audit_log import AuditAction, AuditCategory
from tkms.models.leave import Leave, LeaveStatus, LeaveType
from tkms.models.user import User
from tkms.services import attendance_service
from tkms.services.audit_service import log_audit
from tkms.services.email_service import (
    admin_emails,
    leave_approved_email,
    leave_rejected_email,
    leave_request_email,
    send_email,
    send_email_to_many,
)
from tkms.services.notification_service import create_notification, notify_admins
from tkms.services.settings_service import get_or_create_settings
from tkms.utils.datetime_utils import now_utc
from tkms.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


def leave_days(start_date: date, end_date: date) -> int:
    """Inclusive number of calendar days"""
    return (end_date - start_date).days + 1


def _insufficient_credits(available: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Insufficient leave credits. You have {available} days available."
    )


def create_leave(
    db: Session,
    user: User,
    leave_type: LeaveType,
    start_date: date,
    end_date: date,
    reason: str,
    request=None,
) -> Leave:
    """
    File a leave request and alert the admins in-app and by email

    Args:
        db: Database session
        user: Employee filing the request
        leave_type: sick, vacation, emergency, personal or other
        start_date: First day of leave
        end_date: Last day of leave (inclusive)
        reason: Reason for the leave
        request: Incoming request for audit context

    Returns:
        Created pending Leave

    Raises:
        HTTPException: 400 if filing is disabled, the range is inverted or too long,
            or credits are insufficient
    """
    system_settings = get_or_create_settings(db)
    if not system_settings.enable_file_leave_request:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filing leave requests is currently disabled"
        )

    if end_date < start_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="End date must be after start date")

    days = leave_days(start_date, end_date)
    if days > MAX_LEAVE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Leave range is too long. A request may cover at most {MAX_LEAVE_DAYS} days."
        )
    if system_settings.enable_leave_credits_management and days > user.leave_credits:
        raise _insufficient_credits(user.leave_credits)

    now = now_utc()
    leave = Leave(
        user_id=user.id,
        leave_type=enum_to_str(leave_type),
        start_date=start_date,
        end_date=end_date,
        reason=reason,
        status=LeaveStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)

    log_audit(
        db=db,
        action=AuditAction.LEAVE_REQUEST_CREATED,
        category=AuditCategory.LEAVE,
        description=f"{user.full_name} requested {days} day(s) of {leave.leave_type} leave",
        user=user,
        request=request,
        meta={"leaveId": leave.id, "startDate": start_date, "endDate": end_date, "days": days},
    )
    notify_admins(
        db,
        title=f"New leave request from {user.full_name}",
        description=f"{leave.leave_type} leave {start_date.isoformat()} to {end_date.isoformat()}",
        link="/admin/leaves",
        category="leave",
        actor_id=user.id,
        meta={"leaveId": leave.id},
    )
    send_email_to_many(
        admin_emails(db),
        subject=f"New Leave Request from {user.full_name}",
        html=leave_request_email(user.full_name, leave.leave_type, start_date, end_date, reason),
    )
    return leave


def list_leaves(
    db: Session,
    user_id: Optional[int] = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> List[Leave]:
    """Leave requests newest first; None returns every user's"""
    query = db.query(Leave).options(joinedload(Leave.user))
    if user_id is not None:
        query = query.filter(Leave.user_id == user_id)
    return query.order_by(Leave.created_at.desc(), Leave.id.desc()).limit(limit).all()


def get_leave(db: Session, leave_id: int) -> Leave:
    leave = db.query(Leave).filter(Leave.id == leave_id).first()
    if not leave:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Leave request not found")
    return leave


def _mark_days_on_leave(db: Session, leave: Leave) -> None:
    day = leave.start_date
    while day <= leave.end_date:
        attendance = attendance_service.upsert_attendance(db, leave.user_id, day)
        if attendance.time_in_at is None:
            attendance.status = AttendanceStatus.ON_LEAVE.value
            attendance.updated_at = now_utc()
        day += timedelta(days=1)
    db.commit()


def review_leave(
    db: Session,
    leave_id: int,
    new_status: LeaveStatus,
    actor: User,
    admin_notes: Optional[str] = None,
    request=None,
) -> Leave:
    """
    Approve or reject a pending leave request

    Approval deducts the leave days from the employee's credits when credit
    management is enabled, and marks the covered attendance days on-leave.
    The employee is notified in-app and by email when mail is configured.

    Raises:
        HTTPException: 400 for an invalid status, an already reviewed request or
            insufficient credits; 404 if the request does not exist
    """
    new_status = LeaveStatus(enum_to_str(new_status))
    if new_status not in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Status must be approved or rejected")

    leave = get_leave(db, leave_id)
    if leave.status != LeaveStatus.PENDING.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Leave request has already been reviewed")

    employee = db.query(User).filter(User.id == leave.user_id).one()
    days = leave.days

    if new_status == LeaveStatus.APPROVED and get_or_create_settings(db).enable_leave_credits_management:
        if days > employee.leave_credits:
            raise _insufficient_credits(employee.leave_credits)
        employee.leave_credits -= days
        employee.updated_at = now_utc()

    leave.status = new_status.value
    leave.admin_notes = admin_notes
    leave.reviewed_by = actor.id
    leave.updated_at = now_utc()
    db.commit()
    db.refresh(leave)

    if new_status == LeaveStatus.APPROVED:
        _mark_days_on_leave(db, leave)

    approved = new_status == LeaveStatus.APPROVED
    log_audit(
        db=db,
        action=AuditAction.LEAVE_REQUEST_APPROVED if approved else AuditAction.LEAVE_REQUEST_REJECTED,
        category=AuditCategory.LEAVE,
        description=f"{actor.full_name} {new_status.value} leave request {leave.id} of {employee.full_name}",
        user=actor,
        request=request,
        meta={"leaveId": leave.id, "days": days, "remainingCredits": employee.leave_credits},
    )
    create_notification(
        db,
        recipient_id=leave.user_id,
        actor_id=actor.id,
        title=f"Your leave request was {new_status.value}",
        description=admin_notes,
        link="/employee/leaves",
        category="leave",
        meta={"leaveId": leave.id},
    )
    if approved:
        send_email(
            employee.email,
            subject="Leave Request Approved",
            html=leave_approved_email(employee.full_name, leave.leave_type, leave.start_date, leave.end_date),
        )
    else:
        send_email(
            employee.email,
            subject="Leave Request Status Update",
            html=leave_rejected_email(
                employee.full_name, leave.leave_type, leave.start_date, leave.end_date, admin_notes
            ),
        )
    return leave


def cancel_leave(db: Session, leave_id: int, actor: User, request=None) -> None:
    """
    Delete a pending leave request (owner or admin)

    Raises:
        HTTPException: 403 for someone else's request, 400 if it is no longer pending
    """
    leave = get_leave(db, leave_id)
    if leave.user_id != actor.id and not actor.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    if leave.status != LeaveStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only pending leave requests can be cancelled"
        )

    db.delete(leave)
    db.commit()

    log_audit(
        db=db,
        action=AuditAction.LEAVE_REQUEST_CANCELLED,
        category=AuditCategory.LEAVE,
        description=f"{actor.full_name} cancelled leave request {leave_id}",
        user=actor,
        request=request,
        meta={"leaveId": leave_id},
    )


def users_on_leave(db: Session, day: date) -> int:
    """Distinct users with an approved leave covering `day`"""
    return (
        db.query(Leave.user_id)
        .filter(
            Leave.status == LeaveStatus.APPROVED.value,
            Leave.start_date <= day,
            Leave.end_date >= day,
        )
        .distinct()
        .count()
    )
