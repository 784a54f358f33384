"""
Absence service
"""
from datetime import date
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from tkms.models.absence import Absence
from tkms.models.audit_log import AuditAction, AuditCategory
from tkms.models.user import User
from tkms.services.audit_service import log_audit
from tkms.utils.datetime_utils import now_utc

ABSENCE_EXISTS = "Absence already marked for this date"


def create_absence(
    db: Session,
    user_id: int,
    absence_date: date,
    reason: str,
    marked_by: User,
    notes: Optional[str] = None,
    request=None,
) -> Absence:
    """
    Record that a user was absent on a date

    Args:
        db: Database session
        user_id: Absent user
        absence_date: Calendar date of the absence
        reason: Reason for the absence
        marked_by: Admin recording it
        notes: Optional free text
        request: Incoming request for audit context

    Returns:
        Created Absence instance

    Raises:
        HTTPException: 404 if the user does not exist, 400 if an absence is already recorded for the date
    """
    if not db.query(User.id).filter(User.id == user_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    existing = db.query(Absence).filter(Absence.user_id == user_id, Absence.date == absence_date).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ABSENCE_EXISTS)

    now = now_utc()
    absence = Absence(
        user_id=user_id,
        date=absence_date,
        reason=reason,
        notes=notes,
        marked_by=marked_by.id,
        created_at=now,
        updated_at=now,
    )
    db.add(absence)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with an identical request
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ABSENCE_EXISTS)
    db.refresh(absence)

    log_audit(
        db=db,
        action=AuditAction.ABSENCE_MARKED,
        category=AuditCategory.ATTENDANCE,
        description=f"{marked_by.full_name} marked user {user_id} absent on {absence_date}",
        user=marked_by,
        request=request,
        meta={"absenceId": absence.id, "userId": user_id, "date": absence_date, "reason": reason},
    )
    return absence


def list_absences(db: Session, user_id: Optional[int] = None) -> List[Absence]:
    """Absences, newest date first; None returns every user's"""
    query = db.query(Absence).options(joinedload(Absence.user))
    if user_id is not None:
        query = query.filter(Absence.user_id == user_id)
    return query.order_by(Absence.date.desc(), Absence.id.desc()).all()
