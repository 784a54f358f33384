"""
Attendance aggregation service

An Attendance row is derived state: its effective time-in/time-out come from
the day's punches, overridden by approved time adjustments, and the hour,
lateness and overtime figures are recomputed from those against the user's
active schedule for that weekday.
"""
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from tkms.core.constants import DEFAULT_LIST_LIMIT
from tkms.models.attendance import Attendance, AttendanceStatus
from tkms.models.schedule import Schedule
from tkms.models.time_adjustment import AdjustmentType, TimeAdjustment
from tkms.models.time_entry import TimeEntry, TimeEntryStatus, TimeEntryType
from tkms.services.settings_service import get_or_create_settings
from tkms.utils.datetime_utils import ensure_utc, now_utc, weekday_name
from tkms.utils import time_calc

logger = logging.getLogger(__name__)

TIME_IN_ADJUSTMENTS = (AdjustmentType.LATE_IN.value,)
TIME_OUT_ADJUSTMENTS = (AdjustmentType.EARLY_OUT.value, AdjustmentType.HALF_DAY.value)


def get_active_schedule_for_day(db: Session, user_id: int, day: date) -> Optional[Schedule]:
    """
    The user's active schedule covering the weekday of `day`

    When several active schedules match, the most recently updated wins.
    """
    schedules = (
        db.query(Schedule)
        .filter(Schedule.user_id == user_id, Schedule.is_active == True)  # noqa: E712
        .order_by(Schedule.updated_at.desc(), Schedule.id.desc())
        .all()
    )
    weekday = weekday_name(day)
    for schedule in schedules:
        if weekday in (schedule.days or []):
            return schedule
    return None


def _attendance_query(db: Session, user_id: int, day: date):
    return db.query(Attendance).filter(Attendance.user_id == user_id, Attendance.date == day)


def upsert_attendance(db: Session, user_id: int, day: date) -> Attendance:
    """
    Return the unique Attendance row for (user, day), creating it if missing

    A duplicate insert from a concurrent request trips the (user_id, date)
    unique constraint; the existing row is re-read instead of retrying.
    """
    existing = _attendance_query(db, user_id, day).first()
    if existing:
        return existing

    now = now_utc()
    attendance = Attendance(
        user_id=user_id,
        date=day,
        status=AttendanceStatus.ABSENT.value,
        total_hours=0,
        lunch_break_minutes=0,
        worked_hours=0,
        overtime_minutes=0,
        overtime_hours=0,
        is_late=False,
        late_minutes=0,
        is_early_out=False,
        early_out_minutes=0,
        created_at=now,
        updated_at=now,
    )
    db.add(attendance)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Attendance for user {user_id} on {day} created concurrently, reusing it")
        return _attendance_query(db, user_id, day).one()
    db.refresh(attendance)
    return attendance


def _latest_adjustment(db: Session, user_id: int, day: date, types: Tuple[str, ...]) -> Optional[TimeAdjustment]:
    return (
        db.query(TimeAdjustment)
        .filter(
            TimeAdjustment.user_id == user_id,
            TimeAdjustment.date == day,
            TimeAdjustment.adjustment_type.in_(types),
            TimeAdjustment.status == "approved",
        )
        .order_by(TimeAdjustment.created_at.desc(), TimeAdjustment.id.desc())
        .first()
    )


def _counts(entry: Optional[TimeEntry]) -> bool:
    return entry is not None and entry.status != TimeEntryStatus.REJECTED.value


def effective_punches(db: Session, attendance: Attendance) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Effective (time_in, time_out) for an attendance day

    Rejected punches are ignored; a late-in adjustment replaces time-in,
    early-out and half-day adjustments replace time-out.
    """
    time_in = attendance.time_in_entry.timestamp if _counts(attendance.time_in_entry) else None
    time_out = attendance.time_out_entry.timestamp if _counts(attendance.time_out_entry) else None

    in_adjustment = _latest_adjustment(db, attendance.user_id, attendance.date, TIME_IN_ADJUSTMENTS)
    if in_adjustment:
        time_in = in_adjustment.adjusted_time
    out_adjustment = _latest_adjustment(db, attendance.user_id, attendance.date, TIME_OUT_ADJUSTMENTS)
    if out_adjustment:
        time_out = out_adjustment.adjusted_time

    return ensure_utc(time_in), ensure_utc(time_out)


def recompute_attendance(
    db: Session,
    attendance: Attendance,
    schedule: Optional[Schedule],
    grace_minutes: int = 0,
) -> Attendance:
    """
    Recompute hours, overtime, lateness and early-out for one attendance row

    Without a schedule no lateness, early-out or overtime is computed and
    hours use the raw interval with the statutory break. The caller commits.

    Args:
        db: Database session
        attendance: Row to update in place
        schedule: Active schedule for the day, if any
        grace_minutes: Minutes after the scheduled start before a punch counts as late

    Returns:
        The updated Attendance
    """
    time_in, time_out = effective_punches(db, attendance)
    attendance.time_in_at = time_in
    attendance.time_out_at = time_out

    attendance.total_hours = 0
    attendance.lunch_break_minutes = 0
    attendance.worked_hours = 0
    attendance.overtime_minutes = 0
    attendance.overtime_hours = 0
    attendance.is_late = False
    attendance.late_minutes = 0
    attendance.is_early_out = False
    attendance.early_out_minutes = 0

    if time_in:
        attendance.status = AttendanceStatus.PRESENT.value
        if schedule:
            attendance.is_late = time_calc.is_late(time_in, schedule.time_in, grace_minutes)
            if attendance.is_late:
                # late punches report at least one minute
                attendance.late_minutes = max(1, time_calc.late_minutes(time_in, schedule.time_in))
    elif attendance.status == AttendanceStatus.PRESENT.value:
        attendance.status = AttendanceStatus.ABSENT.value

    if time_out and schedule:
        attendance.is_early_out = time_calc.is_early_out(time_out, schedule.time_out)
        attendance.early_out_minutes = time_calc.early_out_minutes(time_out, schedule.time_out)

    if time_in and time_out:
        if schedule:
            hours = time_calc.calculate_detailed_hours(
                time_in,
                time_out,
                schedule.lunch_start,
                schedule.lunch_end,
                schedule.time_in,
                schedule.time_out,
            )
            overtime = time_calc.overtime_minutes(time_in, time_out, schedule.time_in, schedule.time_out)
        else:
            hours = time_calc.calculate_detailed_hours(time_in, time_out)
            overtime = 0
        attendance.total_hours = hours.total_hours
        attendance.lunch_break_minutes = hours.lunch_break_minutes
        attendance.worked_hours = hours.worked_hours
        attendance.overtime_minutes = overtime
        attendance.overtime_hours = time_calc.round_hours(overtime)

    attendance.updated_at = now_utc()
    return attendance


def recompute_for_day(db: Session, user_id: int, day: date, grace_minutes: Optional[int] = None) -> Attendance:
    """Upsert the (user, day) row, recompute it against the day's schedule and commit"""
    if grace_minutes is None:
        grace_minutes = get_or_create_settings(db).late_grace_minutes

    attendance = upsert_attendance(db, user_id, day)
    schedule = get_active_schedule_for_day(db, user_id, day)
    recompute_attendance(db, attendance, schedule, grace_minutes)
    db.commit()
    db.refresh(attendance)
    return attendance


def apply_time_entry(db: Session, entry: TimeEntry, day: date) -> Attendance:
    """Attach a punch to its attendance day and recompute the day"""
    attendance = upsert_attendance(db, entry.user_id, day)
    if entry.type == TimeEntryType.TIME_IN.value:
        attendance.time_in_entry_id = entry.id
    else:
        attendance.time_out_entry_id = entry.id
    db.flush()
    db.refresh(attendance)
    return recompute_for_day(db, entry.user_id, day)


def list_attendance(
    db: Session,
    user_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> List[Attendance]:
    """
    Attendance rows, newest day first

    Args:
        db: Database session
        user_id: Restrict to one user; None returns every user
        start_date: Inclusive lower bound
        end_date: Inclusive upper bound
        limit: Maximum rows returned
    """
    query = db.query(Attendance).options(joinedload(Attendance.user))
    if user_id is not None:
        query = query.filter(Attendance.user_id == user_id)
    if start_date:
        query = query.filter(Attendance.date >= start_date)
    if end_date:
        query = query.filter(Attendance.date <= end_date)
    return query.order_by(Attendance.date.desc(), Attendance.id.desc()).limit(limit).all()
