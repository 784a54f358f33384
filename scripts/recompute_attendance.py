"""
Re-run attendance aggregation over a date range against the current schedules,
adjustments and grace setting. Run from the repository root with .env loaded.

Usage:
  python scripts/recompute_attendance.py --userId 3 --start 2026-01-01 --end 2026-01-31
  python scripts/recompute_attendance.py --all --start 2026-01-01 --end 2026-01-31 --dry-run
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tkms.db.session import SessionLocal
from tkms.models.attendance import Attendance
from tkms.models.user import User
from tkms.services.attendance_service import (
    get_active_schedule_for_day,
    recompute_attendance,
)
from tkms.services.settings_service import get_or_create_settings
from tkms.utils.datetime_utils import parse_date


def _metrics(attendance: Attendance) -> tuple:
    return (
        attendance.status,
        attendance.worked_hours,
        attendance.overtime_minutes,
        attendance.is_late,
        attendance.late_minutes,
        attendance.early_out_minutes,
    )


def main():
    parser = argparse.ArgumentParser(description="Recompute attendance rows")
    who = parser.add_mutually_exclusive_group(required=True)
    who.add_argument("--userId", type=int, dest="user_id", help="Recompute one user")
    who.add_argument("--all", action="store_true", help="Recompute every user")
    parser.add_argument("--start", required=True, help="First date, YYYY-MM-DD")
    parser.add_argument("--end", required=True, help="Last date (inclusive), YYYY-MM-DD")
    parser.add_argument("--dry-run", action="store_true", help="Report changes without saving")
    args = parser.parse_args()

    start, end = parse_date(args.start), parse_date(args.end)
    if end < start:
        parser.error("--end must not be before --start")

    db = SessionLocal()
    try:
        grace = get_or_create_settings(db).late_grace_minutes
        user_ids = [args.user_id] if args.user_id else [u.id for u in db.query(User.id).all()]

        changed = 0
        scanned = 0
        for user_id in user_ids:
            rows = (
                db.query(Attendance)
                .filter(Attendance.user_id == user_id, Attendance.date >= start, Attendance.date <= end)
                .order_by(Attendance.date)
                .all()
            )
            for attendance in rows:
                scanned += 1
                before = _metrics(attendance)
                schedule = get_active_schedule_for_day(db, user_id, attendance.date)
                recompute_attendance(db, attendance, schedule, grace)
                after = _metrics(attendance)
                if before != after:
                    changed += 1
                    print(f"user={user_id} date={attendance.date}: {before} -> {after}")

        if args.dry_run:
            db.rollback()
            print(f"Dry run: {changed} of {scanned} rows would change")
        else:
            db.commit()
            print(f"Updated {changed} of {scanned} rows")
    finally:
        db.close()


if __name__ == "__main__":
    main()
