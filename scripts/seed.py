"""
Seed a development database with a super-admin, an admin and sample employees.
Existing accounts (matched by email) are left unchanged. Run from the repository
root with .env loaded.

Usage:
  python scripts/seed.py
  python scripts/seed.py --password Secret@123
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tkms.core.config import settings
from tkms.core.constants import WEEKDAYS
from tkms.db.session import SessionLocal
from tkms.models.user import UserRole
from tkms.services.schedule_service import create_schedule
from tkms.services.user_service import create_user, ensure_initial_super_admin, get_user_by_email

SAMPLE_USERS = [
    ("admin@tkms.local", "Ada", "Reyes", UserRole.ADMIN),
    ("juan@tkms.local", "Juan", "Dela Cruz", UserRole.EMPLOYEE),
    ("maria@tkms.local", "Maria", "Santos", UserRole.EMPLOYEE),
]


def main():
    parser = argparse.ArgumentParser(description="Seed sample users")
    parser.add_argument("--password", default="Password@123", help="Password for the sample users")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        ensure_initial_super_admin(db, settings.INITIAL_ADMIN_EMAIL, settings.INITIAL_ADMIN_PASSWORD)
        for email, first_name, last_name, role in SAMPLE_USERS:
            if get_user_by_email(db, email):
                print(f"Exists: {email}")
                continue
            user = create_user(
                db=db,
                email=email,
                password=args.password,
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
            if role == UserRole.EMPLOYEE:
                create_schedule(
                    db,
                    user_id=user.id,
                    days=WEEKDAYS[:5],
                    time_in="08:00",
                    time_out="17:00",
                    lunch_start="12:00",
                    lunch_end="13:00",
                )
            print(f"Created {role.value}: {email} ({user.employee_id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
