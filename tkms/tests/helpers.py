"""
Shared test helpers
"""
from sqlalchemy.orm import Session

from tkms.core.security import hash_password
from tkms.models.user import User, UserRole
from tkms.utils.datetime_utils import now_utc

# Tiny valid base64 payload for photo and upload fields
PHOTO = "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQAAAQABAAD/2wBDAAgGBgcGBQgHBwcJ"

PASSWORD = "Password@123"


def make_user(
    db: Session,
    email: str,
    password: str = PASSWORD,
    role: UserRole = UserRole.EMPLOYEE,
    first_name: str = "Test",
    last_name: str = "User",
    employee_id: str = None,
    leave_credits: int = 5,
    is_active: bool = True,
) -> User:
    now = now_utc()
    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role.value,
        employee_id=employee_id,
        leave_credits=leave_credits,
        is_active=is_active,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_auth_token(client, email, password=PASSWORD):
    """Helper function to get auth token"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


def auth_headers(client, user, password=PASSWORD):
    return {"Authorization": f"Bearer {get_auth_token(client, user.email, password)}"}
