"""
Tests for user management endpoints
"""
import re

from fastapi import status

from tkms.models.audit_log import AuditLog
from tkms.models.user import User
from tkms.tests.helpers import PASSWORD, PHOTO, auth_headers, get_auth_token

NEW_USER = {
    "email": "Pedro@Example.com",
    "password": "Secret@123",
    "firstName": "Pedro",
    "lastName": "Penduko",
    "gender": "male",
    "birthday": "1990-06-15",
    "mobileNumber": "09171234567",
}


def test_admin_creates_user(client, db, admin):
    response = client.post("/api/v1/users", json=NEW_USER, headers=auth_headers(client, admin))

    assert response.status_code == status.HTTP_201_CREATED, response.text
    user = response.json()["user"]
    assert user["email"] == "pedro@example.com"
    assert user["role"] == "employee"
    assert user["leaveCredits"] == 5
    assert user["gender"] == "male"
    assert user["mobileNumber"] == "09171234567"
    assert user["fullName"] == "Pedro Penduko"
    assert re.match(r"^ibay-\d{4}$", user["employeeId"])
    assert "password" not in user and "passwordHash" not in user

    log = db.query(AuditLog).filter(AuditLog.action == "USER_CREATED").one()
    assert log.user_id == admin.id
    assert get_auth_token(client, "pedro@example.com", "Secret@123")


def test_duplicate_email(client, admin, employee):
    payload = dict(NEW_USER, email=employee.email)
    response = client.post("/api/v1/users", json=payload, headers=auth_headers(client, admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "User already exists"


def test_duplicate_employee_id(client, admin, employee):
    payload = dict(NEW_USER, employeeId=employee.employee_id)
    response = client.post("/api/v1/users", json=payload, headers=auth_headers(client, admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Employee ID already in use"


def test_only_super_admin_creates_super_admin(client, admin, super_admin):
    payload = dict(NEW_USER, role="super-admin")

    forbidden = client.post("/api/v1/users", json=payload, headers=auth_headers(client, admin))
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    created = client.post("/api/v1/users", json=payload, headers=auth_headers(client, super_admin))
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["user"]["role"] == "super-admin"


def test_employee_cannot_list_or_create(client, employee):
    headers = auth_headers(client, employee)
    assert client.get("/api/v1/users", headers=headers).status_code == status.HTTP_403_FORBIDDEN
    assert client.post("/api/v1/users", json=NEW_USER, headers=headers).status_code == status.HTTP_403_FORBIDDEN


def test_list_filters_by_role(client, admin, employee, other_employee):
    headers = auth_headers(client, admin)
    assert len(client.get("/api/v1/users", headers=headers).json()["users"]) == 3

    employees = client.get("/api/v1/users?role=employee", headers=headers).json()["users"]
    assert {u["email"] for u in employees} == {employee.email, other_employee.email}


def test_self_update_drops_privileged_fields(client, db, employee):
    response = client.patch(
        f"/api/v1/users/{employee.id}",
        json={"mobileNumber": "09998887777", "role": "admin", "leaveCredits": 30, "isActive": False},
        headers=auth_headers(client, employee),
    )

    assert response.status_code == status.HTTP_200_OK
    user = response.json()["user"]
    assert user["mobileNumber"] == "09998887777"
    assert user["role"] == "employee"
    assert user["leaveCredits"] == 5
    assert user["isActive"] is True
    assert db.query(AuditLog).filter(AuditLog.action == "PROFILE_UPDATED").count() == 1


def test_cannot_update_someone_else(client, employee, other_employee):
    response = client.patch(
        f"/api/v1/users/{other_employee.id}", json={"firstName": "Hacked"}, headers=auth_headers(client, employee)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_update_by_query(client, admin, employee):
    headers = auth_headers(client, admin)
    response = client.patch(
        f"/api/v1/users?id={employee.id}", json={"leaveCredits": 12, "role": "admin"}, headers=headers
    )

    assert response.status_code == status.HTTP_200_OK
    user = response.json()["user"]
    assert user["leaveCredits"] == 12
    assert user["role"] == "admin"

    missing_id = client.put("/api/v1/users", json={"firstName": "X"}, headers=headers)
    assert missing_id.status_code == status.HTTP_400_BAD_REQUEST
    assert missing_id.json()["error"] == "User id is required"


def test_admin_cannot_assign_super_admin(client, admin, employee):
    response = client.patch(
        f"/api/v1/users?id={employee.id}", json={"role": "super-admin"}, headers=auth_headers(client, admin)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_email_conflict(client, admin, employee, other_employee):
    response = client.patch(
        f"/api/v1/users?id={employee.id}", json={"email": other_employee.email}, headers=auth_headers(client, admin)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Email already in use"


def test_get_user(client, employee, other_employee, admin):
    own = client.get(f"/api/v1/users/{employee.id}", headers=auth_headers(client, employee))
    assert own.json()["user"]["employeeId"] == "ibay-0001"

    other = client.get(f"/api/v1/users/{other_employee.id}", headers=auth_headers(client, employee))
    assert other.status_code == status.HTTP_403_FORBIDDEN

    missing = client.get("/api/v1/users/9999", headers=auth_headers(client, admin))
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_delete_user(client, db, admin, employee):
    headers = auth_headers(client, admin)

    response = client.delete(f"/api/v1/users?id={employee.id}", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    assert db.query(User).filter(User.email == "juan@example.com").first() is None
    assert db.query(AuditLog).filter(AuditLog.action == "USER_DELETED").count() == 1


def test_cannot_delete_self(client, admin):
    response = client.delete(f"/api/v1/users?id={admin.id}", headers=auth_headers(client, admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "You cannot delete your own account"


def test_admin_cannot_delete_super_admin(client, admin, super_admin):
    response = client.delete(f"/api/v1/users?id={super_admin.id}", headers=auth_headers(client, admin))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_change_own_password(client, employee):
    headers = auth_headers(client, employee)

    wrong = client.post(
        "/api/v1/users/change-password",
        json={"currentPassword": "nope-nope", "newPassword": "NewSecret@1"},
        headers=headers,
    )
    assert wrong.status_code == status.HTTP_400_BAD_REQUEST
    assert wrong.json()["error"] == "Current password is incorrect"

    response = client.post(
        "/api/v1/users/change-password",
        json={"currentPassword": PASSWORD, "newPassword": "NewSecret@1"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert get_auth_token(client, employee.email, "NewSecret@1")


def test_admin_sets_password(client, admin, employee):
    response = client.post(
        "/api/v1/users/password",
        json={"userId": employee.id, "newPassword": "Reset@2026"},
        headers=auth_headers(client, admin),
    )

    assert response.status_code == status.HTTP_200_OK
    assert get_auth_token(client, employee.email, "Reset@2026")
    old = client.post("/api/v1/auth/login", json={"email": employee.email, "password": PASSWORD})
    assert old.status_code == status.HTTP_401_UNAUTHORIZED


def test_employee_cannot_set_password(client, employee, other_employee):
    response = client.post(
        "/api/v1/users/password",
        json={"userId": other_employee.id, "newPassword": "Reset@2026"},
        headers=auth_headers(client, employee),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_upload_profile_photo(client, employee, local_storage):
    response = client.post(
        f"/api/v1/users/{employee.id}/photo", json={"photo": PHOTO}, headers=auth_headers(client, employee)
    )

    assert response.status_code == status.HTTP_200_OK, response.text
    photo_url = response.json()["user"]["photoUrl"]
    assert photo_url.startswith(f"/uploads/profile-photos/{employee.id}-")
    assert (local_storage / photo_url[len("/uploads/"):]).exists()
