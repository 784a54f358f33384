"""
Tests for attendance listing and ownership rules
"""
from datetime import date

from fastapi import status

from tkms.services.attendance_service import upsert_attendance
from tkms.tests.helpers import auth_headers


def test_employee_sees_only_own_rows(client, db, employee, other_employee):
    upsert_attendance(db, employee.id, date(2026, 1, 5))
    upsert_attendance(db, other_employee.id, date(2026, 1, 5))

    response = client.get("/api/v1/attendance", headers=auth_headers(client, employee))
    assert response.status_code == status.HTTP_200_OK
    rows = response.json()["attendances"]
    assert [r["userId"] for r in rows] == [employee.id]


def test_employee_cannot_request_other_user(client, employee, other_employee):
    response = client.get(
        f"/api/v1/attendance?userId={other_employee.id}", headers=auth_headers(client, employee)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {
        "success": False,
        "error": "Forbidden",
        "status_code": 403,
        "path": "/api/v1/attendance",
    }


def test_admin_filters_by_user_and_dates(client, db, admin, employee, other_employee):
    for day in (date(2026, 1, 5), date(2026, 1, 6), date(2026, 1, 7)):
        upsert_attendance(db, employee.id, day)
    upsert_attendance(db, other_employee.id, date(2026, 1, 6))

    response = client.get(
        f"/api/v1/attendance?userId={employee.id}&startDate=2026-01-06&endDate=2026-01-07",
        headers=auth_headers(client, admin),
    )
    rows = response.json()["attendances"]
    assert [r["date"] for r in rows] == ["2026-01-07", "2026-01-06"]
    assert rows[0]["user"]["firstName"] == "Juan"


def test_admin_lists_everyone(client, db, admin, employee, other_employee):
    upsert_attendance(db, employee.id, date(2026, 1, 5))
    upsert_attendance(db, other_employee.id, date(2026, 1, 5))

    response = client.get("/api/v1/attendance", headers=auth_headers(client, admin))
    assert len(response.json()["attendances"]) == 2


def test_unversioned_path_serves_same_routes(client, employee):
    response = client.get("/api/attendance", headers=auth_headers(client, employee))
    assert response.status_code == status.HTTP_200_OK
    assert "X-API-Version" not in response.headers
