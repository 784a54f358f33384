"""
Tests for absence endpoints
"""
from fastapi import status

from tkms.models.audit_log import AuditLog
from tkms.tests.helpers import auth_headers


def mark(client, headers, user_id, day="2026-01-05"):
    return client.post(
        "/api/v1/absence",
        json={"userId": user_id, "date": day, "reason": "Sick", "notes": "Called in"},
        headers=headers,
    )


def test_admin_marks_absence(client, db, admin, employee):
    response = mark(client, auth_headers(client, admin), employee.id)

    assert response.status_code == status.HTTP_201_CREATED
    absence = response.json()["absence"]
    assert absence["date"] == "2026-01-05"
    assert absence["markedBy"] == admin.id
    assert db.query(AuditLog).filter(AuditLog.action == "ABSENCE_MARKED").count() == 1


def test_duplicate_absence_rejected(client, admin, employee):
    headers = auth_headers(client, admin)
    mark(client, headers, employee.id)
    response = mark(client, headers, employee.id)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Absence already marked for this date"


def test_employee_cannot_mark(client, employee):
    response = mark(client, auth_headers(client, employee), employee.id)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_scoping(client, admin, employee, other_employee):
    headers = auth_headers(client, admin)
    mark(client, headers, employee.id)
    mark(client, headers, other_employee.id)

    assert len(client.get("/api/v1/absence", headers=headers).json()["absences"]) == 2
    filtered = client.get(f"/api/v1/absence?userId={employee.id}", headers=headers).json()["absences"]
    assert [a["userId"] for a in filtered] == [employee.id]

    own = client.get("/api/v1/absence", headers=auth_headers(client, employee)).json()["absences"]
    assert [a["userId"] for a in own] == [employee.id]

    other = client.get(f"/api/v1/absence?userId={other_employee.id}", headers=auth_headers(client, employee))
    assert other.status_code == status.HTTP_403_FORBIDDEN
