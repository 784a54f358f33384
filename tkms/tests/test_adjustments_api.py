"""
Tests for time adjustment endpoints
"""
from fastapi import status

from tkms.core.constants import WEEKDAYS
from tkms.models.audit_log import AuditLog
from tkms.services.schedule_service import create_schedule
from tkms.services.settings_service import get_or_create_settings
from tkms.tests.helpers import auth_headers


def adjustment_payload(user_id, **overrides):
    payload = {
        "userId": user_id,
        "adjustmentType": "late-in",
        "date": "2026-01-05",
        "adjustedTime": "08:00",
        "originalTime": "09:10",
        "reason": "Traffic on EDSA, agreed verbally",
    }
    payload.update(overrides)
    return payload


def test_admin_records_adjustment(client, db, admin, employee):
    headers = auth_headers(client, admin)
    response = client.post("/api/v1/time-adjustments", json=adjustment_payload(employee.id), headers=headers)

    assert response.status_code == status.HTTP_201_CREATED, response.text
    adjustment = response.json()["adjustment"]
    assert adjustment["adjustmentType"] == "late-in"
    assert adjustment["status"] == "approved"
    assert adjustment["approvedBy"] == admin.id
    assert adjustment["adjustedTime"].startswith("2026-01-05T08:00")
    assert db.query(AuditLog).filter(AuditLog.action == "TIME_ADJUSTMENT_CREATED").count() == 1

    attendance = client.get(f"/api/v1/attendance?userId={employee.id}", headers=headers).json()["attendances"]
    assert attendance[0]["timeIn"].startswith("2026-01-05T08:00")
    assert attendance[0]["status"] == "present"


def test_other_adjustment_leaves_attendance_alone(client, admin, employee):
    headers = auth_headers(client, admin)
    response = client.post(
        "/api/v1/time-adjustments",
        json=adjustment_payload(employee.id, adjustmentType="other", originalTime=None),
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED

    attendance = client.get(f"/api/v1/attendance?userId={employee.id}", headers=headers).json()["attendances"]
    assert attendance == []


def test_list_filters_by_user(client, admin, employee, other_employee):
    headers = auth_headers(client, admin)
    client.post("/api/v1/time-adjustments", json=adjustment_payload(employee.id), headers=headers)
    client.post("/api/v1/time-adjustments", json=adjustment_payload(other_employee.id), headers=headers)

    assert len(client.get("/api/v1/time-adjustments", headers=headers).json()["adjustments"]) == 2
    filtered = client.get(f"/api/v1/time-adjustments?userId={employee.id}", headers=headers).json()["adjustments"]
    assert [a["userId"] for a in filtered] == [employee.id]


def test_employee_forbidden(client, employee):
    headers = auth_headers(client, employee)
    assert client.get("/api/v1/time-adjustments", headers=headers).status_code == status.HTTP_403_FORBIDDEN
    response = client.post("/api/v1/time-adjustments", json=adjustment_payload(employee.id), headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_feature_switched_off(client, db, admin, employee):
    row = get_or_create_settings(db)
    row.enable_verbal_agreements = False
    db.commit()

    response = client.post(
        "/api/v1/time-adjustments", json=adjustment_payload(employee.id), headers=auth_headers(client, admin)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Manual time adjustments are currently disabled"


def test_type_switched_off(client, db, admin, employee):
    row = get_or_create_settings(db)
    row.allow_early_out = False
    db.commit()

    response = client.post(
        "/api/v1/time-adjustments",
        json=adjustment_payload(employee.id, adjustmentType="early-out", adjustedTime="16:00", originalTime=None),
        headers=auth_headers(client, admin),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Early out adjustments are disabled"


def test_bad_time_format(client, admin, employee):
    response = client.post(
        "/api/v1/time-adjustments",
        json=adjustment_payload(employee.id, adjustedTime="8 o'clock"),
        headers=auth_headers(client, admin),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "adjustedTime must be in HH:mm format"


def test_early_out_allowed(client, db, admin, employee):
    create_schedule(db, user_id=employee.id, days=WEEKDAYS[:5], time_in="08:00", time_out="17:00")
    assert get_or_create_settings(db).allow_early_out is True

    headers = auth_headers(client, admin)
    response = client.post(
        "/api/v1/time-adjustments",
        json=adjustment_payload(employee.id, adjustmentType="early-out", adjustedTime="16:00", originalTime=None),
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    assert response.json()["adjustment"]["adjustmentType"] == "early-out"

    attendance = client.get(f"/api/v1/attendance?userId={employee.id}", headers=headers).json()["attendances"]
    assert attendance[0]["timeOut"].startswith("2026-01-05T16:00")
    assert attendance[0]["isEarlyOut"] is True
    assert attendance[0]["earlyOutMinutes"] == 60
