"""
Tests for audit log endpoints
"""
from datetime import timedelta

from fastapi import status

from tkms.models.audit_log import AuditAction, AuditCategory, AuditLog
from tkms.services.audit_service import log_audit
from tkms.tests.helpers import auth_headers
from tkms.utils.datetime_utils import now_utc


def seed_logs(db, actor):
    log_audit(db, AuditAction.SCHEDULE_CREATED, AuditCategory.SCHEDULE, "Created a schedule for Juan", user=actor)
    log_audit(db, AuditAction.SCHEDULE_UPDATED, AuditCategory.SCHEDULE, "Updated schedule 1", user=actor)
    log_audit(db, AuditAction.ABSENCE_MARKED, AuditCategory.ATTENDANCE, "Marked Maria absent", user=actor)


def test_list_with_stats(client, db, admin):
    seed_logs(db, admin)
    headers = auth_headers(client, admin)

    response = client.get("/api/v1/audit-logs", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    # three seeded entries plus the admin's login
    assert body["pagination"] == {"page": 1, "limit": 50, "total": 4, "pages": 1}
    assert body["logs"][0]["action"] == "LOGIN"
    assert body["stats"]["byCategory"][0] == {"_id": "SCHEDULE", "count": 2}
    assert {"_id": "AUTH", "count": 1} in body["stats"]["byCategory"]
    assert len(body["stats"]["recentActivity"]) == 4


def test_filters(client, db, admin, employee):
    seed_logs(db, admin)
    log_audit(db, AuditAction.TIME_IN, AuditCategory.ATTENDANCE, "Juan timed in", user=employee)
    headers = auth_headers(client, admin)

    by_category = client.get("/api/v1/audit-logs?category=SCHEDULE", headers=headers).json()
    assert by_category["pagination"]["total"] == 2

    by_action = client.get("/api/v1/audit-logs?action=ABSENCE_MARKED", headers=headers).json()
    assert [log["description"] for log in by_action["logs"]] == ["Marked Maria absent"]

    by_user = client.get(f"/api/v1/audit-logs?userId={employee.id}", headers=headers).json()
    assert [log["action"] for log in by_user["logs"]] == ["TIME_IN"]

    search = client.get("/api/v1/audit-logs?search=juan", headers=headers).json()
    assert {log["action"] for log in search["logs"]} == {"SCHEDULE_CREATED", "TIME_IN"}


def test_date_range_includes_whole_end_day(client, db, admin):
    old = log_audit(db, AuditAction.ABSENCE_MARKED, AuditCategory.ATTENDANCE, "Old entry", user=admin)
    old.created_at = now_utc() - timedelta(days=10)
    db.commit()
    log_audit(db, AuditAction.ABSENCE_MARKED, AuditCategory.ATTENDANCE, "Recent entry", user=admin)
    headers = auth_headers(client, admin)

    start = (now_utc() - timedelta(days=2)).date().isoformat()
    end = (now_utc() + timedelta(days=1)).date().isoformat()
    body = client.get(f"/api/v1/audit-logs?action=ABSENCE_MARKED&startDate={start}&endDate={end}", headers=headers).json()
    assert [log["description"] for log in body["logs"]] == ["Recent entry"]


def test_pagination(client, db, admin):
    for i in range(5):
        log_audit(db, AuditAction.ABSENCE_MARKED, AuditCategory.ATTENDANCE, f"Entry {i}", user=admin)
    headers = auth_headers(client, admin)

    body = client.get("/api/v1/audit-logs?action=ABSENCE_MARKED&page=2&limit=2", headers=headers).json()
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}
    assert len(body["logs"]) == 2


def test_limit_bounds(client, admin):
    response = client.get("/api/v1/audit-logs?limit=0", headers=auth_headers(client, admin))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_employee_forbidden(client, db, employee):
    response = client.get("/api/v1/audit-logs", headers=auth_headers(client, employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert db.query(AuditLog).filter(AuditLog.action == "LOGIN").count() == 1
