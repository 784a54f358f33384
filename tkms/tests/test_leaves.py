"""
Tests for leave request endpoints
"""
from fastapi import status

from tkms.models.leave import Leave
from tkms.models.notification import Notification
from tkms.services.settings_service import get_or_create_settings
from tkms.tests.helpers import auth_headers


def file_leave(client, headers, start="2026-02-02", end="2026-02-04", leave_type="vacation"):
    return client.post(
        "/api/v1/leave",
        json={"leaveType": leave_type, "startDate": start, "endDate": end, "reason": "Family trip"},
        headers=headers,
    )


def test_file_leave(client, db, employee, admin):
    response = file_leave(client, auth_headers(client, employee))

    assert response.status_code == status.HTTP_201_CREATED, response.text
    leave = response.json()["leave"]
    assert leave["status"] == "pending"
    assert leave["days"] == 3
    assert leave["userId"] == employee.id
    assert db.query(Notification).filter(Notification.recipient_id == admin.id).count() == 1


def test_end_before_start(client, employee):
    response = file_leave(client, auth_headers(client, employee), start="2026-02-04", end="2026-02-02")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "End date must be after start date"


def test_insufficient_credits(client, employee):
    response = file_leave(client, auth_headers(client, employee), start="2026-02-02", end="2026-02-09")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Insufficient leave credits. You have 5 days available."


def test_credits_ignored_when_management_off(client, db, employee):
    row = get_or_create_settings(db)
    row.enable_leave_credits_management = False
    db.commit()

    response = file_leave(client, auth_headers(client, employee), start="2026-02-02", end="2026-02-09")
    assert response.status_code == status.HTTP_201_CREATED


def test_range_capped_when_management_off(client, db, employee):
    row = get_or_create_settings(db)
    row.enable_leave_credits_management = False
    db.commit()
    headers = auth_headers(client, employee)

    too_long = file_leave(client, headers, start="2026-01-01", end="2035-12-31")
    assert too_long.status_code == status.HTTP_400_BAD_REQUEST
    assert too_long.json()["error"] == "Leave range is too long. A request may cover at most 366 days."
    assert db.query(Leave).count() == 0

    full_year = file_leave(client, headers, start="2028-01-01", end="2028-12-31")
    assert full_year.status_code == status.HTTP_201_CREATED
    assert full_year.json()["leave"]["days"] == 366


def test_filing_disabled(client, db, employee):
    row = get_or_create_settings(db)
    row.enable_file_leave_request = False
    db.commit()

    response = file_leave(client, auth_headers(client, employee))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Filing leave requests is currently disabled"


def test_unknown_leave_type(client, employee):
    response = file_leave(client, auth_headers(client, employee), leave_type="sabbatical")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_approve_deducts_credits_and_marks_attendance(client, db, employee, admin):
    leave_id = file_leave(client, auth_headers(client, employee)).json()["leave"]["id"]
    headers = auth_headers(client, admin)

    response = client.patch(
        f"/api/v1/leave/{leave_id}", json={"status": "approved", "adminNotes": "Enjoy"}, headers=headers
    )

    assert response.status_code == status.HTTP_200_OK, response.text
    leave = response.json()["leave"]
    assert leave["status"] == "approved"
    assert leave["reviewedBy"] == admin.id
    assert leave["adminNotes"] == "Enjoy"

    db.refresh(employee)
    assert employee.leave_credits == 2

    rows = client.get(
        f"/api/v1/attendance?userId={employee.id}&startDate=2026-02-02&endDate=2026-02-04", headers=headers
    ).json()["attendances"]
    assert len(rows) == 3
    assert {row["status"] for row in rows} == {"on-leave"}

    notified = db.query(Notification).filter(Notification.recipient_id == employee.id).all()
    assert [n.title for n in notified] == ["Your leave request was approved"]


def test_reject_keeps_credits(client, db, employee, admin):
    leave_id = file_leave(client, auth_headers(client, employee)).json()["leave"]["id"]

    response = client.patch(
        f"/api/v1/leave/{leave_id}", json={"status": "rejected"}, headers=auth_headers(client, admin)
    )

    assert response.json()["leave"]["status"] == "rejected"
    db.refresh(employee)
    assert employee.leave_credits == 5


def test_cannot_review_twice(client, employee, admin):
    leave_id = file_leave(client, auth_headers(client, employee)).json()["leave"]["id"]
    headers = auth_headers(client, admin)
    client.patch(f"/api/v1/leave/{leave_id}", json={"status": "approved"}, headers=headers)

    response = client.patch(f"/api/v1/leave/{leave_id}", json={"status": "rejected"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Leave request has already been reviewed"


def test_review_back_to_pending_rejected(client, employee, admin):
    leave_id = file_leave(client, auth_headers(client, employee)).json()["leave"]["id"]
    response = client.patch(
        f"/api/v1/leave/{leave_id}", json={"status": "pending"}, headers=auth_headers(client, admin)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_employee_cannot_review(client, employee):
    headers = auth_headers(client, employee)
    leave_id = file_leave(client, headers).json()["leave"]["id"]
    response = client.patch(f"/api/v1/leave/{leave_id}", json={"status": "approved"}, headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_scoping(client, employee, other_employee, admin):
    file_leave(client, auth_headers(client, employee))
    file_leave(client, auth_headers(client, other_employee))

    own = client.get("/api/v1/leave", headers=auth_headers(client, employee)).json()["leaves"]
    assert [leave["userId"] for leave in own] == [employee.id]
    assert len(client.get("/api/v1/leave", headers=auth_headers(client, admin)).json()["leaves"]) == 2


def test_cancel_rules(client, employee, other_employee, admin):
    headers = auth_headers(client, employee)
    leave_id = file_leave(client, headers).json()["leave"]["id"]

    forbidden = client.delete(f"/api/v1/leave/{leave_id}", headers=auth_headers(client, other_employee))
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/leave/{leave_id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["message"] == "Leave request cancelled"

    assert client.delete(f"/api/v1/leave/{leave_id}", headers=headers).status_code == status.HTTP_404_NOT_FOUND


def test_reviewed_leave_cannot_be_cancelled(client, employee, admin):
    headers = auth_headers(client, employee)
    leave_id = file_leave(client, headers).json()["leave"]["id"]
    client.patch(f"/api/v1/leave/{leave_id}", json={"status": "rejected"}, headers=auth_headers(client, admin))

    response = client.delete(f"/api/v1/leave/{leave_id}", headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Only pending leave requests can be cancelled"
