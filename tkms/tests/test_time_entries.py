"""
Tests for time entry (punch) endpoints
"""
import base64

from fastapi import status

from tkms.models.attendance import Attendance
from tkms.models.notification import Notification
from tkms.tests.helpers import PHOTO, auth_headers


def test_time_in_creates_entry_and_attendance(client, db, employee, admin, local_storage):
    headers = auth_headers(client, employee)
    response = client.post(
        "/api/v1/time-entries",
        json={"type": "time-in", "photo": PHOTO, "location": {"latitude": 14.5995, "longitude": 120.9842}},
        headers=headers,
    )

    assert response.status_code == status.HTTP_201_CREATED, response.text
    data = response.json()
    assert data["success"] is True
    assert data["timeEntry"]["type"] == "time-in"
    assert data["timeEntry"]["latitude"] == 14.5995
    assert data["timeEntry"]["photoUrl"].startswith("/uploads/attendance-photos/ibay-0001-")
    assert data["attendance"]["status"] == "present"
    assert data["attendance"]["timeIn"] is not None

    stored = list((local_storage / "attendance-photos").iterdir())
    assert len(stored) == 1
    assert db.query(Attendance).filter(Attendance.user_id == employee.id).count() == 1
    # Admins are told about the punch
    assert db.query(Notification).filter(Notification.recipient_id == admin.id).count() == 1


def test_accepts_photo_base64_field(client, employee):
    headers = auth_headers(client, employee)
    response = client.post("/api/v1/time-entries", json={"type": "time-in", "photoBase64": PHOTO}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED


def test_duplicate_time_in_same_day_rejected(client, employee):
    headers = auth_headers(client, employee)
    first = client.post("/api/v1/time-entries", json={"type": "time-in", "photo": PHOTO}, headers=headers)
    assert first.status_code == status.HTTP_201_CREATED

    second = client.post("/api/v1/time-entries", json={"type": "time-in", "photo": PHOTO}, headers=headers)
    assert second.status_code == status.HTTP_400_BAD_REQUEST
    assert second.json()["error"] == "Already has time-in entry for today"


def test_time_out_updates_same_attendance_row(client, db, employee):
    headers = auth_headers(client, employee)
    first = client.post("/api/v1/time-entries", json={"type": "time-in", "photo": PHOTO}, headers=headers)
    second = client.post("/api/v1/time-entries", json={"type": "time-out", "photo": PHOTO}, headers=headers)

    assert second.status_code == status.HTTP_201_CREATED
    assert first.json()["attendance"]["id"] == second.json()["attendance"]["id"]
    assert second.json()["attendance"]["timeOut"] is not None


def test_time_entry_requires_auth(client):
    response = client.post("/api/v1/time-entries", json={"type": "time-in", "photo": PHOTO})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_invalid_photo_rejected(client, employee):
    headers = auth_headers(client, employee)
    response = client.post("/api/v1/time-entries", json={"type": "time-in", "photo": "not base64!!"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Invalid base64 data"


def test_invalid_type_is_validation_error(client, employee):
    headers = auth_headers(client, employee)
    response = client.post("/api/v1/time-entries", json={"type": "lunch", "photo": PHOTO}, headers=headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["error"] == "Validation error"


def test_employee_cannot_punch_for_someone_else(client, employee, other_employee):
    headers = auth_headers(client, employee)
    response = client.post(
        "/api/v1/time-entries",
        json={"type": "time-in", "photo": PHOTO, "userId": other_employee.id},
        headers=headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_time_entries_scoped_to_employee(client, employee, other_employee, admin):
    client.post("/api/v1/time-entries", json={"type": "time-in", "photo": PHOTO}, headers=auth_headers(client, employee))
    client.post("/api/v1/time-entries", json={"type": "time-in", "photo": PHOTO}, headers=auth_headers(client, other_employee))

    own = client.get("/api/v1/time-entries", headers=auth_headers(client, employee))
    assert own.status_code == status.HTTP_200_OK
    assert {e["userId"] for e in own.json()["timeEntries"]} == {employee.id}

    everyone = client.get("/api/v1/time-entries", headers=auth_headers(client, admin))
    assert len(everyone.json()["timeEntries"]) == 2


def test_admin_rejects_punch(client, employee, admin):
    created = client.post(
        "/api/v1/time-entries", json={"type": "time-in", "photo": PHOTO}, headers=auth_headers(client, employee)
    ).json()

    response = client.patch(
        f"/api/v1/time-entries/{created['timeEntry']['id']}",
        json={"status": "rejected"},
        headers=auth_headers(client, admin),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["timeEntry"]["status"] == "rejected"

    rows = client.get("/api/v1/attendance", headers=auth_headers(client, employee)).json()["attendances"]
    assert rows[0]["timeIn"] is None
    assert rows[0]["status"] == "absent"


def test_repunch_after_rejection_keeps_rejected_photo(client, employee, admin, local_storage):
    def photo(content):
        return "data:image/jpeg;base64," + base64.b64encode(content).decode()

    employee_headers = auth_headers(client, employee)
    first = client.post(
        "/api/v1/time-entries", json={"type": "time-in", "photo": photo(b"FIRST-PHOTO")}, headers=employee_headers
    ).json()["timeEntry"]
    client.patch(
        f"/api/v1/time-entries/{first['id']}",
        json={"status": "rejected"},
        headers=auth_headers(client, admin),
    )

    second = client.post(
        "/api/v1/time-entries", json={"type": "time-in", "photo": photo(b"SECOND-PHOTO")}, headers=employee_headers
    )
    assert second.status_code == status.HTTP_201_CREATED, second.text
    second_url = second.json()["timeEntry"]["photoUrl"]

    assert first["photoUrl"] != second_url
    assert (local_storage / first["photoUrl"][len("/uploads/"):]).read_bytes() == b"FIRST-PHOTO"
    assert (local_storage / second_url[len("/uploads/"):]).read_bytes() == b"SECOND-PHOTO"
