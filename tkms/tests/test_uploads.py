"""
Tests for the upload endpoint
"""
from fastapi import status

from tkms.models.audit_log import AuditLog
from tkms.tests.helpers import PHOTO, auth_headers


def test_upload_to_local_storage(client, db, admin, local_storage):
    response = client.post(
        "/api/v1/uploads",
        json={"filename": "company logo (1).jpg", "data": PHOTO},
        headers=auth_headers(client, admin),
    )

    assert response.status_code == status.HTTP_201_CREATED, response.text
    body = response.json()
    assert body["storage"] == "local"
    assert body["key"].endswith("-company_logo__1_.jpg")
    assert "/" not in body["key"]
    assert body["url"] == f"/uploads/{body['key']}"
    assert (local_storage / body["key"]).read_bytes().startswith(b"\xff\xd8")

    log = db.query(AuditLog).filter(AuditLog.action == "FILE_UPLOADED").one()
    assert log.category == "SYSTEM"
    assert log.meta_json["storage"] == "local"


def test_missing_fields(client, admin):
    response = client.post("/api/v1/uploads", json={"filename": "logo.png"}, headers=auth_headers(client, admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Filename and data are required"


def test_invalid_base64(client, admin):
    response = client.post(
        "/api/v1/uploads", json={"filename": "logo.png", "data": "%%%not-base64%%%"}, headers=auth_headers(client, admin)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Invalid base64 data"


def test_employee_forbidden(client, employee):
    response = client.post(
        "/api/v1/uploads", json={"filename": "logo.png", "data": PHOTO}, headers=auth_headers(client, employee)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
