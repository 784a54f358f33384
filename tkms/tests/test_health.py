"""
Tests for health endpoint
"""
from fastapi import status

from tkms.core.constants import SERVICE_NAME
from tkms.tests.helpers import auth_headers


def test_health_endpoint(client, admin):
    response = client.get("/api/v1/health", headers=auth_headers(client, admin))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == SERVICE_NAME
    assert data["database"] == {"status": "ok", "dialect": "sqlite"}
    assert data["storage"]["backend"] == "local"
    assert data["hashing"]["status"] == "healthy"
    assert data["runtime"]["timezone"]


def test_health_requires_admin(client, employee):
    assert client.get("/api/v1/health").status_code == status.HTTP_401_UNAUTHORIZED
    response = client.get("/api/v1/health", headers=auth_headers(client, employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN
