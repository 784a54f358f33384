"""
Tests for outgoing email: transport handling, leave and password reset mail
"""
import smtplib

import pytest
from fastapi import status

from tkms.core.config import settings
from tkms.services.email_service import NOT_CONFIGURED, send_email
from tkms.tests.helpers import auth_headers


def html_of(message) -> str:
    return message.get_body(preferencelist=("html",)).get_content()


def fake_smtp(outbox, fail_with=None):
    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            self.host = host
            self.port = port
            self.tls = False
            self.credentials = None

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return False

        def starttls(self):
            self.tls = True

        def login(self, user, password):
            self.credentials = (user, password)

        def send_message(self, message):
            if fail_with is not None:
                raise fail_with
            outbox.append((self, message))

    return FakeSMTP


@pytest.fixture
def smtp_settings(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(settings, "SMTP_PORT", 587)
    monkeypatch.setattr(settings, "SMTP_USER", "mailer@example.com")
    monkeypatch.setattr(settings, "SMTP_PASS", "app-password")


@pytest.fixture
def outbox(monkeypatch, smtp_settings):
    """Messages handed to the SMTP transport, as (connection, message) pairs"""
    sent = []
    monkeypatch.setattr(smtplib, "SMTP", fake_smtp(sent))
    return sent


@pytest.fixture
def broken_smtp(monkeypatch, smtp_settings):
    monkeypatch.setattr(smtplib, "SMTP", fake_smtp([], fail_with=smtplib.SMTPServerDisconnected("Connection lost")))


def file_leave(client, headers):
    return client.post(
        "/api/v1/leave",
        json={"leaveType": "vacation", "startDate": "2026-02-02", "endDate": "2026-02-04", "reason": "Family trip"},
        headers=headers,
    )


def test_not_configured_is_a_no_op(monkeypatch):
    def refuse(*args, **kwargs):
        raise AssertionError("no connection expected")

    monkeypatch.setattr(smtplib, "SMTP", refuse)

    result = send_email("juan@example.com", "Hello", "<p>Hi</p>")
    assert result.success is False
    assert result.error == NOT_CONFIGURED == "Email not configured"


def test_send_uses_starttls_and_login(outbox):
    result = send_email("juan@example.com", "Hello", "<p>Hi Juan</p>")

    assert result.success is True
    assert result.message_id
    connection, message = outbox[0]
    assert (connection.host, connection.port) == ("smtp.example.com", 587)
    assert connection.tls is True
    assert connection.credentials == ("mailer@example.com", "app-password")
    assert message["To"] == "juan@example.com"
    assert message["From"] == "TKMS <mailer@example.com>"
    assert message["Subject"] == "Hello"
    assert "<p>Hi Juan</p>" in html_of(message)


def test_port_465_uses_implicit_tls(monkeypatch, smtp_settings):
    sent = []
    monkeypatch.setattr(settings, "SMTP_PORT", 465)
    monkeypatch.setattr(settings, "EMAIL_FROM", "no-reply@example.com")
    monkeypatch.setattr(smtplib, "SMTP_SSL", fake_smtp(sent))

    assert send_email("juan@example.com", "Hello", "<p>Hi</p>").success is True
    connection, message = sent[0]
    assert connection.port == 465
    assert connection.tls is False
    assert message["From"] == "TKMS <no-reply@example.com>"


def test_transport_failure_is_reported_not_raised(broken_smtp):
    result = send_email("juan@example.com", "Hello", "<p>Hi</p>")
    assert result.success is False
    assert result.error == "Connection lost"


def test_new_leave_emails_every_admin(client, outbox, employee, admin, super_admin):
    response = file_leave(client, auth_headers(client, employee))
    assert response.status_code == status.HTTP_201_CREATED

    assert sorted(message["To"] for _, message in outbox) == ["admin@example.com", "root@example.com"]
    _, message = outbox[0]
    assert message["Subject"] == "New Leave Request from Juan Dela Cruz"
    body = html_of(message)
    assert "Vacation" in body
    assert "Feb 02, 2026" in body
    assert "Family trip" in body


def test_leave_review_emails_employee(client, outbox, employee, admin):
    employee_headers = auth_headers(client, employee)
    admin_headers = auth_headers(client, admin)
    approved_id = file_leave(client, employee_headers).json()["leave"]["id"]
    rejected_id = file_leave(client, employee_headers).json()["leave"]["id"]
    outbox.clear()

    client.patch(f"/api/v1/leave/{approved_id}", json={"status": "approved"}, headers=admin_headers)
    client.patch(
        f"/api/v1/leave/{rejected_id}",
        json={"status": "rejected", "adminNotes": "Short staffed that week"},
        headers=admin_headers,
    )

    assert [(m["To"], m["Subject"]) for _, m in outbox] == [
        ("juan@example.com", "Leave Request Approved"),
        ("juan@example.com", "Leave Request Status Update"),
    ]
    assert "Short staffed that week" in html_of(outbox[1][1])


def test_mail_failure_does_not_block_leave_flow(client, broken_smtp, employee, admin):
    created = file_leave(client, auth_headers(client, employee))
    assert created.status_code == status.HTTP_201_CREATED

    reviewed = client.patch(
        f"/api/v1/leave/{created.json()['leave']['id']}",
        json={"status": "approved"},
        headers=auth_headers(client, admin),
    )
    assert reviewed.status_code == status.HTTP_200_OK
    assert reviewed.json()["leave"]["status"] == "approved"


def test_forgot_password_emails_reset_link(client, db, outbox, employee):
    response = client.post("/api/v1/auth/forgot-password", json={"email": "juan@example.com"})
    assert response.status_code == status.HTTP_200_OK

    db.refresh(employee)
    assert len(outbox) == 1
    _, message = outbox[0]
    assert message["To"] == "juan@example.com"
    assert f"/reset-password?token={employee.reset_password_token}" in html_of(message)


def test_forgot_password_unknown_account_sends_nothing(client, outbox):
    client.post("/api/v1/auth/forgot-password", json={"email": "nobody@example.com"})
    assert outbox == []


def test_send_test_email_endpoint(client, outbox, admin):
    response = client.post(
        "/api/v1/debug/send-test-email", json={"to": "ops@example.com"}, headers=auth_headers(client, admin)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["success"] is True
    assert response.json()["messageId"]
    assert outbox[0][1]["To"] == "ops@example.com"

    defaulted = client.post("/api/v1/debug/send-test-email", json={}, headers=auth_headers(client, admin))
    assert defaulted.status_code == status.HTTP_200_OK
    assert outbox[1][1]["To"] == "mailer@example.com"


def test_send_test_email_without_smtp(client, admin):
    headers = auth_headers(client, admin)

    no_recipient = client.post("/api/v1/debug/send-test-email", json={}, headers=headers)
    assert no_recipient.status_code == status.HTTP_400_BAD_REQUEST
    assert no_recipient.json()["error"] == "No recipient provided"

    unconfigured = client.post("/api/v1/debug/send-test-email", json={"to": "ops@example.com"}, headers=headers)
    assert unconfigured.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert unconfigured.json()["error"] == "Email not configured"


def test_send_test_email_admin_only(client, employee):
    response = client.post(
        "/api/v1/debug/send-test-email", json={"to": "ops@example.com"}, headers=auth_headers(client, employee)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
