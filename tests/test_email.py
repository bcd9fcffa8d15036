"""Notification email is best effort: delivery problems never fail a request."""

import asyncio
import smtplib

import pytest

from eodsa_api.app.core.config import settings
from eodsa_api.app.core.db import get_connection
from eodsa_api.app.services.email_service import EmailService

API = "/api/v1"


def _count(table: str) -> int:
    conn = get_connection()
    try:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    finally:
        conn.close()


@pytest.fixture
def failing_smtp(monkeypatch):
    """Configure an SMTP host whose every delivery attempt fails."""
    attempts = []

    def _fail(message):
        attempts.append(message["To"])
        raise smtplib.SMTPException("mail server unavailable")

    monkeypatch.setattr(settings, "smtp_host", "127.0.0.1")
    monkeypatch.setattr(EmailService, "_deliver", staticmethod(_fail))
    return attempts


def test_dancer_registration_survives_smtp_failure(client, failing_smtp):
    response = client.post(
        f"{API}/dancers/register",
        json={
            "name": "Lerato Dlamini",
            "dateOfBirth": "1996-07-21",
            "nationalId": "9607215555082",
            "email": "lerato@example.com",
            "recaptchaToken": "test-token",
        },
    )
    assert response.status_code == 201
    assert failing_smtp == ["lerato@example.com"]
    assert _count("dancers") == 1


def test_studio_registration_survives_connection_error(client, monkeypatch):
    def _refuse(message):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(settings, "smtp_host", "127.0.0.1")
    monkeypatch.setattr(EmailService, "_deliver", staticmethod(_refuse))
    response = client.post(
        f"{API}/studios/register",
        json={
            "name": "Pretoria Dance Academy",
            "email": "info@pda.co.za",
            "password": "studiopass",
            "contactPerson": "Naledi Khumalo",
            "recaptchaToken": "test-token",
        },
    )
    assert response.status_code == 201
    assert response.json()["registrationNumber"].startswith("S")


def test_entry_submission_survives_smtp_failure(client, register_dancer, create_event, entry_payload, failing_smtp):
    event = create_event("Solo")
    dancer = register_dancer(approve=True)
    failing_smtp.clear()

    response = client.post(f"{API}/event-entries", json=entry_payload(event, [dancer]))
    assert response.status_code == 201
    assert response.json()["paymentStatus"] == "pending"
    assert failing_smtp == ["dancer1@example.com"]
    assert _count("event_entries") == 1


def test_password_reset_request_survives_smtp_failure(client, create_studio, failing_smtp):
    create_studio()
    failing_smtp.clear()
    response = client.post(f"{API}/auth/forgot-password", json={"email": "studio1@example.com"})
    assert response.status_code == 200
    assert failing_smtp == ["studio1@example.com"]
    assert _count("password_reset_tokens") == 1


def test_header_injection_address_is_rejected_before_storage(client, failing_smtp):
    response = client.post(
        f"{API}/dancers/register",
        json={
            "name": "Mpho Sithole",
            "dateOfBirth": "1994-01-30",
            "nationalId": "9401305555083",
            "email": "adult@example.com\nbcc@evil.test",
            "recaptchaToken": "test-token",
        },
    )
    assert response.status_code == 400
    assert "email" in response.json()["detail"]
    assert failing_smtp == []
    assert _count("dancers") == 0


def test_send_reports_malformed_address_as_failure(monkeypatch):
    def _deliver(message):
        raise AssertionError("message with a broken header must not reach SMTP")

    monkeypatch.setattr(settings, "smtp_host", "127.0.0.1")
    monkeypatch.setattr(EmailService, "_deliver", staticmethod(_deliver))
    sent = asyncio.run(EmailService.send("adult@example.com\r\nBcc: bcc@evil.test", "Hello", "Body"))
    assert sent is False


def test_send_skips_without_smtp_host():
    assert asyncio.run(EmailService.send("someone@example.com", "Hello", "Body")) is False
