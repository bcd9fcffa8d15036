# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Fixtures shared by the API tests.
#
# Key features:
# - Sets environment variables before the application settings are imported
# - Gives every test its own temporary SQLite database
# - Factory fixtures for the common setup steps (dancers, studios, events,
#   entries, judges)
# =============================================================================

import itertools
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# eodsa_api.app.core.config reads the environment once at import time.

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("SUPER_ADMIN_TOKEN", "test-super-admin")
os.environ.setdefault("REGISTRATION_RATE_LIMIT", "1000/hour")
os.environ["RECAPTCHA_SECRET_KEY"] = ""
os.environ["SMTP_HOST"] = ""
os.environ["AUTO_APPROVE_DANCERS"] = "false"

import pytest
from fastapi.testclient import TestClient

from eodsa_api.app.core.config import settings
from eodsa_api.app.core.db import init_db
from eodsa_api.app.core.rate_limit import limiter
from eodsa_api.app.main import create_app


API = "/api/v1"
ADMIN_HEADERS = {"Authorization": "Bearer test-super-admin"}


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Core fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the application at a fresh database file for each test."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "eodsa-test.db"))
    init_db()
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def register_dancer(client):
    """Register a dancer and optionally approve them.

    Returns the registration response plus ``nationalId`` so the dancer
    can log in.
    """
    counter = itertools.count(1)

    def _register(name="Emma Thompson", date_of_birth="1995-05-15", approve=False, **extra):
        n = next(counter)
        payload = {
            "name": name,
            "dateOfBirth": date_of_birth,
            "nationalId": f"9505155{n:06d}",
            "email": f"dancer{n}@example.com",
            "phone": "0821234567",
            "recaptchaToken": "test-token",
        }
        payload.update(extra)
        response = client.post(f"{API}/dancers/register", json=payload)
        assert response.status_code == 201, response.text
        dancer = response.json()
        dancer["nationalId"] = payload["nationalId"]
        if approve:
            decision = client.post(
                f"{API}/admin/dancers",
                json={"dancerId": dancer["id"], "action": "approve"},
                headers=ADMIN_HEADERS,
            )
            assert decision.status_code == 200, decision.text
            dancer["approved"] = True
        return dancer

    return _register


@pytest.fixture
def dancer_login(client):
    def _login(dancer) -> dict:
        response = client.post(
            f"{API}/auth/dancer",
            json={"eodsaId": dancer["eodsaId"], "nationalId": dancer["nationalId"]},
        )
        assert response.status_code == 200, response.text
        return bearer(response.json()["accessToken"])

    return _login


@pytest.fixture
def create_studio(client):
    """Register a studio and return ``(studio, headers)``."""
    counter = itertools.count(1)

    def _create(name=None, password="studiopass"):
        n = next(counter)
        email = f"studio{n}@example.com"
        response = client.post(
            f"{API}/studios/register",
            json={
                "name": name or f"Graceful Moves {n}",
                "email": email,
                "password": password,
                "contactPerson": "Jane Smith",
                "address": "12 Dance Street, Johannesburg",
                "phone": "0119876543",
                "recaptchaToken": "test-token",
            },
        )
        assert response.status_code == 201, response.text
        studio = response.json()
        login = client.post(f"{API}/auth/studio", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return studio, bearer(login.json()["accessToken"])

    return _create


@pytest.fixture
def create_event(client):
    def _create(performance_type="Solo", **overrides):
        payload = {
            "name": f"EODSA Regional Championships - {performance_type}",
            "description": "Regional qualifier",
            "region": "Gauteng",
            "ageCategory": "18+ years",
            "performanceType": performance_type,
            "eventDate": "2030-06-15T09:00:00Z",
            "registrationDeadline": "2030-06-01T23:59:00Z",
            "venue": "Johannesburg Civic Theatre",
            "entryFee": 250.0,
        }
        payload.update(overrides)
        response = client.post(f"{API}/events", json=payload, headers=ADMIN_HEADERS)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def entry_payload():
    def _payload(event, participants, contestant_id=None, **overrides):
        payload = {
            "eventId": event["id"],
            "contestantId": contestant_id or participants[0]["id"],
            "participantIds": [p["id"] for p in participants],
            "itemName": "Swan Variation",
            "choreographer": "Marius Petipa",
            "mastery": "Advanced",
            "itemStyle": "Ballet - Classical Variation",
            "estimatedDuration": 3,
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_judge(client):
    """Create a judge through the admin API and return ``(judge, headers)``."""
    counter = itertools.count(1)

    def _create(is_admin=False, password="judgepass"):
        n = next(counter)
        email = f"judge{n}@example.com"
        response = client.post(
            f"{API}/judges",
            json={"name": f"Judge {n}", "email": email, "password": password, "isAdmin": is_admin},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 201, response.text
        login = client.post(f"{API}/auth/judge", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return response.json(), bearer(login.json()["accessToken"])

    return _create


@pytest.fixture
def create_performance(client, register_dancer, create_event, entry_payload):
    """Submit and approve a Solo entry; return the resulting performance."""

    def _create(event=None, item_name="Swan Variation"):
        event = event or create_event("Solo")
        dancer = register_dancer(approve=True)
        entry = client.post(
            f"{API}/event-entries", json=entry_payload(event, [dancer], itemName=item_name)
        )
        assert entry.status_code == 201, entry.text
        approved = client.patch(f"{API}/event-entries/{entry.json()['id']}/approve", headers=ADMIN_HEADERS)
        assert approved.status_code == 200, approved.text
        return approved.json()

    return _create
