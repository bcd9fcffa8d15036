"""Dancer and studio registration, approvals and guards."""

from datetime import date

API = "/api/v1"
ADMIN = {"Authorization": "Bearer test-super-admin"}


def _dancer_payload(**overrides):
    payload = {
        "name": "Thabo Nkosi",
        "dateOfBirth": "1998-03-02",
        "nationalId": "9803025555081",
        "email": "thabo@example.com",
        "recaptchaToken": "test-token",
    }
    payload.update(overrides)
    return payload


def test_register_adult_dancer(client):
    response = client.post(f"{API}/dancers/register", json=_dancer_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["eodsaId"].startswith("E") and len(body["eodsaId"]) == 7
    assert body["eodsaId"][1:].isdigit()
    assert body["approved"] is False
    assert body["approvalStatus"] == "pending"

    lookup = client.get(f"{API}/dancers/by-eodsa-id/{body['eodsaId']}")
    assert lookup.status_code == 200
    assert lookup.json()["name"] == "Thabo Nkosi"


def test_minor_without_guardian_is_rejected(client):
    ten_years_ago = date(date.today().year - 10, 1, 1).isoformat()
    response = client.post(f"{API}/dancers/register", json=_dancer_payload(dateOfBirth=ten_years_ago))
    assert response.status_code == 400
    assert "Guardian" in response.json()["detail"]


def test_minor_with_guardian_is_accepted(client):
    ten_years_ago = date(date.today().year - 10, 1, 1).isoformat()
    response = client.post(
        f"{API}/dancers/register",
        json=_dancer_payload(
            dateOfBirth=ten_years_ago,
            guardianName="Lindiwe Nkosi",
            guardianEmail="lindiwe@example.com",
            guardianPhone="0827654321",
        ),
    )
    assert response.status_code == 201
    assert response.json()["age"] == 10


def test_missing_required_field(client):
    payload = _dancer_payload()
    del payload["nationalId"]
    response = client.post(f"{API}/dancers/register", json=payload)
    assert response.status_code == 400
    assert "nationalId" in response.json()["detail"]


def test_recaptcha_token_required(client):
    payload = _dancer_payload()
    del payload["recaptchaToken"]
    response = client.post(f"{API}/dancers/register", json=payload)
    assert response.status_code == 400
    assert "reCAPTCHA" in response.json()["detail"]


def test_recaptcha_rejected_remotely(client, monkeypatch):
    import httpx

    from eodsa_api.app.core.config import settings

    monkeypatch.setattr(settings, "recaptcha_secret_key", "server-secret")

    def handler(request):
        return httpx.Response(200, json={"success": False, "error-codes": ["invalid-input-response"]})

    transport = httpx.MockTransport(handler)
    original = httpx.AsyncClient

    def patched_client(*args, **kwargs):
        kwargs["transport"] = transport
        return original(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", patched_client)
    response = client.post(f"{API}/dancers/register", json=_dancer_payload())
    assert response.status_code == 400
    assert response.json()["detail"] == "reCAPTCHA verification failed"


def test_duplicate_national_id_conflicts(client):
    assert client.post(f"{API}/dancers/register", json=_dancer_payload()).status_code == 201
    response = client.post(f"{API}/dancers/register", json=_dancer_payload(email="other@example.com"))
    assert response.status_code == 409
    assert "national ID" in response.json()["detail"]


def test_registration_rate_limited(client, monkeypatch):
    from eodsa_api.app.core.config import settings

    monkeypatch.setattr(settings, "registration_rate_limit", "2/hour")
    for n in range(2):
        response = client.post(
            f"{API}/dancers/register",
            json=_dancer_payload(nationalId=f"980302555508{n}", email=f"d{n}@example.com"),
        )
        assert response.status_code == 201
    response = client.post(
        f"{API}/dancers/register", json=_dancer_payload(nationalId="9803025555089", email="d9@example.com")
    )
    assert response.status_code == 429


def test_admin_approval_flow(client, register_dancer):
    dancer = register_dancer()

    pending = client.get(f"{API}/admin/dancers", params={"status": "pending"}, headers=ADMIN)
    assert pending.status_code == 200
    assert [d["id"] for d in pending.json()] == [dancer["id"]]

    missing_reason = client.post(
        f"{API}/admin/dancers", json={"dancerId": dancer["id"], "action": "reject"}, headers=ADMIN
    )
    assert missing_reason.status_code == 400

    rejected = client.post(
        f"{API}/admin/dancers",
        json={"dancerId": dancer["id"], "action": "reject", "rejectionReason": "ID document unreadable"},
        headers=ADMIN,
    )
    assert rejected.status_code == 200
    assert rejected.json()["approvalStatus"] == "rejected"
    assert rejected.json()["rejectionReason"] == "ID document unreadable"

    approved = client.post(
        f"{API}/admin/dancers", json={"dancerId": dancer["id"], "action": "approve"}, headers=ADMIN
    )
    assert approved.status_code == 200
    body = approved.json()
    assert body["approved"] is True
    assert body["approvedBy"] == "static_super_admin"
    assert body["rejectionReason"] is None

    logs = client.get(f"{API}/admin/audit-logs", params={"object_type": "dancer"}, headers=ADMIN)
    assert [log["action"] for log in logs.json()] == ["approve", "reject"]


def test_admin_routes_require_admin(client, register_dancer, dancer_login):
    assert client.get(f"{API}/admin/dancers").status_code == 401
    assert client.get(f"{API}/admin/dancers", headers={"Authorization": "Bearer nonsense"}).status_code == 401
    dancer = register_dancer(approve=True)
    assert client.get(f"{API}/admin/dancers", headers=dancer_login(dancer)).status_code == 403


def test_approve_unknown_dancer(client):
    response = client.post(f"{API}/admin/dancers", json={"dancerId": "dnc_missing", "action": "approve"}, headers=ADMIN)
    assert response.status_code == 404


def test_register_studio(client):
    response = client.post(
        f"{API}/studios/register",
        json={
            "name": "Rhythm Nation",
            "email": "Info@RhythmNation.co.za",
            "password": "secret123",
            "contactPerson": "Naledi Dube",
            "recaptchaToken": "test-token",
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["registrationNumber"].startswith("S") and len(body["registrationNumber"]) == 7
    assert body["email"] == "info@rhythmnation.co.za"
    assert body["approved"] is True
    assert "password" not in body

    listed = client.get(f"{API}/studios")
    assert [s["name"] for s in listed.json()] == ["Rhythm Nation"]

    duplicate = client.post(
        f"{API}/studios/register",
        json={
            "name": "Other",
            "email": "info@rhythmnation.co.za",
            "password": "secret123",
            "contactPerson": "Someone",
            "recaptchaToken": "test-token",
        },
    )
    assert duplicate.status_code == 409


def test_rejected_studio_hidden_from_list(client, create_studio):
    studio, _ = create_studio()
    response = client.post(
        f"{API}/admin/studios",
        json={"studioId": studio["id"], "action": "reject", "rejectionReason": "Duplicate account"},
        headers=ADMIN,
    )
    assert response.status_code == 200
    assert client.get(f"{API}/studios").json() == []
    rejected = client.get(f"{API}/admin/studios", params={"status": "rejected"}, headers=ADMIN)
    assert [s["id"] for s in rejected.json()] == [studio["id"]]
