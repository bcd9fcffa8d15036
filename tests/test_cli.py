"""The eodsa-admin command line."""

import pytest

from eodsa_api import cli
from eodsa_api.app.core.db import get_connection
from eodsa_api.app.core.security import decode_access_token, verify_password


def test_init_db_is_idempotent(capsys):
    assert cli.main(["init-db"]) == 0
    assert cli.main(["init-db"]) == 0
    conn = get_connection()
    try:
        versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
    finally:
        conn.close()
    assert versions == [1, 2, 3]
    assert "Database ready" in capsys.readouterr().out


def test_create_admin_then_token(capsys):
    assert cli.main(["create-admin", "--email", "Head@EODSA.co.za", "--name", "Head Judge", "--password", "adminpass"]) == 0
    conn = get_connection()
    try:
        row = conn.execute("SELECT * FROM judges WHERE email = 'head@eodsa.co.za'").fetchone()
    finally:
        conn.close()
    assert row["is_admin"] == 1
    assert verify_password("adminpass", row["password"])

    # Running it again promotes/updates instead of failing.
    assert cli.main(["create-admin", "--email", "head@eodsa.co.za", "--password", "otherpass"]) == 0

    capsys.readouterr()
    assert cli.main(["create-token", "--email", "head@eodsa.co.za", "--days", "1"]) == 0
    token = capsys.readouterr().out.strip()
    payload = decode_access_token(token)
    assert payload["sub"] == row["id"]
    assert payload["kind"] == "judge"


def test_create_token_unknown_judge():
    assert cli.main(["create-token", "--email", "ghost@example.com"]) == 1


def test_reset_password_for_studio(client, create_studio):
    create_studio(password="oldpassword")
    assert cli.main(["reset-password", "--email", "studio1@example.com", "--password", "brandnew"]) == 0
    login = client.post("/api/v1/auth/studio", json={"email": "studio1@example.com", "password": "brandnew"})
    assert login.status_code == 200
    assert cli.main(["reset-password", "--email", "nobody@example.com", "--password", "brandnew"]) == 1


def test_short_password_refused():
    with pytest.raises(SystemExit):
        cli.main(["create-admin", "--email", "a@b.co", "--password", "123"])
