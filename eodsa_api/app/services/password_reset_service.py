"""
Password reset for studio and judge accounts.

An email address is resolved once into one of the ``ResetAccount``
variants; the variant decides which table a new password is written
to.  ``request_reset`` behaves identically whether or not the address
is known so the endpoint cannot be used to discover accounts.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Type, Union

from eodsa_api.app.core.config import settings
from eodsa_api.app.core.db import get_connection
from eodsa_api.app.core.errors import ValidationError
from eodsa_api.app.core.security import hash_password

from .email_service import EmailService


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudioAccount:
    id: str
    email: str
    kind: str = "studio"
    table: str = "studios"


@dataclass(frozen=True)
class JudgeAccount:
    id: str
    email: str
    kind: str = "judge"
    table: str = "judges"


ResetAccount = Union[StudioAccount, JudgeAccount]


def resolve_account(email: str) -> Optional[ResetAccount]:
    """Find the studio or judge registered under ``email``.  Studios win ties."""
    email = email.strip().lower()
    conn = get_connection()
    try:
        row = conn.execute("SELECT id, email FROM studios WHERE email = ?", (email,)).fetchone()
        if row:
            return StudioAccount(id=row["id"], email=row["email"])
        row = conn.execute("SELECT id, email FROM judges WHERE email = ?", (email,)).fetchone()
        if row:
            return JudgeAccount(id=row["id"], email=row["email"])
        return None
    finally:
        conn.close()


ACCOUNT_TYPES: Dict[str, Type[ResetAccount]] = {cls.kind: cls for cls in (StudioAccount, JudgeAccount)}


class PasswordResetService:

    @classmethod
    async def request_reset(cls, email: str) -> None:
        """Issue a reset token and mail it, if ``email`` belongs to an account."""
        account = resolve_account(email)
        if account is None:
            logger.info("Password reset requested for unknown email")
            return
        token = secrets.token_urlsafe(32)
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.password_reset_expire_minutes)
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO password_reset_tokens (token, account_kind, account_id, expires_at)
                VALUES (?, ?, ?, ?)
                """,
                (token, account.kind, account.id, expires_at.isoformat()),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("Issued password reset token for %s %s", account.kind, account.id)
        await EmailService.send_password_reset(account.email, token)

    @classmethod
    async def reset_password(cls, token: str, new_password: str) -> ResetAccount:
        """Set a new password using a valid, unused token; the token is consumed."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute(
                "SELECT * FROM password_reset_tokens WHERE token = ?", (token,)
            ).fetchone()
            if not row or row["used"]:
                raise ValidationError("Invalid or expired reset token")
            if datetime.fromisoformat(row["expires_at"]) <= datetime.now(timezone.utc):
                raise ValidationError("Invalid or expired reset token")
            account_type = ACCOUNT_TYPES.get(row["account_kind"])
            if account_type is None:
                raise ValidationError("Invalid or expired reset token")
            owner = cursor.execute(
                f"SELECT id, email FROM {account_type.table} WHERE id = ?", (row["account_id"],)
            ).fetchone()
            if owner is None:
                raise ValidationError("Invalid or expired reset token")
            account = account_type(id=owner["id"], email=owner["email"])
            cursor.execute(
                f"UPDATE {account.table} SET password = ? WHERE id = ?",
                (hash_password(new_password), account.id),
            )
            cursor.execute("UPDATE password_reset_tokens SET used = 1 WHERE id = ?", (row["id"],))
            conn.commit()
        finally:
            conn.close()
        logger.info("Password reset for %s %s", account.kind, account.id)
        return account
