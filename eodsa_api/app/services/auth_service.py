"""
Login for dancers, studios and judges.

Dancers identify themselves with their EODSA ID and national ID;
studios and judges with email and password.  Every successful login
returns a signed bearer token naming the account kind.
"""

import logging

from eodsa_api.app.core.db import get_connection
from eodsa_api.app.core.errors import AuthError, NotFoundError
from eodsa_api.app.core.security import (
    DancerPrincipal,
    JudgePrincipal,
    StudioPrincipal,
    issue_token,
    verify_password,
)
from eodsa_api.app.schemas.auth import (
    CredentialsLogin,
    DancerLogin,
    DancerSession,
    JudgeSession,
    JudgeSessionInfo,
    StudioSession,
    StudioSessionInfo,
)

from .dancer_service import row_to_public


logger = logging.getLogger(__name__)


class AuthService:

    @classmethod
    async def login_dancer(cls, data: DancerLogin) -> DancerSession:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM dancers WHERE eodsa_id = ?", (data.eodsa_id.strip(),)
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Dancer not found")
        if row["national_id"] != data.national_id.strip():
            logger.info("Failed dancer login for %s", data.eodsa_id)
            raise AuthError("Invalid credentials")
        dancer = row_to_public(row)
        principal = DancerPrincipal(
            id=dancer.id, eodsa_id=dancer.eodsa_id, name=dancer.name, approved=dancer.approved
        )
        return DancerSession(access_token=issue_token(principal), dancer=dancer)

    @classmethod
    async def login_studio(cls, data: CredentialsLogin) -> StudioSession:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM studios WHERE email = ?", (data.email.strip().lower(),)
            ).fetchone()
        finally:
            conn.close()
        if not row or not verify_password(data.password, row["password"]):
            logger.info("Failed studio login for %s", data.email)
            raise AuthError("Invalid email or password")
        principal = StudioPrincipal(id=row["id"], name=row["name"], email=row["email"])
        return StudioSession(
            access_token=issue_token(principal),
            studio=StudioSessionInfo(
                id=row["id"],
                name=row["name"],
                email=row["email"],
                registration_number=row["registration_number"],
            ),
        )

    @classmethod
    async def login_judge(cls, data: CredentialsLogin) -> JudgeSession:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM judges WHERE email = ?", (data.email.strip().lower(),)
            ).fetchone()
        finally:
            conn.close()
        if not row or not verify_password(data.password, row["password"]):
            logger.info("Failed judge login for %s", data.email)
            raise AuthError("Invalid email or password")
        principal = JudgePrincipal(
            id=row["id"], name=row["name"], email=row["email"], is_admin=bool(row["is_admin"])
        )
        return JudgeSession(
            access_token=issue_token(principal),
            judge=JudgeSessionInfo(
                id=principal.id, name=principal.name, email=principal.email, is_admin=principal.is_admin
            ),
        )
