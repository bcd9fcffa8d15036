"""
Security helpers: password hashing, signed session tokens and the
FastAPI dependencies that resolve the caller's identity.

Tokens are compact JWTs signed with HMAC-SHA256 using
``settings.secret_key``.  They carry the account id (``sub``), the
account kind (``dancer``, ``studio`` or ``judge``) and an ``exp``
timestamp.  ``get_current_principal`` verifies the token and resolves
it exactly once into one variant of ``Principal``; endpoints then work
with that typed value and never trust identifiers sent in request
bodies.

Passwords are hashed with PBKDF2-HMAC-SHA256 and stored as
``salthex$hashhex``.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .db import get_connection


PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, str], expires_delta: Optional[int] = None) -> str:
    """Create a signed token with the given claims.

    Parameters
    ----------
    data : dict
        Claims to embed, at least ``sub`` and ``kind``.
    expires_delta : Optional[int]
        Lifetime in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        ``header.payload.signature``, each part base64url encoded.
    """
    to_encode = dict(data)
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, str]]:
    """Verify a token's signature and expiry.

    Returns the payload dictionary, or ``None`` when the token is
    malformed, tampered with or expired.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(_sign(signing_input, settings.secret_key), actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict) or data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


# ---------------------------------------------------------------------------
# Principals
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DancerPrincipal:
    id: str
    eodsa_id: str
    name: str
    approved: bool
    kind: str = "dancer"


@dataclass(frozen=True)
class StudioPrincipal:
    id: str
    name: str
    email: str
    kind: str = "studio"


@dataclass(frozen=True)
class JudgePrincipal:
    id: str
    name: str
    email: str
    is_admin: bool
    kind: str = "judge"


Principal = Union[DancerPrincipal, StudioPrincipal, JudgePrincipal]

STATIC_ADMIN = JudgePrincipal(id="static_super_admin", name="Super administrator", email="", is_admin=True)


def issue_token(principal: Principal) -> str:
    """Create a session token for ``principal``."""
    return create_access_token({"sub": principal.id, "kind": principal.kind})


def _load_principal(kind: str, account_id: str) -> Optional[Principal]:
    conn = get_connection()
    try:
        cursor = conn.cursor()
        if kind == "dancer":
            row = cursor.execute(
                "SELECT id, eodsa_id, name, approval_status FROM dancers WHERE id = ?",
                (account_id,),
            ).fetchone()
            if row:
                return DancerPrincipal(
                    id=row["id"],
                    eodsa_id=row["eodsa_id"],
                    name=row["name"],
                    approved=row["approval_status"] == "approved",
                )
        elif kind == "studio":
            row = cursor.execute(
                "SELECT id, name, email FROM studios WHERE id = ?",
                (account_id,),
            ).fetchone()
            if row:
                return StudioPrincipal(id=row["id"], name=row["name"], email=row["email"])
        elif kind == "judge":
            row = cursor.execute(
                "SELECT id, name, email, is_admin FROM judges WHERE id = ?",
                (account_id,),
            ).fetchone()
            if row:
                return JudgePrincipal(
                    id=row["id"],
                    name=row["name"],
                    email=row["email"],
                    is_admin=bool(row["is_admin"]),
                )
        return None
    finally:
        conn.close()


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Principal:
    """Dependency that resolves the authenticated caller.

    Raises 401 when the Authorization header is missing, the token is
    invalid or expired, or the account it names no longer exists.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    token = credentials.credentials

    if settings.super_admin_static_token and hmac.compare_digest(
        token, settings.super_admin_static_token
    ):
        return STATIC_ADMIN

    payload = decode_access_token(token)
    if not payload:
        raise _unauthorized("Invalid or expired token")
    principal = _load_principal(str(payload.get("kind")), str(payload.get("sub")))
    if principal is None:
        raise _unauthorized("Account no longer exists")
    return principal


def _require(check: Callable[[Principal], bool], detail: str) -> Callable[..., Principal]:
    def _dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not check(principal):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return principal

    return _dependency


require_dancer = _require(lambda p: isinstance(p, DancerPrincipal), "Dancer session required")
require_studio = _require(lambda p: isinstance(p, StudioPrincipal), "Studio session required")
require_judge = _require(lambda p: isinstance(p, JudgePrincipal), "Judge session required")
require_admin = _require(
    lambda p: isinstance(p, JudgePrincipal) and p.is_admin, "Administrator privileges required"
)


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The result
    is ``salthex$hashhex``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored ``salt$hash`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
