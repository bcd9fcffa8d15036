"""
Pydantic models for dancer registration, lookup and approval.

``DancerRegister`` is the public registration form.  Guardian details
are optional at the schema level because whether they are required
depends on the dancer's age, which the service computes from
``date_of_birth``.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import Field, field_validator

from .base import ApiModel, normalise_email


class DancerRegister(ApiModel):
    name: str = Field(..., min_length=1, examples=["Emma Thompson"])
    date_of_birth: date = Field(..., examples=["2010-05-15"])
    national_id: str = Field(..., min_length=1, examples=["1005155555123"])
    email: Optional[str] = None
    phone: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_email: Optional[str] = None
    guardian_phone: Optional[str] = None
    recaptcha_token: Optional[str] = None

    @field_validator("name", "national_id")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email", "guardian_email")
    @classmethod
    def valid_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return normalise_email(v)


class DancerRegistered(ApiModel):
    """Response to a successful registration."""

    id: str
    eodsa_id: str
    name: str
    age: int
    approved: bool
    approval_status: str
    message: str


class DancerPublic(ApiModel):
    """Dancer fields safe to show to other users."""

    id: str
    eodsa_id: str
    name: str
    age: int
    approved: bool


class DancerRead(DancerPublic):
    """Full dancer record for administrators and the dancer themself."""

    date_of_birth: date
    national_id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_email: Optional[str] = None
    guardian_phone: Optional[str] = None
    approval_status: str
    approved_by: Optional[str] = None
    approved_at: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[str] = None


class DancerApproval(ApiModel):
    """Admin decision on a dancer registration."""

    dancer_id: str
    action: Literal["approve", "reject"]
    rejection_reason: Optional[str] = None
