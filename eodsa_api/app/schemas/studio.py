"""
Pydantic models for studios.

Studios authenticate with email and password; the password is never
returned.  ``registration_number`` is assigned by the service.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator

from eodsa_api.app.core.constants import MIN_PASSWORD_LENGTH

from .base import ApiModel, normalise_email


class StudioRegister(ApiModel):
    name: str = Field(..., min_length=1, examples=["Graceful Moves Dance Studio"])
    email: str = Field(..., min_length=3, examples=["info@gracefulmoves.com"])
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    contact_person: str = Field(..., min_length=1, examples=["Jane Smith"])
    address: str = ""
    phone: str = ""
    recaptcha_token: Optional[str] = None

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return normalise_email(v)


class StudioPublic(ApiModel):
    id: str
    name: str
    registration_number: str
    contact_person: str
    address: Optional[str] = None


class StudioRead(StudioPublic):
    email: str
    phone: Optional[str] = None
    approved: bool
    approval_status: str
    approved_by: Optional[str] = None
    approved_at: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[str] = None


class StudioApproval(ApiModel):
    studio_id: str
    action: Literal["approve", "reject"]
    rejection_reason: Optional[str] = None
