"""
Pydantic models for login and password reset.

Every login response carries a bearer token; clients send it back as
``Authorization: Bearer <token>``.
"""

from pydantic import Field

from eodsa_api.app.core.constants import MIN_PASSWORD_LENGTH

from .base import ApiModel
from .dancer import DancerPublic


class DancerLogin(ApiModel):
    eodsa_id: str
    national_id: str


class CredentialsLogin(ApiModel):
    email: str
    password: str


class DancerSession(ApiModel):
    access_token: str
    token_type: str = "bearer"
    dancer: DancerPublic


class StudioSessionInfo(ApiModel):
    id: str
    name: str
    email: str
    registration_number: str


class StudioSession(ApiModel):
    access_token: str
    token_type: str = "bearer"
    studio: StudioSessionInfo


class JudgeSessionInfo(ApiModel):
    id: str
    name: str
    email: str
    is_admin: bool


class JudgeSession(ApiModel):
    access_token: str
    token_type: str = "bearer"
    judge: JudgeSessionInfo


class ForgotPassword(ApiModel):
    email: str


class ResetPassword(ApiModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
