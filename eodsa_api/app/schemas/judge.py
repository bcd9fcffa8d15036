"""Pydantic models for judge accounts."""

from typing import Optional

from pydantic import Field, field_validator

from eodsa_api.app.core.constants import MIN_PASSWORD_LENGTH

from .base import ApiModel, normalise_email


class JudgeCreate(ApiModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    is_admin: bool = False

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return normalise_email(v)


class JudgeRead(ApiModel):
    id: str
    name: str
    email: str
    is_admin: bool
    created_at: Optional[str] = None
