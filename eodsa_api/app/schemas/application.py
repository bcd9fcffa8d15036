"""
Pydantic models for dancer-to-studio applications.

The dancer and studio identities are taken from the caller's session,
so request bodies only name the other side of the relation.
"""

from typing import Literal, Optional

from .base import ApiModel


class StudioApplicationCreate(ApiModel):
    studio_id: str


class StudioApplicationResponse(ApiModel):
    application_id: str
    action: Literal["accept", "reject"]
    rejection_reason: Optional[str] = None


class StudioApplicationRead(ApiModel):
    id: str
    dancer_id: str
    studio_id: str
    status: str
    applied_at: str
    responded_at: Optional[str] = None
    responded_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    dancer_name: Optional[str] = None
    dancer_eodsa_id: Optional[str] = None
    studio_name: Optional[str] = None


class AffiliatedDancer(ApiModel):
    """Dancer whose application to the studio was accepted."""

    id: str
    eodsa_id: str
    name: str
    age: int
    approved: bool
    email: Optional[str] = None
    phone: Optional[str] = None
    joined_at: Optional[str] = None
