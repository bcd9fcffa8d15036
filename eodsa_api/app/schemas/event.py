"""
Pydantic models for competition events.

An event fixes the region, age category and performance type that all
of its entries compete in.  The registration deadline must fall
strictly before the event date.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator

from eodsa_api.app.core.constants import AGE_CATEGORIES, REGIONS

from .base import ApiModel


PerformanceType = Literal["Solo", "Duet", "Trio", "Group"]
EventStatus = Literal["upcoming", "registration_open", "registration_closed", "in_progress", "completed"]


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC so they compare with aware ones.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class EventBase(ApiModel):
    name: str = Field(..., min_length=1, examples=["EODSA Regional Championships 2025 - Gauteng"])
    description: str = ""
    region: str = Field(..., min_length=1, examples=["Gauteng"])
    age_category: str = Field(..., min_length=1, examples=["9-11 years"])
    performance_type: PerformanceType
    event_date: datetime
    registration_deadline: datetime
    venue: str = Field(..., min_length=1)
    status: EventStatus = "upcoming"
    max_participants: Optional[int] = Field(None, ge=1)
    entry_fee: float = Field(..., ge=0, examples=[250.0])


class EventCreate(EventBase):
    """Schema for creating an event."""

    @field_validator("region")
    @classmethod
    def known_region(cls, v: str) -> str:
        if v not in REGIONS:
            raise ValueError(f"must be one of {', '.join(REGIONS)}")
        return v

    @field_validator("age_category")
    @classmethod
    def known_age_category(cls, v: str) -> str:
        if v not in AGE_CATEGORIES:
            raise ValueError(f"must be one of {', '.join(AGE_CATEGORIES)}")
        return v

    @model_validator(mode="after")
    def deadline_before_event(self) -> "EventCreate":
        if _as_utc(self.registration_deadline) >= _as_utc(self.event_date):
            raise ValueError("Registration deadline must be before event date")
        return self


class EventRead(EventBase):
    id: str
    created_by: Optional[str] = None
    created_at: Optional[str] = None
