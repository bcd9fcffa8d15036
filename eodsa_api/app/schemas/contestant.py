"""
Pydantic models for legacy contestant registrations.

Before individual dancer accounts existed, a contestant (a studio or a
private entrant) registered together with a roster of dancers.  Entries
may still name roster dancers as participants.
"""

from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from .base import ApiModel, normalise_email


class RosterDancer(ApiModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=1)
    style: str = Field(..., min_length=1)
    national_id: str = Field(..., min_length=1)


class RosterDancerRead(RosterDancer):
    id: str


class StudioInfo(ApiModel):
    address: str = ""
    contact_person: str = ""
    registration_number: Optional[str] = None


class ContestantCreate(ApiModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    type: Literal["studio", "private"]
    studio_name: Optional[str] = None
    studio_info: Optional[StudioInfo] = None
    dancers: List[RosterDancer] = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return normalise_email(v)

    @model_validator(mode="after")
    def studio_details(self) -> "ContestantCreate":
        if self.type == "studio":
            info = self.studio_info
            if not self.studio_name or not info or not info.address or not info.contact_person:
                raise ValueError("Studio registration requires studioName, address, and contactPerson")
        return self


class ContestantRead(ApiModel):
    id: str
    eodsa_id: str
    name: str
    email: str
    phone: str
    type: str
    studio_name: Optional[str] = None
    studio_info: Optional[StudioInfo] = None
    registration_date: str
    dancers: List[RosterDancerRead]
