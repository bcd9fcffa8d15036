"""
Pydantic models for competition entries and performances.

``EntryCreate`` mirrors the EODSA regional entry form.  Eligibility
(approval of every participant, participant count for the event's
performance type, allowed mastery levels and item styles) is checked by
``EntryService`` because it depends on stored data.
"""

from typing import List, Literal, Optional

from pydantic import Field

from .base import ApiModel


class EntryCreate(ApiModel):
    event_id: str
    contestant_id: str
    eodsa_id: Optional[str] = None
    participant_ids: List[str] = Field(..., min_length=1)
    performance_type: Optional[str] = None
    item_name: str = Field(..., min_length=1)
    choreographer: str = Field(..., min_length=1)
    mastery: str
    item_style: str
    estimated_duration: int
    payment_method: Optional[Literal["credit_card", "bank_transfer"]] = None


class EntryRead(ApiModel):
    id: str
    event_id: str
    contestant_id: str
    eodsa_id: Optional[str] = None
    participant_ids: List[str]
    calculated_fee: float
    payment_status: str
    payment_method: Optional[str] = None
    submitted_at: str
    approved: bool
    approved_at: Optional[str] = None
    item_name: str
    choreographer: str
    mastery: str
    item_style: str
    estimated_duration: int
    item_number: Optional[int] = None


class ItemNumberAssign(ApiModel):
    item_number: int = Field(..., ge=1)


class PerformanceRead(ApiModel):
    id: str
    event_id: str
    entry_id: str
    contestant_id: str
    title: str
    participant_names: List[str]
    duration: int
    choreographer: Optional[str] = None
    mastery: Optional[str] = None
    item_style: Optional[str] = None
    item_number: Optional[int] = None
    status: str
