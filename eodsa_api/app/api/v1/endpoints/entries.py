"""
Competition entry endpoints for API v1.

Entries can be submitted without a session; eligibility is decided by
the stored approval state of every participant.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from eodsa_api.app.core.security import Principal, require_admin
from eodsa_api.app.schemas.entry import EntryCreate, EntryRead, PerformanceRead
from eodsa_api.app.services.entry_service import EntryService


router = APIRouter()


@router.post("", response_model=EntryRead, status_code=status.HTTP_201_CREATED)
async def submit_entry(data: EntryCreate) -> EntryRead:
    """Submit an entry for an event.

    Every participant must be an approved dancer (403 otherwise) or a
    dancer on the legacy contestant's roster, and the participant count
    must fit the event's performance type.
    """
    return await EntryService.submit_entry(data)


@router.get("", response_model=List[EntryRead])
async def list_entries(
    event_id: Optional[str] = Query(None, alias="eventId"),
    contestant_id: Optional[str] = Query(None, alias="contestantId"),
    admin: Principal = Depends(require_admin),
) -> List[EntryRead]:
    return await EntryService.list_entries(event_id=event_id, contestant_id=contestant_id)


@router.patch("/{entry_id}/approve", response_model=PerformanceRead)
async def approve_entry(entry_id: str, admin: Principal = Depends(require_admin)) -> PerformanceRead:
    return await EntryService.approve_entry(entry_id, admin)
