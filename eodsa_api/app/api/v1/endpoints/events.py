"""
Event endpoints for API v1.

Listing and reading events is public; creating events and listing
their raw entries requires an administrator.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from eodsa_api.app.core.security import Principal, require_admin
from eodsa_api.app.schemas.entry import EntryRead, PerformanceRead
from eodsa_api.app.schemas.event import EventCreate, EventRead
from eodsa_api.app.services.event_service import EventService


router = APIRouter()


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(event: EventCreate, admin: Principal = Depends(require_admin)) -> EventRead:
    return await EventService.create_event(event, admin)


@router.get("", response_model=List[EventRead])
async def list_events(
    region: Optional[str] = Query(None),
    age_category: Optional[str] = Query(None, alias="ageCategory"),
    performance_type: Optional[str] = Query(None, alias="performanceType"),
    event_status: Optional[str] = Query(None, alias="status"),
) -> List[EventRead]:
    return await EventService.list_events(
        region=region,
        age_category=age_category,
        performance_type=performance_type,
        status=event_status,
    )


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: str) -> EventRead:
    return await EventService.get_event(event_id)


@router.get("/{event_id}/entries", response_model=List[EntryRead])
async def event_entries(event_id: str, admin: Principal = Depends(require_admin)) -> List[EntryRead]:
    return await EventService.list_entries(event_id)


@router.get("/{event_id}/performances", response_model=List[PerformanceRead])
async def event_performances(event_id: str) -> List[PerformanceRead]:
    """Approved entries of the event in programme order."""
    return await EventService.list_performances(event_id)
