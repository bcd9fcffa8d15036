"""
Administrator endpoints for API v1.

Approval queues for dancers and studios, the application overview,
item-number assignment and the audit log.  Every route requires an
admin judge session or the static super-admin token.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from eodsa_api.app.core.security import Principal, require_admin
from eodsa_api.app.schemas.application import StudioApplicationRead
from eodsa_api.app.schemas.dancer import DancerApproval, DancerRead
from eodsa_api.app.schemas.entry import EntryRead, ItemNumberAssign
from eodsa_api.app.schemas.studio import StudioApproval, StudioRead
from eodsa_api.app.services.application_service import ApplicationService
from eodsa_api.app.services.audit_service import AuditService
from eodsa_api.app.services.dancer_service import DancerService
from eodsa_api.app.services.entry_service import EntryService
from eodsa_api.app.services.studio_service import StudioService


router = APIRouter()


@router.get("/dancers", response_model=List[DancerRead])
async def list_dancers(
    status: Optional[str] = Query(None, description="pending, approved or rejected"),
    admin: Principal = Depends(require_admin),
) -> List[DancerRead]:
    return await DancerService.list_dancers(status)


@router.post("/dancers", response_model=DancerRead)
async def decide_dancer(data: DancerApproval, admin: Principal = Depends(require_admin)) -> DancerRead:
    """Approve or reject a dancer.  A rejection needs ``rejectionReason``."""
    return await DancerService.set_approval(data.dancer_id, data.action, admin, data.rejection_reason)


@router.get("/studios", response_model=List[StudioRead])
async def list_studios(
    status: Optional[str] = Query(None, description="pending, approved or rejected"),
    admin: Principal = Depends(require_admin),
) -> List[StudioRead]:
    return await StudioService.list_studios(status)


@router.post("/studios", response_model=StudioRead)
async def decide_studio(data: StudioApproval, admin: Principal = Depends(require_admin)) -> StudioRead:
    return await StudioService.set_approval(data.studio_id, data.action, admin, data.rejection_reason)


@router.get("/studio-applications", response_model=List[StudioApplicationRead])
async def list_studio_applications(
    status: Optional[str] = Query(None, description="pending, accepted, rejected or withdrawn"),
    admin: Principal = Depends(require_admin),
) -> List[StudioApplicationRead]:
    return await ApplicationService.list_all(status)


@router.put("/entries/{entry_id}/assign-item-number", response_model=EntryRead)
async def assign_item_number(
    entry_id: str,
    data: ItemNumberAssign,
    admin: Principal = Depends(require_admin),
) -> EntryRead:
    """Set the programme item number of an entry.

    Numbers are unique within an event; reusing one returns 409.
    """
    return await EntryService.assign_item_number(entry_id, data.item_number, admin)


@router.get("/audit-logs")
async def list_audit_logs(
    object_type: Optional[str] = Query(None, description="dancer, studio, application, entry, event, judge, performance"),
    action: Optional[str] = Query(None, description="approve, reject, accept, assign_item_number, ..."),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: Principal = Depends(require_admin),
) -> List[dict]:
    return await AuditService.list_logs(object_type=object_type, action=action, limit=limit, offset=offset)
