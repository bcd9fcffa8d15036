"""
Studio endpoints for API v1.

``/register`` and the public studio list need no session; the
application and dancer routes act for the studio in the session token.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from eodsa_api.app.core.rate_limit import limiter, registration_limit
from eodsa_api.app.core.security import StudioPrincipal, require_studio
from eodsa_api.app.schemas.application import (
    AffiliatedDancer,
    StudioApplicationRead,
    StudioApplicationResponse,
)
from eodsa_api.app.schemas.studio import StudioPublic, StudioRead, StudioRegister
from eodsa_api.app.services.application_service import ApplicationService
from eodsa_api.app.services.recaptcha_service import RecaptchaService
from eodsa_api.app.services.studio_service import StudioService


router = APIRouter()


@router.post("/register", response_model=StudioRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(registration_limit)
async def register_studio(request: Request, data: StudioRegister) -> StudioRead:
    await RecaptchaService.verify(data.recaptcha_token, request.client.host if request.client else None)
    return await StudioService.register(data)


@router.get("", response_model=List[StudioPublic])
async def list_studios() -> List[StudioPublic]:
    """Approved studios, for dancers choosing where to apply."""
    return await StudioService.list_approved()


@router.get("/applications", response_model=List[StudioApplicationRead])
async def studio_applications(
    status: Optional[str] = Query(None, description="pending, accepted, rejected or withdrawn"),
    studio: StudioPrincipal = Depends(require_studio),
) -> List[StudioApplicationRead]:
    return await ApplicationService.list_for_studio(studio.id, status)


@router.post("/applications", response_model=StudioApplicationRead)
async def respond_to_application(
    data: StudioApplicationResponse,
    studio: StudioPrincipal = Depends(require_studio),
) -> StudioApplicationRead:
    """Accept or reject a pending application sent to this studio."""
    return await ApplicationService.respond(studio, data)


@router.get("/dancers", response_model=List[AffiliatedDancer])
async def studio_dancers(studio: StudioPrincipal = Depends(require_studio)) -> List[AffiliatedDancer]:
    return await ApplicationService.studio_dancers(studio.id)
