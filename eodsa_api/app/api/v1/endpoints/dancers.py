"""
Dancer endpoints for API v1.

Registration is public but rate limited and protected by reCAPTCHA.
Everything under ``/applications`` and ``/available-studios`` acts on
behalf of the dancer in the session token.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status

from eodsa_api.app.core.rate_limit import limiter, registration_limit
from eodsa_api.app.core.security import DancerPrincipal, require_dancer
from eodsa_api.app.schemas.application import StudioApplicationCreate, StudioApplicationRead
from eodsa_api.app.schemas.dancer import DancerPublic, DancerRegister, DancerRegistered
from eodsa_api.app.schemas.studio import StudioPublic
from eodsa_api.app.services.application_service import ApplicationService
from eodsa_api.app.services.dancer_service import DancerService
from eodsa_api.app.services.recaptcha_service import RecaptchaService


router = APIRouter()


@router.post("/register", response_model=DancerRegistered, status_code=status.HTTP_201_CREATED)
@limiter.limit(registration_limit)
async def register_dancer(request: Request, data: DancerRegister) -> DancerRegistered:
    """Register an individual dancer.

    Dancers under 18 must include guardian name, email and phone.  The
    new dancer waits for admin approval before they can enter
    competitions or apply to studios.
    """
    await RecaptchaService.verify(data.recaptcha_token, request.client.host if request.client else None)
    return await DancerService.register(data)


@router.get("/by-eodsa-id/{eodsa_id}", response_model=DancerPublic)
async def get_dancer_by_eodsa_id(eodsa_id: str) -> DancerPublic:
    return await DancerService.get_by_eodsa_id(eodsa_id)


@router.post("/apply-to-studio", response_model=StudioApplicationRead, status_code=status.HTTP_201_CREATED)
async def apply_to_studio(
    data: StudioApplicationCreate,
    dancer: DancerPrincipal = Depends(require_dancer),
) -> StudioApplicationRead:
    return await ApplicationService.apply(dancer, data.studio_id)


@router.get("/applications", response_model=List[StudioApplicationRead])
async def my_applications(dancer: DancerPrincipal = Depends(require_dancer)) -> List[StudioApplicationRead]:
    return await ApplicationService.list_for_dancer(dancer.id)


@router.delete("/applications/{application_id}", response_model=StudioApplicationRead)
async def withdraw_application(
    application_id: str,
    dancer: DancerPrincipal = Depends(require_dancer),
) -> StudioApplicationRead:
    """Withdraw one of the dancer's own pending applications."""
    return await ApplicationService.withdraw(dancer, application_id)


@router.get("/available-studios", response_model=List[StudioPublic])
async def available_studios(dancer: DancerPrincipal = Depends(require_dancer)) -> List[StudioPublic]:
    """Approved studios the dancer has not already applied to."""
    return await ApplicationService.available_studios(dancer.id)
