"""Legacy contestant endpoints for API v1."""

from typing import List

from fastapi import APIRouter, Depends, status

from eodsa_api.app.core.security import Principal, require_admin
from eodsa_api.app.schemas.contestant import ContestantCreate, ContestantRead
from eodsa_api.app.services.contestant_service import ContestantService


router = APIRouter()


@router.post("", response_model=ContestantRead, status_code=status.HTTP_201_CREATED)
async def register_contestant(data: ContestantCreate) -> ContestantRead:
    return await ContestantService.register(data)


@router.get("", response_model=List[ContestantRead])
async def list_contestants(admin: Principal = Depends(require_admin)) -> List[ContestantRead]:
    return await ContestantService.list_contestants()
