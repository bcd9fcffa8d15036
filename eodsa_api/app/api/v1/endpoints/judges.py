"""Judge management endpoints for API v1 (administrators only)."""

from typing import List

from fastapi import APIRouter, Depends, status

from eodsa_api.app.core.security import Principal, require_admin
from eodsa_api.app.schemas.base import Message
from eodsa_api.app.schemas.judge import JudgeCreate, JudgeRead
from eodsa_api.app.services.judge_service import JudgeService


router = APIRouter()


@router.get("", response_model=List[JudgeRead])
async def list_judges(admin: Principal = Depends(require_admin)) -> List[JudgeRead]:
    return await JudgeService.list_judges()


@router.post("", response_model=JudgeRead, status_code=status.HTTP_201_CREATED)
async def create_judge(data: JudgeCreate, admin: Principal = Depends(require_admin)) -> JudgeRead:
    return await JudgeService.create_judge(data, admin)


@router.delete("/{judge_id}", response_model=Message)
async def delete_judge(judge_id: str, admin: Principal = Depends(require_admin)) -> Message:
    await JudgeService.delete_judge(judge_id, admin)
    return Message(message="Judge deleted")
