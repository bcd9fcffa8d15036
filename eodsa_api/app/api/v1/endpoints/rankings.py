"""Ranking endpoint for API v1."""

from typing import List, Optional

from fastapi import APIRouter, Query

from eodsa_api.app.schemas.score import RankingRead
from eodsa_api.app.services.ranking_service import RankingService


router = APIRouter()


@router.get("", response_model=List[RankingRead])
async def rankings(
    region: Optional[str] = Query(None),
    age_category: Optional[str] = Query(None, alias="ageCategory"),
    performance_type: Optional[str] = Query(None, alias="performanceType"),
) -> List[RankingRead]:
    """Scored performances ranked by average score, best first."""
    return await RankingService.calculate_rankings(
        region=region, age_category=age_category, performance_type=performance_type
    )
