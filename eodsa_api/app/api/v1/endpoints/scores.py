"""
Scoring endpoints for API v1.

Judges submit one score per performance; resubmitting updates it.  The
judge is always the one in the session token.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from eodsa_api.app.core.security import JudgePrincipal, require_judge
from eodsa_api.app.schemas.score import ScoreRead, ScoreSubmit, ScoreSubmitted
from eodsa_api.app.services.score_service import ScoreService


router = APIRouter()


@router.post("", response_model=ScoreSubmitted)
async def submit_score(
    data: ScoreSubmit,
    response: Response,
    judge: JudgePrincipal = Depends(require_judge),
) -> ScoreSubmitted:
    """Create (201) or update (200) the judge's score for a performance."""
    score, created = await ScoreService.submit_score(judge, data)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ScoreSubmitted(
        created=created,
        message="Score submitted" if created else "Score updated",
        score=score,
    )


@router.get("/performance/{performance_id}", response_model=List[ScoreRead])
async def performance_scores(performance_id: str) -> List[ScoreRead]:
    return await ScoreService.scores_for_performance(performance_id)


@router.get("/{performance_id}/{judge_id}", response_model=ScoreRead)
async def get_score(performance_id: str, judge_id: str) -> ScoreRead:
    return await ScoreService.get_score(performance_id, judge_id)
