"""
Pydantic models for judge scores and rankings.

Each criterion is scored on a 1-10 scale inclusive; decimals such as
7.5 are allowed.
"""

from typing import Optional

from pydantic import Field

from eodsa_api.app.core.constants import MAX_SCORE, MIN_SCORE

from .base import ApiModel


class ScoreSubmit(ApiModel):
    performance_id: str
    technical_score: float = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    artistic_score: float = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    presentation_score: float = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    overall_score: float = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    comments: str = ""


class ScoreRead(ApiModel):
    id: str
    judge_id: str
    performance_id: str
    technical_score: float
    artistic_score: float
    presentation_score: float
    overall_score: float
    comments: str = ""
    submitted_at: str
    updated_at: str
    judge_name: Optional[str] = None


class ScoreSubmitted(ApiModel):
    success: bool = True
    created: bool
    message: str
    score: ScoreRead


class RankingRead(ApiModel):
    rank: int
    performance_id: str
    event_id: str
    event_name: str
    title: str
    contestant_id: str
    item_number: Optional[int] = None
    region: str
    age_category: str
    performance_type: str
    judge_count: int
    total_score: float
    average_score: float
