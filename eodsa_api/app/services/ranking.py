"""
Ranking arithmetic.

A score's value is the mean of its four criteria.  A performance's
average is the mean of its score values over all judges who scored it
and its total is their sum.  Performances are ordered by average
(highest first), ties broken by performance id ascending, and ranked
1..n by position.  Performances without scores are not ranked.
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence, Tuple


Criteria = Tuple[float, float, float, float]


@dataclass(frozen=True)
class RankedPerformance:
    rank: int
    performance_id: str
    judge_count: int
    total_score: float
    average_score: float


def score_value(criteria: Criteria) -> float:
    return sum(criteria) / len(criteria)


def compute_rankings(scores: Mapping[str, Sequence[Criteria]]) -> List[RankedPerformance]:
    """Rank performances from their judges' criteria.

    ``scores`` maps a performance id to one ``(technical, artistic,
    presentation, overall)`` tuple per judge.
    """
    totals: List[Tuple[str, int, float, float]] = []
    for performance_id, judge_scores in scores.items():
        if not judge_scores:
            continue
        values = [score_value(c) for c in judge_scores]
        total = sum(values)
        totals.append((performance_id, len(values), total, total / len(values)))

    totals.sort(key=lambda item: (-item[3], item[0]))
    return [
        RankedPerformance(
            rank=position,
            performance_id=performance_id,
            judge_count=judge_count,
            total_score=total,
            average_score=average,
        )
        for position, (performance_id, judge_count, total, average) in enumerate(totals, start=1)
    ]


def group_by_performance(rows: Iterable[Tuple[str, Criteria]]) -> dict:
    """Collect ``(performance_id, criteria)`` pairs into the mapping ``compute_rankings`` takes."""
    grouped: dict = {}
    for performance_id, criteria in rows:
        grouped.setdefault(performance_id, []).append(criteria)
    return grouped
