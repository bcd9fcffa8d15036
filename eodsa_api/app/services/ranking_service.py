"""Rankings across events, filtered by the events' region, age category and type."""

from typing import List, Optional

from eodsa_api.app.core.db import get_connection
from eodsa_api.app.schemas.score import RankingRead

from .ranking import compute_rankings, group_by_performance


class RankingService:

    @classmethod
    async def calculate_rankings(
        cls,
        region: Optional[str] = None,
        age_category: Optional[str] = None,
        performance_type: Optional[str] = None,
    ) -> List[RankingRead]:
        where_clauses: List[str] = []
        params: list = []
        for column, value in (
            ("e.region", region),
            ("e.age_category", age_category),
            ("e.performance_type", performance_type),
        ):
            if value:
                where_clauses.append(f"{column} = ?")
                params.append(value)
        query = """
            SELECT s.performance_id, s.technical_score, s.artistic_score, s.presentation_score, s.overall_score
            FROM scores s
            JOIN performances p ON p.id = s.performance_id
            JOIN events e ON e.id = p.event_id
        """
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)

        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(query, tuple(params)).fetchall()
            ranked = compute_rankings(
                group_by_performance(
                    (
                        row["performance_id"],
                        (
                            row["technical_score"],
                            row["artistic_score"],
                            row["presentation_score"],
                            row["overall_score"],
                        ),
                    )
                    for row in rows
                )
            )
            details = {}
            if ranked:
                ids = [r.performance_id for r in ranked]
                placeholders = ",".join("?" for _ in ids)
                for row in cursor.execute(
                    f"""
                    SELECT p.id, p.event_id, p.title, p.contestant_id, p.item_number,
                           e.name AS event_name, e.region, e.age_category, e.performance_type
                    FROM performances p JOIN events e ON e.id = p.event_id
                    WHERE p.id IN ({placeholders})
                    """,
                    tuple(ids),
                ).fetchall():
                    details[row["id"]] = row
        finally:
            conn.close()

        results = []
        for r in ranked:
            row = details[r.performance_id]
            results.append(
                RankingRead(
                    rank=r.rank,
                    performance_id=r.performance_id,
                    event_id=row["event_id"],
                    event_name=row["event_name"],
                    title=row["title"],
                    contestant_id=row["contestant_id"],
                    item_number=row["item_number"],
                    region=row["region"],
                    age_category=row["age_category"],
                    performance_type=row["performance_type"],
                    judge_count=r.judge_count,
                    total_score=round(r.total_score, 2),
                    average_score=round(r.average_score, 2),
                )
            )
        return results
