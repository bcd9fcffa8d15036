"""
Judge scores.

A judge has at most one score per performance.  Submitting again
replaces the criteria and comments of the existing score in place
(``ON CONFLICT ... DO UPDATE``) and keeps its original
``submitted_at``.
"""

import logging
import sqlite3
from typing import List, Tuple

from eodsa_api.app.core.db import get_connection, new_id, utcnow_iso
from eodsa_api.app.core.errors import ForbiddenError, NotFoundError
from eodsa_api.app.core.security import JudgePrincipal
from eodsa_api.app.schemas.score import ScoreRead, ScoreSubmit

from .audit_service import AuditService


logger = logging.getLogger(__name__)


_SELECT_SCORES = """
    SELECT s.*, j.name AS judge_name
    FROM scores s
    JOIN judges j ON j.id = s.judge_id
"""


def _row_to_read(row: sqlite3.Row) -> ScoreRead:
    return ScoreRead(
        id=row["id"],
        judge_id=row["judge_id"],
        performance_id=row["performance_id"],
        technical_score=row["technical_score"],
        artistic_score=row["artistic_score"],
        presentation_score=row["presentation_score"],
        overall_score=row["overall_score"],
        comments=row["comments"] or "",
        submitted_at=row["submitted_at"],
        updated_at=row["updated_at"],
        judge_name=row["judge_name"],
    )


class ScoreService:

    @classmethod
    async def submit_score(cls, judge: JudgePrincipal, data: ScoreSubmit) -> Tuple[ScoreRead, bool]:
        """Create or update ``judge``'s score for a performance.

        Returns the stored score and ``True`` if it was newly created.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM judges WHERE id = ?", (judge.id,)).fetchone():
                raise ForbiddenError("Scores must be submitted from a judge account")
            if not cursor.execute(
                "SELECT id FROM performances WHERE id = ?", (data.performance_id,)
            ).fetchone():
                raise NotFoundError("Performance not found")
            existing = cursor.execute(
                "SELECT id FROM scores WHERE judge_id = ? AND performance_id = ?",
                (judge.id, data.performance_id),
            ).fetchone()
            now = utcnow_iso()
            cursor.execute(
                """
                INSERT INTO scores (id, judge_id, performance_id, technical_score, artistic_score,
                                    presentation_score, overall_score, comments, submitted_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(judge_id, performance_id) DO UPDATE SET
                    technical_score = excluded.technical_score,
                    artistic_score = excluded.artistic_score,
                    presentation_score = excluded.presentation_score,
                    overall_score = excluded.overall_score,
                    comments = excluded.comments,
                    updated_at = excluded.updated_at
                """,
                (
                    new_id("scr"),
                    judge.id,
                    data.performance_id,
                    data.technical_score,
                    data.artistic_score,
                    data.presentation_score,
                    data.overall_score,
                    data.comments,
                    now,
                    now,
                ),
            )
            conn.commit()
            row = cursor.execute(
                _SELECT_SCORES + " WHERE s.judge_id = ? AND s.performance_id = ?",
                (judge.id, data.performance_id),
            ).fetchone()
        finally:
            conn.close()

        created = existing is None
        logger.info(
            "Judge %s %s score for performance %s", judge.id, "submitted" if created else "updated", data.performance_id
        )
        await AuditService.record(
            judge,
            action="score" if created else "rescore",
            object_type="performance",
            object_id=data.performance_id,
        )
        return _row_to_read(row), created

    @classmethod
    async def scores_for_performance(cls, performance_id: str) -> List[ScoreRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                _SELECT_SCORES + " WHERE s.performance_id = ? ORDER BY s.submitted_at, s.id",
                (performance_id,),
            ).fetchall()
            return [_row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_score(cls, performance_id: str, judge_id: str) -> ScoreRead:
        conn = get_connection()
        try:
            row = conn.execute(
                _SELECT_SCORES + " WHERE s.performance_id = ? AND s.judge_id = ?",
                (performance_id, judge_id),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Score not found")
        return _row_to_read(row)
