"""
Judge accounts.

Administrators are judges with ``is_admin`` set.  The first
administrator is created from the command line
(``eodsa-admin create-admin``) or by a request carrying the static
super-admin token.
"""

import logging
import sqlite3
from typing import List

from eodsa_api.app.core.db import get_connection, new_id, utcnow_iso
from eodsa_api.app.core.errors import ConflictError, NotFoundError, ValidationError
from eodsa_api.app.core.security import Principal, hash_password
from eodsa_api.app.schemas.judge import JudgeCreate, JudgeRead

from .audit_service import AuditService


logger = logging.getLogger(__name__)


def _row_to_read(row: sqlite3.Row) -> JudgeRead:
    return JudgeRead(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        is_admin=bool(row["is_admin"]),
        created_at=row["created_at"],
    )


class JudgeService:

    @classmethod
    def _insert(cls, data: JudgeCreate) -> JudgeRead:
        judge_id = new_id("jdg")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO judges (id, name, email, password, is_admin, created_at) VALUES (?, ?, ?, ?, ?, ?)",
                    (judge_id, data.name, data.email, hash_password(data.password), int(data.is_admin), utcnow_iso()),
                )
            except sqlite3.IntegrityError as exc:
                raise ConflictError("A judge with this email already exists") from exc
            conn.commit()
            row = cursor.execute("SELECT * FROM judges WHERE id = ?", (judge_id,)).fetchone()
        finally:
            conn.close()
        return _row_to_read(row)

    @classmethod
    async def create_judge(cls, data: JudgeCreate, admin: Principal) -> JudgeRead:
        judge = cls._insert(data)
        logger.info("Admin %s created judge %s (admin=%s)", admin.id, judge.id, judge.is_admin)
        await AuditService.record(
            admin, action="create", object_type="judge", object_id=judge.id, details={"isAdmin": judge.is_admin}
        )
        return judge

    @classmethod
    def ensure_admin(cls, name: str, email: str, password: str) -> JudgeRead:
        """Create an administrator, or promote and re-password an existing judge.

        Synchronous because it is called from the command line.
        """
        data = JudgeCreate(name=name, email=email, password=password, is_admin=True)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT id FROM judges WHERE email = ?", (data.email,)).fetchone()
            if row:
                cursor.execute(
                    "UPDATE judges SET name = ?, password = ?, is_admin = 1 WHERE id = ?",
                    (data.name, hash_password(data.password), row["id"]),
                )
                conn.commit()
                updated = cursor.execute("SELECT * FROM judges WHERE id = ?", (row["id"],)).fetchone()
                logger.info("Promoted judge %s to administrator", row["id"])
                return _row_to_read(updated)
        finally:
            conn.close()
        judge = cls._insert(data)
        logger.info("Created administrator %s", judge.id)
        return judge

    @classmethod
    async def list_judges(cls) -> List[JudgeRead]:
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM judges ORDER BY name, id").fetchall()
            return [_row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def delete_judge(cls, judge_id: str, admin: Principal) -> None:
        """Delete a judge and, through the foreign key cascade, their scores."""
        if judge_id == admin.id:
            raise ValidationError("You cannot delete your own account")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM judges WHERE id = ?", (judge_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("Judge not found")
            conn.commit()
        finally:
            conn.close()
        logger.info("Admin %s deleted judge %s", admin.id, judge_id)
        await AuditService.record(admin, action="delete", object_type="judge", object_id=judge_id)
