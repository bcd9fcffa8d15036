"""
Dancer-to-studio applications.

An application starts ``pending``.  The studio it was sent to may
accept or reject it; the dancer who sent it may withdraw it.  Accepted,
rejected and withdrawn applications are final.  At most one
non-withdrawn application may exist for a dancer/studio pair, which the
``uq_studio_applications_pair`` index enforces.

The acting dancer or studio always comes from the verified session
(``DancerPrincipal`` / ``StudioPrincipal``), never from the request
body.
"""

import logging
import sqlite3
from datetime import date
from typing import List, Optional

from eodsa_api.app.core.constants import APPLICATION_STATUSES
from eodsa_api.app.core.db import get_connection, new_id, utcnow_iso
from eodsa_api.app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from eodsa_api.app.core.security import DancerPrincipal, StudioPrincipal
from eodsa_api.app.schemas.application import (
    AffiliatedDancer,
    StudioApplicationRead,
    StudioApplicationResponse,
)
from eodsa_api.app.schemas.studio import StudioPublic

from .audit_service import AuditService
from .dancer_service import calculate_age
from .studio_service import row_to_public


logger = logging.getLogger(__name__)


_SELECT_APPLICATIONS = """
    SELECT a.*, d.name AS dancer_name, d.eodsa_id AS dancer_eodsa_id, s.name AS studio_name
    FROM studio_applications a
    JOIN dancers d ON d.id = a.dancer_id
    JOIN studios s ON s.id = a.studio_id
"""


def _row_to_read(row: sqlite3.Row) -> StudioApplicationRead:
    return StudioApplicationRead(
        id=row["id"],
        dancer_id=row["dancer_id"],
        studio_id=row["studio_id"],
        status=row["status"],
        applied_at=row["applied_at"],
        responded_at=row["responded_at"],
        responded_by=row["responded_by"],
        rejection_reason=row["rejection_reason"],
        dancer_name=row["dancer_name"],
        dancer_eodsa_id=row["dancer_eodsa_id"],
        studio_name=row["studio_name"],
    )


def _check_status(status: Optional[str]) -> None:
    if status is not None and status not in APPLICATION_STATUSES:
        raise ValidationError(f"Invalid status: {status}")


class ApplicationService:
    """Apply, respond, withdraw and list studio applications."""

    @classmethod
    def _fetch(cls, cursor: sqlite3.Cursor, application_id: str) -> sqlite3.Row:
        row = cursor.execute(_SELECT_APPLICATIONS + " WHERE a.id = ?", (application_id,)).fetchone()
        if not row:
            raise NotFoundError("Application not found")
        return row

    @classmethod
    async def apply(cls, dancer: DancerPrincipal, studio_id: str) -> StudioApplicationRead:
        """Send an application from ``dancer`` to ``studio_id``."""
        if not dancer.approved:
            raise ForbiddenError("Only approved dancers can apply to studios")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            studio = cursor.execute(
                "SELECT id FROM studios WHERE id = ? AND approval_status = 'approved'",
                (studio_id,),
            ).fetchone()
            if not studio:
                raise NotFoundError("Studio not found")
            application_id = new_id("app")
            try:
                cursor.execute(
                    """
                    INSERT INTO studio_applications (id, dancer_id, studio_id, status, applied_at)
                    VALUES (?, ?, ?, 'pending', ?)
                    """,
                    (application_id, dancer.id, studio_id, utcnow_iso()),
                )
            except sqlite3.IntegrityError as exc:
                raise ConflictError("You have already applied to this studio") from exc
            conn.commit()
            row = cls._fetch(cursor, application_id)
        finally:
            conn.close()
        logger.info("Dancer %s applied to studio %s", dancer.id, studio_id)
        return _row_to_read(row)

    @classmethod
    async def list_for_dancer(cls, dancer_id: str) -> List[StudioApplicationRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                _SELECT_APPLICATIONS + " WHERE a.dancer_id = ? ORDER BY a.applied_at DESC, a.id",
                (dancer_id,),
            ).fetchall()
            return [_row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def withdraw(cls, dancer: DancerPrincipal, application_id: str) -> StudioApplicationRead:
        """Withdraw a pending application owned by ``dancer``."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cls._fetch(cursor, application_id)
            if row["dancer_id"] != dancer.id:
                raise ForbiddenError("You can only withdraw your own applications")
            if row["status"] != "pending":
                raise ConflictError(f"Cannot withdraw an application that is {row['status']}")
            cursor.execute(
                "UPDATE studio_applications SET status = 'withdrawn', responded_at = ? WHERE id = ?",
                (utcnow_iso(), application_id),
            )
            conn.commit()
            row = cls._fetch(cursor, application_id)
        finally:
            conn.close()
        logger.info("Dancer %s withdrew application %s", dancer.id, application_id)
        return _row_to_read(row)

    @classmethod
    async def list_for_studio(cls, studio_id: str, status: Optional[str] = None) -> List[StudioApplicationRead]:
        _check_status(status)
        query = _SELECT_APPLICATIONS + " WHERE a.studio_id = ?"
        params: list = [studio_id]
        if status:
            query += " AND a.status = ?"
            params.append(status)
        query += " ORDER BY a.applied_at DESC, a.id"
        conn = get_connection()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
            return [_row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def list_all(cls, status: Optional[str] = None) -> List[StudioApplicationRead]:
        _check_status(status)
        query = _SELECT_APPLICATIONS
        params: list = []
        if status:
            query += " WHERE a.status = ?"
            params.append(status)
        query += " ORDER BY a.applied_at DESC, a.id"
        conn = get_connection()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
            return [_row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def respond(cls, studio: StudioPrincipal, data: StudioApplicationResponse) -> StudioApplicationRead:
        """Accept or reject a pending application addressed to ``studio``."""
        new_status = "accepted" if data.action == "accept" else "rejected"
        reason = (data.rejection_reason or "").strip() or None
        if new_status == "rejected" and not reason:
            raise ValidationError("Rejection reason is required")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cls._fetch(cursor, data.application_id)
            if row["studio_id"] != studio.id:
                raise ForbiddenError("You can only respond to applications sent to your studio")
            if row["status"] != "pending":
                raise ConflictError(f"Application has already been {row['status']}")
            cursor.execute(
                """
                UPDATE studio_applications
                SET status = ?, responded_at = ?, responded_by = ?, rejection_reason = ?
                WHERE id = ?
                """,
                (
                    new_status,
                    utcnow_iso(),
                    studio.id,
                    reason if new_status == "rejected" else None,
                    data.application_id,
                ),
            )
            conn.commit()
            row = cls._fetch(cursor, data.application_id)
        finally:
            conn.close()

        logger.info("Studio %s %s application %s", studio.id, new_status, data.application_id)
        await AuditService.record(
            studio,
            action=data.action,
            object_type="application",
            object_id=data.application_id,
            details={"rejectionReason": reason} if reason else None,
        )
        return _row_to_read(row)

    @classmethod
    async def available_studios(cls, dancer_id: str) -> List[StudioPublic]:
        """Approved studios the dancer has no live application with."""
        conn = get_connection()
        try:
            rows = conn.execute(
                """
                SELECT s.* FROM studios s
                WHERE s.approval_status = 'approved'
                  AND NOT EXISTS (
                      SELECT 1 FROM studio_applications a
                      WHERE a.studio_id = s.id AND a.dancer_id = ? AND a.status != 'withdrawn'
                  )
                ORDER BY s.name, s.id
                """,
                (dancer_id,),
            ).fetchall()
            return [row_to_public(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def studio_dancers(cls, studio_id: str) -> List[AffiliatedDancer]:
        """Dancers whose applications to ``studio_id`` were accepted."""
        conn = get_connection()
        try:
            rows = conn.execute(
                """
                SELECT d.*, a.responded_at AS joined_at
                FROM studio_applications a
                JOIN dancers d ON d.id = a.dancer_id
                WHERE a.studio_id = ? AND a.status = 'accepted'
                ORDER BY d.name, d.id
                """,
                (studio_id,),
            ).fetchall()
        finally:
            conn.close()
        return [
            AffiliatedDancer(
                id=row["id"],
                eodsa_id=row["eodsa_id"],
                name=row["name"],
                age=calculate_age(date.fromisoformat(row["date_of_birth"])),
                approved=row["approval_status"] == "approved",
                email=row["email"],
                phone=row["phone"],
                joined_at=row["joined_at"],
            )
            for row in rows
        ]
