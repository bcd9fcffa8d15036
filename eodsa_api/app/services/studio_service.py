"""
Business logic for dance studios.

Studios register with email and password and receive a registration
number (``S`` followed by six digits).  New studios are approved
immediately; administrators can still reject or re-approve them.
"""

import logging
import sqlite3
from typing import List, Optional

from eodsa_api.app.core.constants import APPROVAL_STATUSES
from eodsa_api.app.core.db import get_connection, new_code, new_id, utcnow_iso
from eodsa_api.app.core.errors import ConflictError, NotFoundError, ValidationError
from eodsa_api.app.core.security import Principal, hash_password
from eodsa_api.app.schemas.studio import StudioPublic, StudioRead, StudioRegister

from .audit_service import AuditService
from .email_service import EmailService


logger = logging.getLogger(__name__)


def row_to_public(row: sqlite3.Row) -> StudioPublic:
    return StudioPublic(
        id=row["id"],
        name=row["name"],
        registration_number=row["registration_number"],
        contact_person=row["contact_person"],
        address=row["address"],
    )


def row_to_read(row: sqlite3.Row) -> StudioRead:
    return StudioRead(
        id=row["id"],
        name=row["name"],
        registration_number=row["registration_number"],
        contact_person=row["contact_person"],
        address=row["address"],
        email=row["email"],
        phone=row["phone"],
        approved=row["approval_status"] == "approved",
        approval_status=row["approval_status"],
        approved_by=row["approved_by"],
        approved_at=row["approved_at"],
        rejection_reason=row["rejection_reason"],
        created_at=row["created_at"],
    )


class StudioService:
    """Registration, listing and approval of studios."""

    @classmethod
    async def register(cls, data: StudioRegister) -> StudioRead:
        """Create a studio account.  Raises ``ConflictError`` for a taken email."""
        studio_id = new_id("std")
        now = utcnow_iso()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            registration_number = new_code(cursor, "S", "studios", "registration_number")
            try:
                cursor.execute(
                    """
                    INSERT INTO studios (id, registration_number, name, email, password, contact_person,
                                         address, phone, approval_status, approved_at, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'approved', ?, ?, ?)
                    """,
                    (
                        studio_id,
                        registration_number,
                        data.name,
                        data.email,
                        hash_password(data.password),
                        data.contact_person,
                        data.address,
                        data.phone,
                        now,
                        now,
                        now,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise ConflictError("A studio with this email is already registered") from exc
            conn.commit()
            row = cursor.execute("SELECT * FROM studios WHERE id = ?", (studio_id,)).fetchone()
        finally:
            conn.close()

        logger.info("Registered studio %s (%s)", studio_id, registration_number)
        await EmailService.send_studio_registration(data.name, data.email, registration_number)
        return row_to_read(row)

    @classmethod
    async def list_approved(cls) -> List[StudioPublic]:
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM studios WHERE approval_status = 'approved' ORDER BY name, id"
            ).fetchall()
            return [row_to_public(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def list_studios(cls, status: Optional[str] = None) -> List[StudioRead]:
        if status is not None and status not in APPROVAL_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        conn = get_connection()
        try:
            if status:
                rows = conn.execute(
                    "SELECT * FROM studios WHERE approval_status = ? ORDER BY created_at DESC, id",
                    (status,),
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM studios ORDER BY created_at DESC, id").fetchall()
            return [row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def set_approval(
        cls,
        studio_id: str,
        action: str,
        admin: Principal,
        rejection_reason: Optional[str] = None,
    ) -> StudioRead:
        """Approve or reject a studio; rejection requires a reason."""
        reason = (rejection_reason or "").strip()
        if action == "reject" and not reason:
            raise ValidationError("Rejection reason is required")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM studios WHERE id = ?", (studio_id,)).fetchone():
                raise NotFoundError("Studio not found")
            now = utcnow_iso()
            if action == "approve":
                cursor.execute(
                    """
                    UPDATE studios
                    SET approval_status = 'approved', approved_by = ?, approved_at = ?,
                        rejection_reason = NULL, updated_at = ?
                    WHERE id = ?
                    """,
                    (admin.id, now, now, studio_id),
                )
            else:
                cursor.execute(
                    """
                    UPDATE studios
                    SET approval_status = 'rejected', approved_by = ?, approved_at = NULL,
                        rejection_reason = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (admin.id, reason, now, studio_id),
                )
            conn.commit()
            row = cursor.execute("SELECT * FROM studios WHERE id = ?", (studio_id,)).fetchone()
        finally:
            conn.close()

        logger.info("Admin %s %sd studio %s", admin.id, action, studio_id)
        await AuditService.record(
            admin,
            action=action,
            object_type="studio",
            object_id=studio_id,
            details={"rejectionReason": reason} if reason else None,
        )
        return row_to_read(row)
