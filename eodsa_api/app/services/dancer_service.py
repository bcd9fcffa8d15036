"""
Business logic for individual dancers.

Dancers register themselves, receive an EODSA ID (``E`` followed by six
digits) and wait in the admin approval queue.  Only approved dancers
may apply to studios or take part in competition entries.  Dancers
under 18 must supply guardian contact details.
"""

import logging
import sqlite3
from datetime import date
from typing import List, Optional

from eodsa_api.app.core.config import settings
from eodsa_api.app.core.constants import ADULT_AGE, APPROVAL_STATUSES
from eodsa_api.app.core.db import get_connection, new_code, new_id, utcnow_iso
from eodsa_api.app.core.errors import ConflictError, NotFoundError, ValidationError
from eodsa_api.app.core.security import Principal
from eodsa_api.app.schemas.dancer import DancerPublic, DancerRead, DancerRegister, DancerRegistered

from .audit_service import AuditService
from .email_service import EmailService


logger = logging.getLogger(__name__)


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """Age in whole years on ``today`` (defaults to the current date)."""
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def _row_age(row: sqlite3.Row) -> int:
    return calculate_age(date.fromisoformat(row["date_of_birth"]))


def row_to_public(row: sqlite3.Row) -> DancerPublic:
    return DancerPublic(
        id=row["id"],
        eodsa_id=row["eodsa_id"],
        name=row["name"],
        age=_row_age(row),
        approved=row["approval_status"] == "approved",
    )


def row_to_read(row: sqlite3.Row) -> DancerRead:
    return DancerRead(
        id=row["id"],
        eodsa_id=row["eodsa_id"],
        name=row["name"],
        age=_row_age(row),
        approved=row["approval_status"] == "approved",
        date_of_birth=row["date_of_birth"],
        national_id=row["national_id"],
        email=row["email"],
        phone=row["phone"],
        guardian_name=row["guardian_name"],
        guardian_email=row["guardian_email"],
        guardian_phone=row["guardian_phone"],
        approval_status=row["approval_status"],
        approved_by=row["approved_by"],
        approved_at=row["approved_at"],
        rejection_reason=row["rejection_reason"],
        created_at=row["created_at"],
    )


def _conflict_message(exc: sqlite3.IntegrityError) -> str:
    text = str(exc)
    if "dancers.national_id" in text:
        return "A dancer with this national ID is already registered"
    if "dancers.email" in text:
        return "A dancer with this email is already registered"
    return "Dancer already exists"


class DancerService:
    """Registration, lookup and approval of dancers."""

    @classmethod
    async def register(cls, data: DancerRegister) -> DancerRegistered:
        """Create a dancer in the approval queue.

        Raises ``ValidationError`` for a future birth date or missing
        guardian details on a minor, ``ConflictError`` when the national
        ID or email is already registered.
        """
        if data.date_of_birth > date.today():
            raise ValidationError("Date of birth cannot be in the future")
        age = calculate_age(data.date_of_birth)
        if age < ADULT_AGE and not (data.guardian_name and data.guardian_email and data.guardian_phone):
            raise ValidationError("Guardian information is required for dancers under 18 years old")

        approval_status = "approved" if settings.auto_approve_dancers else "pending"
        dancer_id = new_id("dnc")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            eodsa_id = new_code(cursor, "E", "dancers", "eodsa_id")
            try:
                cursor.execute(
                    """
                    INSERT INTO dancers (id, eodsa_id, name, date_of_birth, national_id, email, phone,
                                         guardian_name, guardian_email, guardian_phone,
                                         approval_status, approved_at, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        dancer_id,
                        eodsa_id,
                        data.name,
                        data.date_of_birth.isoformat(),
                        data.national_id,
                        data.email,
                        data.phone,
                        data.guardian_name,
                        data.guardian_email,
                        data.guardian_phone,
                        approval_status,
                        utcnow_iso() if approval_status == "approved" else None,
                        utcnow_iso(),
                        utcnow_iso(),
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise ConflictError(_conflict_message(exc)) from exc
            conn.commit()
        finally:
            conn.close()

        logger.info("Registered dancer %s (%s), status %s", dancer_id, eodsa_id, approval_status)
        contact = data.email or data.guardian_email
        if contact:
            await EmailService.send_dancer_registration(data.name, contact, eodsa_id)

        if approval_status == "approved":
            message = "Registration successful."
        else:
            message = "Registration successful. Your account is pending admin approval."
        return DancerRegistered(
            id=dancer_id,
            eodsa_id=eodsa_id,
            name=data.name,
            age=age,
            approved=approval_status == "approved",
            approval_status=approval_status,
            message=message,
        )

    @classmethod
    async def get_by_eodsa_id(cls, eodsa_id: str) -> DancerPublic:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM dancers WHERE eodsa_id = ?", (eodsa_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Dancer not found")
        return row_to_public(row)

    @classmethod
    async def list_dancers(cls, status: Optional[str] = None) -> List[DancerRead]:
        """All dancers, newest first, optionally filtered by approval status."""
        if status is not None and status not in APPROVAL_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        conn = get_connection()
        try:
            if status:
                rows = conn.execute(
                    "SELECT * FROM dancers WHERE approval_status = ? ORDER BY created_at DESC, id",
                    (status,),
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM dancers ORDER BY created_at DESC, id").fetchall()
            return [row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def set_approval(
        cls,
        dancer_id: str,
        action: str,
        admin: Principal,
        rejection_reason: Optional[str] = None,
    ) -> DancerRead:
        """Approve or reject a dancer.

        Rejection requires a non-empty reason.  The new status simply
        overwrites the previous one; a rejected dancer can later be
        approved and vice versa.
        """
        reason = (rejection_reason or "").strip()
        if action == "reject" and not reason:
            raise ValidationError("Rejection reason is required")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM dancers WHERE id = ?", (dancer_id,)).fetchone():
                raise NotFoundError("Dancer not found")
            now = utcnow_iso()
            if action == "approve":
                cursor.execute(
                    """
                    UPDATE dancers
                    SET approval_status = 'approved', approved_by = ?, approved_at = ?,
                        rejection_reason = NULL, updated_at = ?
                    WHERE id = ?
                    """,
                    (admin.id, now, now, dancer_id),
                )
            else:
                cursor.execute(
                    """
                    UPDATE dancers
                    SET approval_status = 'rejected', approved_by = ?, approved_at = NULL,
                        rejection_reason = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (admin.id, reason, now, dancer_id),
                )
            conn.commit()
            row = cursor.execute("SELECT * FROM dancers WHERE id = ?", (dancer_id,)).fetchone()
        finally:
            conn.close()

        logger.info("Admin %s %sd dancer %s", admin.id, action, dancer_id)
        await AuditService.record(
            admin,
            action=action,
            object_type="dancer",
            object_id=dancer_id,
            details={"rejectionReason": reason} if reason else None,
        )
        return row_to_read(row)
