"""
Competition entries, item numbers and performances.

``submit_entry`` enforces the eligibility rules for an entry:

1. the event exists and is still taking entries, and its performance
   type matches the one on the form;
2. the contestant exists, as a dancer, a studio or a legacy contestant;
3. every participant is either an approved dancer or, for legacy
   contestants, a dancer on the contestant's roster;
4. the participant count fits the performance type.

The fee is the event's flat entry fee.  Payment is never processed
here; entries are stored with ``paymentStatus`` ``pending``.

Administrators assign programme item numbers (unique per event) and
approve entries; approving an entry creates its performance.
"""

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from eodsa_api.app.core.constants import OPEN_EVENT_STATUSES
from eodsa_api.app.core.db import get_connection, new_id, utcnow_iso
from eodsa_api.app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from eodsa_api.app.core.security import Principal
from eodsa_api.app.schemas.entry import EntryCreate, EntryRead, PerformanceRead

from . import eligibility
from .audit_service import AuditService
from .email_service import EmailService


logger = logging.getLogger(__name__)


def entry_row_to_read(row: sqlite3.Row) -> EntryRead:
    return EntryRead(
        id=row["id"],
        event_id=row["event_id"],
        contestant_id=row["contestant_id"],
        eodsa_id=row["eodsa_id"],
        participant_ids=json.loads(row["participant_ids"]),
        calculated_fee=row["calculated_fee"],
        payment_status=row["payment_status"],
        payment_method=row["payment_method"],
        submitted_at=row["submitted_at"],
        approved=bool(row["approved"]),
        approved_at=row["approved_at"],
        item_name=row["item_name"],
        choreographer=row["choreographer"],
        mastery=row["mastery"],
        item_style=row["item_style"],
        estimated_duration=row["estimated_duration"],
        item_number=row["item_number"],
    )


def performance_row_to_read(row: sqlite3.Row) -> PerformanceRead:
    return PerformanceRead(
        id=row["id"],
        event_id=row["event_id"],
        entry_id=row["entry_id"],
        contestant_id=row["contestant_id"],
        title=row["title"],
        participant_names=json.loads(row["participant_names"]),
        duration=row["duration"],
        choreographer=row["choreographer"],
        mastery=row["mastery"],
        item_style=row["item_style"],
        item_number=row["item_number"],
        status=row["status"],
    )


@dataclass
class Contestant:
    """Whoever submits an entry, resolved from the contestant id."""

    id: str
    kind: str
    name: str
    email: Optional[str]
    eodsa_id: Optional[str] = None
    # Legacy contestants only: roster dancer id -> name.
    roster: Dict[str, str] = field(default_factory=dict)


def _find_dancer(cursor: sqlite3.Cursor, identifier: str) -> Optional[sqlite3.Row]:
    return cursor.execute(
        "SELECT * FROM dancers WHERE id = ? OR eodsa_id = ?", (identifier, identifier)
    ).fetchone()


def _resolve_contestant(cursor: sqlite3.Cursor, identifier: str) -> Contestant:
    row = _find_dancer(cursor, identifier)
    if row:
        return Contestant(
            id=row["id"],
            kind="dancer",
            name=row["name"],
            email=row["email"] or row["guardian_email"],
            eodsa_id=row["eodsa_id"],
        )
    row = cursor.execute(
        "SELECT * FROM studios WHERE id = ? OR registration_number = ?", (identifier, identifier)
    ).fetchone()
    if row:
        return Contestant(id=row["id"], kind="studio", name=row["name"], email=row["email"])
    row = cursor.execute(
        "SELECT * FROM contestants WHERE id = ? OR eodsa_id = ?", (identifier, identifier)
    ).fetchone()
    if row:
        roster = cursor.execute(
            "SELECT id, name FROM contestant_dancers WHERE contestant_id = ?", (row["id"],)
        ).fetchall()
        return Contestant(
            id=row["id"],
            kind="contestant",
            name=row["name"],
            email=row["email"],
            eodsa_id=row["eodsa_id"],
            roster={r["id"]: r["name"] for r in roster},
        )
    raise NotFoundError("Contestant not found")


def _participant_names(cursor: sqlite3.Cursor, participant_ids: List[str]) -> List[str]:
    names = []
    for pid in participant_ids:
        row = _find_dancer(cursor, pid)
        if row is None:
            row = cursor.execute("SELECT name FROM contestant_dancers WHERE id = ?", (pid,)).fetchone()
        names.append(row["name"] if row else pid)
    return names


class EntryService:
    """Submission, numbering and approval of competition entries."""

    @classmethod
    async def submit_entry(cls, data: EntryCreate) -> EntryRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            event = cursor.execute("SELECT * FROM events WHERE id = ?", (data.event_id,)).fetchone()
            if not event:
                raise NotFoundError("Event not found")
            if event["status"] not in OPEN_EVENT_STATUSES:
                raise ValidationError("Registration is closed for this event")
            if data.performance_type and data.performance_type != event["performance_type"]:
                raise ValidationError(
                    f"Performance type {data.performance_type} does not match event type "
                    f"{event['performance_type']}"
                )

            contestant = _resolve_contestant(cursor, data.contestant_id)

            # Dancers may be named by id or EODSA ID; both map to dancers.id.
            participant_ids: List[str] = []
            for pid in data.participant_ids:
                dancer = _find_dancer(cursor, pid)
                if dancer is not None:
                    if dancer["approval_status"] != "approved":
                        raise ForbiddenError(
                            f"Dancer {dancer['name']} ({dancer['eodsa_id']}) is not approved for competition"
                        )
                    participant_ids.append(dancer["id"])
                elif pid in contestant.roster:
                    participant_ids.append(pid)
                else:
                    raise ValidationError(f"Participant {pid} is not a registered dancer")

            eligibility.check_unique_participants(participant_ids)
            eligibility.check_participant_count(event["performance_type"], len(participant_ids))
            eligibility.check_item_details(data.mastery, data.item_style, data.estimated_duration)

            entry_id = new_id("ent")
            fee = float(event["entry_fee"])
            cursor.execute(
                """
                INSERT INTO event_entries (id, event_id, contestant_id, eodsa_id, participant_ids,
                                           calculated_fee, payment_status, payment_method, submitted_at,
                                           approved, item_name, choreographer, mastery, item_style,
                                           estimated_duration)
                VALUES (?, ?, ?, ?, ?, ?, 'pending', ?, ?, 0, ?, ?, ?, ?, ?)
                """,
                (
                    entry_id,
                    data.event_id,
                    contestant.id,
                    data.eodsa_id or contestant.eodsa_id,
                    json.dumps(participant_ids),
                    fee,
                    data.payment_method,
                    utcnow_iso(),
                    data.item_name,
                    data.choreographer,
                    data.mastery,
                    data.item_style,
                    data.estimated_duration,
                ),
            )
            conn.commit()
            row = cursor.execute("SELECT * FROM event_entries WHERE id = ?", (entry_id,)).fetchone()
        finally:
            conn.close()

        logger.info("Entry %s submitted for event %s by %s %s", entry_id, data.event_id, contestant.kind, contestant.id)
        if contestant.email:
            await EmailService.send_entry_confirmation(
                contestant.name, contestant.email, event["name"], data.item_name, fee
            )
        return entry_row_to_read(row)

    @classmethod
    async def list_entries(
        cls, event_id: Optional[str] = None, contestant_id: Optional[str] = None
    ) -> List[EntryRead]:
        where_clauses: List[str] = []
        params: list = []
        if event_id:
            where_clauses.append("event_id = ?")
            params.append(event_id)
        if contestant_id:
            where_clauses.append("contestant_id = ?")
            params.append(contestant_id)
        query = "SELECT * FROM event_entries"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY submitted_at, id"
        conn = get_connection()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
            return [entry_row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def assign_item_number(cls, entry_id: str, item_number: int, admin: Principal) -> EntryRead:
        """Give an entry its programme number, unique within the entry's event."""
        if item_number < 1:
            raise ValidationError("Item number must be a positive integer")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            entry = cursor.execute("SELECT * FROM event_entries WHERE id = ?", (entry_id,)).fetchone()
            if not entry:
                raise NotFoundError("Entry not found")
            taken = cursor.execute(
                "SELECT id FROM event_entries WHERE event_id = ? AND item_number = ? AND id != ?",
                (entry["event_id"], item_number, entry_id),
            ).fetchone()
            if taken:
                raise ConflictError(f"Item number {item_number} is already assigned in this event")
            try:
                cursor.execute(
                    "UPDATE event_entries SET item_number = ? WHERE id = ?", (item_number, entry_id)
                )
            except sqlite3.IntegrityError as exc:
                raise ConflictError(f"Item number {item_number} is already assigned in this event") from exc
            cursor.execute(
                "UPDATE performances SET item_number = ? WHERE entry_id = ?", (item_number, entry_id)
            )
            conn.commit()
            row = cursor.execute("SELECT * FROM event_entries WHERE id = ?", (entry_id,)).fetchone()
        finally:
            conn.close()

        logger.info("Admin %s assigned item number %s to entry %s", admin.id, item_number, entry_id)
        await AuditService.record(
            admin,
            action="assign_item_number",
            object_type="entry",
            object_id=entry_id,
            details={"itemNumber": item_number},
        )
        return entry_row_to_read(row)

    @classmethod
    async def approve_entry(cls, entry_id: str, admin: Principal) -> PerformanceRead:
        """Mark an entry approved and create its performance.

        Approving an already approved entry returns the existing
        performance unchanged.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            entry = cursor.execute("SELECT * FROM event_entries WHERE id = ?", (entry_id,)).fetchone()
            if not entry:
                raise NotFoundError("Entry not found")
            existing = cursor.execute(
                "SELECT * FROM performances WHERE entry_id = ?", (entry_id,)
            ).fetchone()
            if existing:
                return performance_row_to_read(existing)

            now = utcnow_iso()
            cursor.execute(
                "UPDATE event_entries SET approved = 1, approved_at = ? WHERE id = ?", (now, entry_id)
            )
            names = _participant_names(cursor, json.loads(entry["participant_ids"]))
            performance_id = new_id("prf")
            cursor.execute(
                """
                INSERT INTO performances (id, event_id, entry_id, contestant_id, title, participant_names,
                                          duration, choreographer, mastery, item_style, item_number,
                                          status, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 'scheduled', ?)
                """,
                (
                    performance_id,
                    entry["event_id"],
                    entry_id,
                    entry["contestant_id"],
                    entry["item_name"],
                    json.dumps(names),
                    entry["estimated_duration"],
                    entry["choreographer"],
                    entry["mastery"],
                    entry["item_style"],
                    entry["item_number"],
                    now,
                ),
            )
            conn.commit()
            row = cursor.execute("SELECT * FROM performances WHERE id = ?", (performance_id,)).fetchone()
        finally:
            conn.close()

        logger.info("Admin %s approved entry %s as performance %s", admin.id, entry_id, performance_id)
        await AuditService.record(
            admin,
            action="approve",
            object_type="entry",
            object_id=entry_id,
            details={"performanceId": performance_id},
        )
        return performance_row_to_read(row)
