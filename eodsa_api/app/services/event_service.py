"""
Business logic for competition events.

Every event is one competition slot: a region, an age category and a
performance type, with a flat entry fee per entry.
"""

import logging
import sqlite3
from typing import List, Optional

from eodsa_api.app.core.db import get_connection, new_id, utcnow_iso
from eodsa_api.app.core.errors import NotFoundError
from eodsa_api.app.core.security import Principal
from eodsa_api.app.schemas.entry import EntryRead, PerformanceRead
from eodsa_api.app.schemas.event import EventCreate, EventRead

from .audit_service import AuditService
from .entry_service import entry_row_to_read, performance_row_to_read


logger = logging.getLogger(__name__)


def _row_to_read(row: sqlite3.Row) -> EventRead:
    return EventRead(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        region=row["region"],
        age_category=row["age_category"],
        performance_type=row["performance_type"],
        event_date=row["event_date"],
        registration_deadline=row["registration_deadline"],
        venue=row["venue"],
        status=row["status"],
        max_participants=row["max_participants"],
        entry_fee=row["entry_fee"],
        created_by=row["created_by"],
        created_at=row["created_at"],
    )


class EventService:
    """Create and query events together with their entries and performances."""

    @classmethod
    async def create_event(cls, data: EventCreate, admin: Principal) -> EventRead:
        logger.info("Admin %s is creating event '%s'", admin.id, data.name)
        event_id = new_id("evt")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO events (id, name, description, region, age_category, performance_type,
                                    event_date, registration_deadline, venue, status,
                                    max_participants, entry_fee, created_by, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event_id,
                    data.name,
                    data.description,
                    data.region,
                    data.age_category,
                    data.performance_type,
                    data.event_date.isoformat(),
                    data.registration_deadline.isoformat(),
                    data.venue,
                    data.status,
                    data.max_participants,
                    data.entry_fee,
                    admin.id,
                    utcnow_iso(),
                ),
            )
            conn.commit()
            row = cursor.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
        finally:
            conn.close()
        await AuditService.record(
            admin, action="create", object_type="event", object_id=event_id, details={"name": data.name}
        )
        return _row_to_read(row)

    @classmethod
    async def list_events(
        cls,
        region: Optional[str] = None,
        age_category: Optional[str] = None,
        performance_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[EventRead]:
        """Events ordered by date, optionally filtered."""
        where_clauses: List[str] = []
        params: list = []
        for column, value in (
            ("region", region),
            ("age_category", age_category),
            ("performance_type", performance_type),
            ("status", status),
        ):
            if value:
                where_clauses.append(f"{column} = ?")
                params.append(value)
        query = "SELECT * FROM events"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY event_date, id"
        conn = get_connection()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
            return [_row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_event(cls, event_id: str) -> EventRead:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Event not found")
        return _row_to_read(row)

    @classmethod
    async def list_entries(cls, event_id: str) -> List[EntryRead]:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM events WHERE id = ?", (event_id,)).fetchone():
                raise NotFoundError("Event not found")
            rows = cursor.execute(
                "SELECT * FROM event_entries WHERE event_id = ? ORDER BY submitted_at, id",
                (event_id,),
            ).fetchall()
            return [entry_row_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def list_performances(cls, event_id: str) -> List[PerformanceRead]:
        """Performances of an event in programme order (unnumbered items last)."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM events WHERE id = ?", (event_id,)).fetchone():
                raise NotFoundError("Event not found")
            rows = cursor.execute(
                """
                SELECT * FROM performances WHERE event_id = ?
                ORDER BY item_number IS NULL, item_number, created_at, id
                """,
                (event_id,),
            ).fetchall()
            return [performance_row_to_read(row) for row in rows]
        finally:
            conn.close()
