"""
Audit service for recording and querying administrative actions.

Approvals, application responses, item-number assignments, entry
approvals and score submissions are written to the ``audit_logs``
table.  Use ``record`` from other services: a failure to write the
audit row is logged and never fails the action being audited.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, List, Optional

from eodsa_api.app.core.db import get_connection
from eodsa_api.app.core.security import Principal


logger = logging.getLogger(__name__)


class AuditService:
    """Service class for writing and retrieving audit logs."""

    @classmethod
    async def log(
        cls,
        actor: Optional[Principal],
        action: str,
        object_type: str,
        object_id: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Insert a new audit record.

        Parameters
        ----------
        actor : Optional[Principal]
            Caller performing the action, ``None`` for anonymous or
            system actions.
        action : str
            Short verb, e.g. "approve", "reject", "assign_item_number".
        object_type : str
            Kind of object affected ("dancer", "application", "entry", ...).
        object_id : Optional[str]
            Identifier of the affected object.
        details : Optional[dict]
            Extra structured data, stored as JSON.
        """
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO audit_logs (actor_kind, actor_id, action, object_type, object_id, details)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    actor.kind if actor else None,
                    actor.id if actor else None,
                    action,
                    object_type,
                    object_id,
                    json.dumps(details) if details else None,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    @classmethod
    async def record(cls, *args: Any, **kwargs: Any) -> None:
        """Like ``log`` but never raises."""
        try:
            await cls.log(*args, **kwargs)
        except sqlite3.Error as exc:
            logger.warning("Could not write audit log for %s: %s", kwargs.get("action"), exc)

    @classmethod
    async def list_logs(
        cls,
        object_type: Optional[str] = None,
        action: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """Retrieve audit records, newest first, with optional filters."""
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if object_type:
                where_clauses.append("object_type = ?")
                params.append(object_type)
            if action:
                where_clauses.append("action = ?")
                params.append(action)
            query = (
                "SELECT id, actor_kind, actor_id, action, object_type, object_id, timestamp, details "
                "FROM audit_logs"
            )
            if where_clauses:
                query += " WHERE " + " AND ".join(where_clauses)
            query += " ORDER BY id DESC LIMIT ? OFFSET ?"
            params.extend([limit, offset])
            rows = conn.execute(query, tuple(params)).fetchall()
            logs = []
            for row in rows:
                details_data = None
                if row["details"]:
                    try:
                        details_data = json.loads(row["details"])
                    except json.JSONDecodeError:
                        details_data = row["details"]
                logs.append(
                    {
                        "id": row["id"],
                        "actorKind": row["actor_kind"],
                        "actorId": row["actor_id"],
                        "action": row["action"],
                        "objectType": row["object_type"],
                        "objectId": row["object_id"],
                        "timestamp": row["timestamp"],
                        "details": details_data,
                    }
                )
            return logs
        finally:
            conn.close()
