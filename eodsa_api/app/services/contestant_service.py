"""
Legacy contestant registrations.

A contestant is registered together with its roster of dancers in a
single transaction.  Roster dancer ids may be used as entry
participants for that contestant.
"""

import logging
import sqlite3
from typing import List

from eodsa_api.app.core.db import get_connection, new_code, new_id, utcnow_iso
from eodsa_api.app.core.errors import ConflictError
from eodsa_api.app.schemas.contestant import ContestantCreate, ContestantRead, RosterDancerRead, StudioInfo


logger = logging.getLogger(__name__)


def _to_read(row: sqlite3.Row, roster: List[sqlite3.Row]) -> ContestantRead:
    studio_info = None
    if row["type"] == "studio":
        studio_info = StudioInfo(
            address=row["studio_address"] or "",
            contact_person=row["studio_contact_person"] or "",
        )
    return ContestantRead(
        id=row["id"],
        eodsa_id=row["eodsa_id"],
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        type=row["type"],
        studio_name=row["studio_name"],
        studio_info=studio_info,
        registration_date=row["registration_date"],
        dancers=[
            RosterDancerRead(
                id=d["id"], name=d["name"], age=d["age"], style=d["style"], national_id=d["national_id"]
            )
            for d in roster
        ],
    )


class ContestantService:

    @classmethod
    async def register(cls, data: ContestantCreate) -> ContestantRead:
        contestant_id = new_id("cnt")
        info = data.studio_info or StudioInfo()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            eodsa_id = new_code(cursor, "E", "contestants", "eodsa_id")
            try:
                cursor.execute(
                    """
                    INSERT INTO contestants (id, eodsa_id, name, email, phone, type, studio_name,
                                             studio_address, studio_contact_person, registration_date)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        contestant_id,
                        eodsa_id,
                        data.name,
                        data.email.strip().lower(),
                        data.phone,
                        data.type,
                        data.studio_name if data.type == "studio" else None,
                        info.address or None,
                        info.contact_person or None,
                        utcnow_iso(),
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise ConflictError("A contestant with this email is already registered") from exc
            cursor.executemany(
                """
                INSERT INTO contestant_dancers (id, contestant_id, name, age, style, national_id)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (new_id("cd"), contestant_id, d.name, d.age, d.style, d.national_id)
                    for d in data.dancers
                ],
            )
            conn.commit()
            row = cursor.execute("SELECT * FROM contestants WHERE id = ?", (contestant_id,)).fetchone()
            roster = cursor.execute(
                "SELECT * FROM contestant_dancers WHERE contestant_id = ? ORDER BY rowid", (contestant_id,)
            ).fetchall()
        finally:
            conn.close()
        logger.info("Registered %s contestant %s with %d dancers", data.type, contestant_id, len(roster))
        return _to_read(row, roster)

    @classmethod
    async def list_contestants(cls) -> List[ContestantRead]:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute("SELECT * FROM contestants ORDER BY registration_date DESC, id").fetchall()
            result = []
            for row in rows:
                roster = cursor.execute(
                    "SELECT * FROM contestant_dancers WHERE contestant_id = ? ORDER BY rowid", (row["id"],)
                ).fetchall()
                result.append(_to_read(row, roster))
            return result
        finally:
            conn.close()
