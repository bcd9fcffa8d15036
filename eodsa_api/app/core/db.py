"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations once at process start
(``init_db``) and small helpers for generating identifiers and
timestamps.  Applied migration versions are stored in the
``migrations`` table and new migrations are executed in order, so
``init_db`` is idempotent and safe to call from the application startup
hook and from the admin CLI.

Uniqueness rules that matter for correctness (one live application per
dancer/studio pair, one item number per event, one score per judge and
performance) are declared here as constraints; services translate the
resulting ``sqlite3.IntegrityError`` into conflict errors.
"""

import os
import secrets
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .config import settings


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is switched on for the lifetime of
    the connection (SQLite disables it by default).
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor, commits and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def new_id(prefix: str) -> str:
    """Return a new opaque identifier such as ``dnc_1f0c2a9b3e4d``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def new_code(cursor: sqlite3.Cursor, prefix: str, table: str, column: str) -> str:
    """Return an unused human readable code such as ``E123456``.

    ``table`` and ``column`` are trusted identifiers supplied by the
    caller; the code is a prefix followed by six random digits and is
    checked against existing rows before being returned.
    """
    while True:
        code = f"{prefix}{secrets.randbelow(1_000_000):06d}"
        row = cursor.execute(
            f"SELECT 1 FROM {table} WHERE {column} = ?", (code,)
        ).fetchone()
        if row is None:
            return code


def utcnow_iso() -> str:
    """Current UTC time as an ISO 8601 string (seconds precision)."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: registration and approval
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS dancers (
            id TEXT PRIMARY KEY,
            eodsa_id TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            date_of_birth TEXT NOT NULL,
            national_id TEXT NOT NULL UNIQUE,
            email TEXT UNIQUE,
            phone TEXT,
            guardian_name TEXT,
            guardian_email TEXT,
            guardian_phone TEXT,
            approval_status TEXT NOT NULL DEFAULT 'pending'
                CHECK (approval_status IN ('pending', 'approved', 'rejected')),
            approved_by TEXT,
            approved_at TIMESTAMP,
            rejection_reason TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS studios (
            id TEXT PRIMARY KEY,
            registration_number TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            contact_person TEXT NOT NULL,
            address TEXT,
            phone TEXT,
            approval_status TEXT NOT NULL DEFAULT 'approved'
                CHECK (approval_status IN ('pending', 'approved', 'rejected')),
            approved_by TEXT,
            approved_at TIMESTAMP,
            rejection_reason TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS studio_applications (
            id TEXT PRIMARY KEY,
            dancer_id TEXT NOT NULL,
            studio_id TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'accepted', 'rejected', 'withdrawn')),
            applied_at TIMESTAMP NOT NULL,
            responded_at TIMESTAMP,
            responded_by TEXT,
            rejection_reason TEXT,
            FOREIGN KEY(dancer_id) REFERENCES dancers(id),
            FOREIGN KEY(studio_id) REFERENCES studios(id)
        );

        -- One live (non-withdrawn) application per dancer/studio pair.
        CREATE UNIQUE INDEX IF NOT EXISTS uq_studio_applications_pair
            ON studio_applications(dancer_id, studio_id)
            WHERE status != 'withdrawn';
        CREATE INDEX IF NOT EXISTS idx_studio_applications_studio ON studio_applications(studio_id);

        CREATE TABLE IF NOT EXISTS judges (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            is_admin INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS contestants (
            id TEXT PRIMARY KEY,
            eodsa_id TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            phone TEXT NOT NULL,
            type TEXT NOT NULL CHECK (type IN ('studio', 'private')),
            studio_name TEXT,
            studio_address TEXT,
            studio_contact_person TEXT,
            registration_date TIMESTAMP NOT NULL
        );

        CREATE TABLE IF NOT EXISTS contestant_dancers (
            id TEXT PRIMARY KEY,
            contestant_id TEXT NOT NULL,
            name TEXT NOT NULL,
            age INTEGER NOT NULL,
            style TEXT NOT NULL,
            national_id TEXT NOT NULL,
            FOREIGN KEY(contestant_id) REFERENCES contestants(id) ON DELETE CASCADE
        );
        CREATE INDEX IF NOT EXISTS idx_contestant_dancers_contestant ON contestant_dancers(contestant_id);

        CREATE TABLE IF NOT EXISTS audit_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            actor_kind TEXT,
            actor_id TEXT,
            action TEXT NOT NULL,
            object_type TEXT,
            object_id TEXT,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            details TEXT
        );
        """,
    ),
    # Migration 2: competitions, entries and judging
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS events (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT,
            region TEXT NOT NULL,
            age_category TEXT NOT NULL,
            performance_type TEXT NOT NULL
                CHECK (performance_type IN ('Solo', 'Duet', 'Trio', 'Group')),
            event_date TIMESTAMP NOT NULL,
            registration_deadline TIMESTAMP NOT NULL,
            venue TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'upcoming',
            max_participants INTEGER,
            entry_fee REAL NOT NULL DEFAULT 0,
            created_by TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS event_entries (
            id TEXT PRIMARY KEY,
            event_id TEXT NOT NULL,
            contestant_id TEXT NOT NULL,
            eodsa_id TEXT,
            participant_ids TEXT NOT NULL,
            calculated_fee REAL NOT NULL,
            payment_status TEXT NOT NULL DEFAULT 'pending'
                CHECK (payment_status IN ('pending', 'paid', 'failed')),
            payment_method TEXT,
            submitted_at TIMESTAMP NOT NULL,
            approved INTEGER NOT NULL DEFAULT 0,
            approved_at TIMESTAMP,
            item_name TEXT NOT NULL,
            choreographer TEXT NOT NULL,
            mastery TEXT NOT NULL,
            item_style TEXT NOT NULL,
            estimated_duration INTEGER NOT NULL,
            item_number INTEGER,
            FOREIGN KEY(event_id) REFERENCES events(id)
        );
        -- NULL item numbers do not collide; assigned numbers are unique per event.
        CREATE UNIQUE INDEX IF NOT EXISTS uq_event_entries_item_number
            ON event_entries(event_id, item_number);
        CREATE INDEX IF NOT EXISTS idx_event_entries_contestant ON event_entries(contestant_id);

        CREATE TABLE IF NOT EXISTS performances (
            id TEXT PRIMARY KEY,
            event_id TEXT NOT NULL,
            entry_id TEXT NOT NULL UNIQUE,
            contestant_id TEXT NOT NULL,
            title TEXT NOT NULL,
            participant_names TEXT NOT NULL,
            duration INTEGER NOT NULL,
            choreographer TEXT,
            mastery TEXT,
            item_style TEXT,
            item_number INTEGER,
            status TEXT NOT NULL DEFAULT 'scheduled',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(event_id) REFERENCES events(id),
            FOREIGN KEY(entry_id) REFERENCES event_entries(id)
        );
        CREATE INDEX IF NOT EXISTS idx_performances_event ON performances(event_id);

        CREATE TABLE IF NOT EXISTS scores (
            id TEXT PRIMARY KEY,
            judge_id TEXT NOT NULL,
            performance_id TEXT NOT NULL,
            technical_score REAL NOT NULL CHECK (technical_score >= 1 AND technical_score <= 10),
            artistic_score REAL NOT NULL CHECK (artistic_score >= 1 AND artistic_score <= 10),
            presentation_score REAL NOT NULL CHECK (presentation_score >= 1 AND presentation_score <= 10),
            overall_score REAL NOT NULL CHECK (overall_score >= 1 AND overall_score <= 10),
            comments TEXT,
            submitted_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL,
            FOREIGN KEY(judge_id) REFERENCES judges(id) ON DELETE CASCADE,
            FOREIGN KEY(performance_id) REFERENCES performances(id) ON DELETE CASCADE,
            UNIQUE(judge_id, performance_id)
        );
        CREATE INDEX IF NOT EXISTS idx_scores_performance ON scores(performance_id);
        """,
    ),
    # Migration 3: password reset tokens for studios and judges
    (
        3,
        """
        CREATE TABLE IF NOT EXISTS password_reset_tokens (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            token TEXT NOT NULL UNIQUE,
            account_kind TEXT NOT NULL CHECK (account_kind IN ('studio', 'judge')),
            account_id TEXT NOT NULL,
            expires_at TIMESTAMP NOT NULL,
            used INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any newer entries of
    ``MIGRATIONS``.  To change the schema append a migration with an
    incremented version number; never edit an applied one.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
