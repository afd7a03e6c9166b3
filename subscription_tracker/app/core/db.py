"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager (``get_cursor``) and
``init_db`` which applies migrations on application start.  Applied
migration versions are stored in the ``migrations`` table and new
ones are executed in order.

Timestamps are stored as fixed-width UTC strings
(``YYYY-MM-DDTHH:MM:SS.ffffffZ``) so that range filters can be
expressed as plain string comparisons in SQL.
"""

import os
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Iterator, Optional

from .config import settings


TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


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
    name.  No type detection is enabled; timestamps come back as the
    strings written by ``to_db_timestamp``.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor, commits on success and closes the connection."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_db_timestamp(value: datetime | date) -> str:
    """Serialise a datetime (or date, taken as midnight UTC) for storage.

    Naive datetimes are assumed to already be in UTC.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def from_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored timestamp back into an aware UTC datetime."""
    if value is None:
        return None
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            name TEXT,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS subscriptions (
            id TEXT PRIMARY KEY,
            user_email TEXT NOT NULL,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            cost TEXT NOT NULL,
            billing_cycle TEXT NOT NULL,
            renewal_date TEXT NOT NULL,
            expiration_date TEXT,
            status TEXT NOT NULL,
            logo_url TEXT,
            description TEXT,
            last_used TEXT
        );

        CREATE TABLE IF NOT EXISTS available_services (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            logo_url TEXT NOT NULL,
            description TEXT NOT NULL,
            base_price TEXT NOT NULL,
            plans TEXT NOT NULL,
            is_popular INTEGER NOT NULL DEFAULT 0,
            features TEXT NOT NULL,
            launch_url TEXT,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS service_launches (
            id TEXT PRIMARY KEY,
            subscription_id TEXT NOT NULL,
            user_email TEXT NOT NULL,
            service_name TEXT NOT NULL,
            launched_at TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: persistent session storage for SESSION_BACKEND=sqlite
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS sessions (
            sid TEXT PRIMARY KEY,
            data TEXT NOT NULL,
            expires_at REAL NOT NULL
        );
        """,
    ),
    # Migration 3: owner lookups are on every request
    (
        3,
        """
        CREATE INDEX IF NOT EXISTS idx_subscriptions_user_email ON subscriptions(user_email);
        CREATE INDEX IF NOT EXISTS idx_service_launches_user_email ON service_launches(user_email);
        CREATE INDEX IF NOT EXISTS idx_sessions_expires_at ON sessions(expires_at);
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies every newer entry of
    ``MIGRATIONS``.  Append new migrations with an incremented version.
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
