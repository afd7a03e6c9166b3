"""
Server side session storage.

A session is a small JSON-serialisable dict (``{"userId": ...,
"isAuthenticated": True}``) keyed by an opaque session id.  Entries
expire ``ttl_seconds`` after they were last written; an expired entry
is never returned.  Two backends are provided:

* ``MemorySessionStore``: in-process dict guarded by a lock.  The
  default; sessions are lost on restart.
* ``SqliteSessionStore``: rows in the ``sessions`` table of the
  application database.

Backend failures are raised as ``SessionError``.  ``get_session_store``
returns the process wide store selected by ``settings.session_backend``.
"""

from __future__ import annotations

import json
import logging
import secrets
import sqlite3
import threading
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from .config import settings
from .db import get_cursor
from .errors import SessionError


logger = logging.getLogger(__name__)

SessionData = Dict[str, Any]


def new_session_id() -> str:
    """Return a fresh, unguessable session identifier."""
    return secrets.token_urlsafe(32)


class SessionStore(Protocol):
    """Interface every session backend implements."""

    def get(self, sid: str) -> Optional[SessionData]:
        ...

    def set(self, sid: str, data: SessionData) -> None:
        ...

    def destroy(self, sid: str) -> None:
        ...

    def prune(self) -> int:
        ...


class MemorySessionStore:
    """Thread safe in-memory store with TTL expiry.

    Every ``prune_every`` writes the store also sweeps out expired
    entries, so sessions abandoned without logout do not pile up.
    """

    def __init__(
        self,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
        prune_every: int = 100,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.prune_every = prune_every
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[SessionData, float]] = {}
        self._writes = 0

    def get(self, sid: str) -> Optional[SessionData]:
        with self._lock:
            entry = self._entries.get(sid)
            if entry is None:
                return None
            data, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[sid]
                return None
            return dict(data)

    def set(self, sid: str, data: SessionData) -> None:
        with self._lock:
            now = self._clock()
            self._entries[sid] = (dict(data), now + self.ttl_seconds)
            self._writes += 1
            if self._writes >= self.prune_every:
                self._writes = 0
                self._drop_expired(now)

    def destroy(self, sid: str) -> None:
        with self._lock:
            self._entries.pop(sid, None)

    def prune(self) -> int:
        """Drop expired entries and return how many were removed."""
        with self._lock:
            return self._drop_expired(self._clock())

    def _drop_expired(self, now: float) -> int:
        # Caller holds the lock.
        expired = [sid for sid, (_, expires_at) in self._entries.items() if expires_at <= now]
        for sid in expired:
            del self._entries[sid]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SqliteSessionStore:
    """Session rows in the ``sessions`` table created by migration 2."""

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.time) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def get(self, sid: str) -> Optional[SessionData]:
        try:
            with get_cursor() as cursor:
                row = cursor.execute(
                    "SELECT data, expires_at FROM sessions WHERE sid = ?", (sid,)
                ).fetchone()
                if row is None:
                    return None
                if row["expires_at"] <= self._clock():
                    cursor.execute("DELETE FROM sessions WHERE sid = ?", (sid,))
                    return None
                return json.loads(row["data"])
        except sqlite3.Error as exc:
            raise SessionError("Failed to load session") from exc

    def set(self, sid: str, data: SessionData) -> None:
        try:
            with get_cursor() as cursor:
                cursor.execute(
                    "INSERT OR REPLACE INTO sessions (sid, data, expires_at) VALUES (?, ?, ?)",
                    (sid, json.dumps(data), self._clock() + self.ttl_seconds),
                )
        except sqlite3.Error as exc:
            raise SessionError("Failed to save session") from exc

    def destroy(self, sid: str) -> None:
        try:
            with get_cursor() as cursor:
                cursor.execute("DELETE FROM sessions WHERE sid = ?", (sid,))
        except sqlite3.Error as exc:
            raise SessionError("Failed to destroy session") from exc

    def prune(self) -> int:
        try:
            with get_cursor() as cursor:
                cursor.execute("DELETE FROM sessions WHERE expires_at <= ?", (self._clock(),))
                return cursor.rowcount
        except sqlite3.Error as exc:
            raise SessionError("Failed to prune sessions") from exc


_session_store: Optional[SessionStore] = None


def create_session_store(backend: str, ttl_seconds: int) -> SessionStore:
    if backend == "memory":
        return MemorySessionStore(ttl_seconds)
    if backend == "sqlite":
        return SqliteSessionStore(ttl_seconds)
    raise ValueError(f"Unknown session backend {backend!r}")


def get_session_store() -> SessionStore:
    """Return the process wide session store, creating it on first use."""
    global _session_store
    if _session_store is None:
        _session_store = create_session_store(settings.session_backend, settings.session_ttl_seconds)
        logger.info("Using %s session store (ttl=%ss)", settings.session_backend, settings.session_ttl_seconds)
    return _session_store


def set_session_store(store: Optional[SessionStore]) -> None:
    """Replace the process wide store; ``None`` makes the next call rebuild it."""
    global _session_store
    _session_store = store
