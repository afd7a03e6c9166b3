"""
Business logic for users.

Users are created implicitly on first login and are looked up by id
(from the session) or by email (at login).  There are no passwords;
the email is the identity key.
"""

import logging
import sqlite3
import uuid
from typing import Optional

from subscription_tracker.app.core.db import from_db_timestamp, get_connection, to_db_timestamp, utcnow
from subscription_tracker.app.schemas.user import DEFAULT_USER_NAME, UserRead


logger = logging.getLogger(__name__)


def _row_to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        created_at=from_db_timestamp(row["created_at"]),
    )


class UserService:
    """Lookup and creation of user records."""

    @classmethod
    async def get_user(cls, user_id: str) -> Optional[UserRead]:
        """Retrieve a user by ID, or ``None``."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, name, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def get_user_by_email(cls, email: str) -> Optional[UserRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, name, created_at FROM users WHERE email = ?",
                (email,),
            ).fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def create_user(cls, email: str, name: Optional[str] = None) -> UserRead:
        """Insert a new user.

        Raises ``sqlite3.IntegrityError`` if the email is already taken;
        use ``find_or_create`` when that is not an error.
        """
        user_id = str(uuid.uuid4())
        created_at = utcnow()
        conn = get_connection()
        try:
            conn.execute(
                "INSERT INTO users (id, email, name, created_at) VALUES (?, ?, ?, ?)",
                (user_id, email, name, to_db_timestamp(created_at)),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("Created user %s", email)
        return UserRead(id=user_id, email=email, name=name, created_at=from_db_timestamp(to_db_timestamp(created_at)))

    @classmethod
    async def find_or_create(cls, email: str, name: Optional[str] = None) -> UserRead:
        """Return the user with ``email``, creating it on first sight.

        ``name`` is only used when the user is created; it defaults to
        ``"User"``.  Two concurrent first logins for the same email
        both end up with the single stored row.
        """
        user = await cls.get_user_by_email(email)
        if user is not None:
            return user
        try:
            return await cls.create_user(email, name or DEFAULT_USER_NAME)
        except sqlite3.IntegrityError:
            user = await cls.get_user_by_email(email)
            if user is None:
                raise
            return user
