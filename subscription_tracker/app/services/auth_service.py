"""
Login and logout.

Login finds or creates the user for an email and then issues a brand
new session id, destroying whatever session the request arrived with.
A session id known before login is therefore useless afterwards
(session fixation).  The new session holds only ``userId`` and
``isAuthenticated``.
"""

import logging
from typing import Optional, Tuple

from subscription_tracker.app.core.security import RequestContext
from subscription_tracker.app.core.session_store import new_session_id
from subscription_tracker.app.schemas.user import UserRead
from subscription_tracker.app.services.user_service import UserService


logger = logging.getLogger(__name__)


class AuthService:
    """Session lifecycle for the auth endpoints."""

    @classmethod
    async def login(cls, ctx: RequestContext, email: str, name: Optional[str] = None) -> Tuple[UserRead, str]:
        """Log ``email`` in and return the user together with the new session id.

        Raises ``SessionError`` if the store cannot regenerate or save
        the session.
        """
        user = await UserService.find_or_create(email, name)

        if ctx.session_id is not None:
            ctx.store.destroy(ctx.session_id)
        sid = new_session_id()
        session = {"userId": user.id, "isAuthenticated": True}
        ctx.store.set(sid, session)

        ctx.session_id = sid
        ctx.session = session
        ctx.current_user = user
        logger.info("User %s logged in", user.email)
        return user, sid

    @classmethod
    async def logout(cls, ctx: RequestContext) -> None:
        """Destroy the request's session.  Raises ``SessionError`` on store failure."""
        if ctx.session_id is not None:
            ctx.store.destroy(ctx.session_id)
            if ctx.current_user is not None:
                logger.info("User %s logged out", ctx.current_user.email)
        ctx.session_id = None
        ctx.session = {}
        ctx.current_user = None
