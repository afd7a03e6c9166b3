"""
Session cookie signing and per-request authentication.

The browser only ever holds an opaque session id.  The cookie value is
``<sid>.<signature>`` where the signature is an HMAC-SHA256 of the id
under ``settings.session_secret``, base64url encoded without padding.
A cookie with a bad signature is ignored as if absent.

``attach_user`` is a FastAPI dependency that resolves the session into a
``RequestContext`` once per request.  It fails open: if the user behind
a session has been deleted, or resolving it raises, the session is
destroyed and the request continues anonymously.  ``require_auth``
builds on it and rejects anonymous requests with 401.
"""

import base64
import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import Depends, Request, Response

from .config import settings
from .errors import AuthError, SessionError
from .session_store import SessionStore, get_session_store
from ..schemas.user import UserRead
from ..services.user_service import UserService


logger = logging.getLogger(__name__)


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def sign_session_id(sid: str, secret: Optional[str] = None) -> str:
    """Return the cookie value for ``sid``."""
    signature = _sign(sid.encode("utf-8"), secret or settings.session_secret)
    return f"{sid}.{_b64_url_encode(signature)}"


def unsign_session_id(cookie_value: Optional[str], secret: Optional[str] = None) -> Optional[str]:
    """Verify a cookie value and return the session id, or ``None`` if invalid."""
    if not cookie_value:
        return None
    sid, sep, signature = cookie_value.rpartition(".")
    if not sep or not sid:
        return None
    expected = _b64_url_encode(_sign(sid.encode("utf-8"), secret or settings.session_secret))
    # Constant-time comparison to prevent timing attacks
    if not hmac.compare_digest(expected, signature):
        return None
    return sid


def set_session_cookie(response: Response, sid: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_id(sid),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name, path="/")


@dataclass
class RequestContext:
    """Authentication state of one request.

    ``session`` is the stored session data (empty for anonymous
    requests); ``current_user`` is set only when the session is
    authenticated and its user still exists.
    """

    store: SessionStore
    session_id: Optional[str] = None
    session: Dict[str, Any] = field(default_factory=dict)
    current_user: Optional[UserRead] = None

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    @property
    def owner_email(self) -> str:
        if self.current_user is None:
            raise AuthError()
        return self.current_user.email

    def discard_session(self) -> None:
        """Destroy the backing session, logging rather than raising on failure."""
        if self.session_id is None:
            return
        try:
            self.store.destroy(self.session_id)
        except SessionError:
            logger.exception("Failed to destroy session")
        self.session_id = None
        self.session = {}
        self.current_user = None


async def attach_user(request: Request) -> RequestContext:
    """Resolve the session cookie into a ``RequestContext``."""
    ctx = RequestContext(store=get_session_store())
    sid = unsign_session_id(request.cookies.get(settings.session_cookie_name))
    if sid is None:
        return ctx
    try:
        session = ctx.store.get(sid)
    except SessionError:
        logger.exception("Failed to load session; discarding it and continuing anonymously")
        ctx.session_id = sid
        ctx.discard_session()
        return ctx
    if session is None:
        return ctx
    ctx.session_id = sid
    ctx.session = session

    user_id = session.get("userId")
    if user_id and session.get("isAuthenticated"):
        try:
            user = await UserService.get_user(user_id)
        except Exception:
            logger.exception("Error fetching user %s; clearing session", user_id)
            ctx.discard_session()
            return ctx
        if user is None:
            logger.info("User %s no longer exists; clearing session", user_id)
            ctx.discard_session()
            return ctx
        ctx.current_user = user
    return ctx


async def require_auth(ctx: RequestContext = Depends(attach_user)) -> RequestContext:
    """Dependency for protected routes: 401 unless a user is logged in."""
    if not ctx.is_authenticated:
        raise AuthError()
    return ctx
