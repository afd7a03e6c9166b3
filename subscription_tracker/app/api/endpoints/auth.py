"""
Authentication endpoints.

Login is by email only: an unknown email creates the account.  The
session lives server side; the response sets a signed cookie carrying
nothing but the session id.
"""

from fastapi import APIRouter, Depends, Response

from subscription_tracker.app.core.security import (
    RequestContext,
    attach_user,
    clear_session_cookie,
    require_auth,
    set_session_cookie,
)
from subscription_tracker.app.schemas.user import AuthResponse, LoginRequest, LogoutResponse
from subscription_tracker.app.services.auth_service import AuthService


router = APIRouter()


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    ctx: RequestContext = Depends(attach_user),
) -> AuthResponse:
    """Log in (creating the user on first login) and start a fresh session."""
    user, sid = await AuthService.login(ctx, payload.email, payload.name)
    set_session_cookie(response, sid)
    return AuthResponse(user=user, authenticated=True)


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response, ctx: RequestContext = Depends(attach_user)) -> LogoutResponse:
    """Destroy the current session.  Succeeds for anonymous callers too."""
    await AuthService.logout(ctx)
    clear_session_cookie(response)
    return LogoutResponse()


@router.get("/me", response_model=AuthResponse)
async def me(ctx: RequestContext = Depends(require_auth)) -> AuthResponse:
    """Return the logged in user, or 401."""
    return AuthResponse(user=ctx.current_user, authenticated=True)
