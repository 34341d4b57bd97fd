"""Session lookup for the request gate and the page/API handlers.

The gate only needs to know *whether* a request carries a valid session. That
question is answered by a ``SessionVerifier``; the production implementation
decodes the signed JWT the credentials sign-in stored in the auth cookie.
Handlers that need the signed-in user use ``current_session`` or
``require_session`` instead.
"""

from __future__ import annotations

from typing import Protocol

from fastapi import HTTPException, Request, status

from ..core.config import AppSettings
from ..core.security import SessionClaims, decode_session_token
from ..core.context import principal_ctx_var


class SessionVerifier(Protocol):
    async def verify_session(self, request: Request) -> bool: ...


def read_session(request: Request, settings: AppSettings) -> SessionClaims | None:
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        return None
    try:
        return decode_session_token(token, secret=settings.JWT_SECRET)
    except ValueError:
        return None


class JwtSessionVerifier:
    """Answer ``True`` only for a valid, unexpired session token cookie."""

    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings

    async def verify_session(self, request: Request) -> bool:
        return read_session(request, self.settings) is not None


def set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


def current_session(request: Request) -> SessionClaims | None:
    claims = read_session(request, request.app.state.settings)
    if claims is not None:
        set_principal(request, f"user:{claims.sub}")
    return claims


def require_session(request: Request) -> SessionClaims:
    claims = current_session(request)
    if claims is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in required")
    return claims
