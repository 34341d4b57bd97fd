from __future__ import annotations

import hmac
import secrets

from fastapi import Request

from ..core.errors import CsrfError

CSRF_SESSION_KEY = "csrf_token"


def ensure_csrf_token(request: Request) -> str:
    """Return the visitor's CSRF token, minting one on first use."""

    token = request.session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        request.session[CSRF_SESSION_KEY] = token
    return token


def check_csrf_token(request: Request, provided: str) -> None:
    expected = request.session.get(CSRF_SESSION_KEY) or ""
    if not expected or not provided or not hmac.compare_digest(expected, provided):
        raise CsrfError("CSRF token missing or invalid")


def drop_csrf_token(request: Request) -> None:
    request.session.pop(CSRF_SESSION_KEY, None)
