"""Page payloads for the four starter pages.

Rendering is left to whatever front end consumes these; each handler returns
the data its page needs. Access to ``/protected`` and the sign-in pages is
settled by the request gate before these run.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..core.security import SessionClaims
from ..deps.csrf import ensure_csrf_token
from ..deps.session import current_session, require_session
from ..schemas.auth import SessionUser
from ..schemas.pages import HomePage, ProtectedPage, SignInPage, SignUpPage

router = APIRouter(tags=["pages"])


def _session_user(claims: SessionClaims) -> SessionUser:
    return SessionUser(name=claims.name, email=claims.email)


@router.get("/", response_model=HomePage)
def home_page(claims: SessionClaims | None = Depends(current_session)):
    return HomePage(user=_session_user(claims) if claims else None)


@router.get("/protected", response_model=ProtectedPage)
def protected_page(claims: SessionClaims = Depends(require_session)):
    return ProtectedPage(user=_session_user(claims))


@router.get("/auth/signin", response_model=SignInPage)
def signin_page(request: Request):
    return SignInPage(csrf_token=ensure_csrf_token(request))


@router.get("/auth/signup", response_model=SignUpPage)
def signup_page():
    return SignUpPage()
