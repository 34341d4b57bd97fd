"""Credentials sign-in, session and registration endpoints under ``/api/auth``.

Everything here sits behind the auth API prefix, which the request gate always
lets through: a visitor who is signing in has no session yet.
"""

from __future__ import annotations

import logging
from datetime import timezone

from fastapi import APIRouter, Depends, Form, Request, Response, status
from fastapi.responses import JSONResponse

from ..core.config import AppSettings
from ..core.errors import InvalidCredentialsError, WeakPasswordError
from ..core.security import MAX_PASSWORD_BYTES, issue_session_token
from ..deps.csrf import check_csrf_token, drop_csrf_token, ensure_csrf_token
from ..deps.services import get_app_settings, get_users
from ..deps.session import current_session, set_principal
from ..schemas.auth import (
    CsrfResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    SessionUser,
    SignInResponse,
    SignOutResponse,
)
from ..services.users import UserDirectory

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("starter.auth")

SIGNED_IN_URL = "/protected"


@router.get("/csrf", response_model=CsrfResponse, summary="Issue the CSRF token for sign-in forms")
def issue_csrf_token(request: Request):
    return CsrfResponse(csrf_token=ensure_csrf_token(request))


@router.post("/callback/credentials", response_model=SignInResponse, summary="Sign in with email and password")
def credentials_callback(
    request: Request,
    response: Response,
    email: str = Form(""),
    password: str = Form(""),
    csrf_token: str = Form("", alias="csrfToken"),
    settings: AppSettings = Depends(get_app_settings),
    users: UserDirectory = Depends(get_users),
):
    check_csrf_token(request, csrf_token)
    try:
        user = users.authenticate(email=email, password=password)
    except InvalidCredentialsError as exc:
        body = SignInResponse(ok=False, error=exc.message)
        return JSONResponse(body.model_dump(), status_code=status.HTTP_401_UNAUTHORIZED)

    token = issue_session_token(
        subject=user.id,
        name=user.name,
        email=user.email,
        secret=settings.JWT_SECRET,
        max_age=settings.SESSION_MAX_AGE,
    )
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        max_age=settings.SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    set_principal(request, f"user:{user.id}")
    logger.info("user.signed_in", extra={"extra_data": {"user_id": user.id}})
    return SignInResponse(ok=True, url=SIGNED_IN_URL)


@router.get("/session", summary="Describe the signed-in user, or {} when signed out")
def session_info(request: Request):
    claims = current_session(request)
    if claims is None:
        return {}
    return SessionResponse(
        user=SessionUser(name=claims.name, email=claims.email),
        expires=claims.exp.astimezone(timezone.utc).isoformat(),
    )


@router.post("/signout", response_model=SignOutResponse, summary="Clear the session cookie")
def signout(request: Request, response: Response, settings: AppSettings = Depends(get_app_settings)):
    response.delete_cookie(settings.AUTH_COOKIE_NAME, httponly=True, samesite="lax")
    drop_csrf_token(request)
    return SignOutResponse(url=settings.GATE_HOME_PATH)


@router.post("/register", response_model=RegisterResponse, summary="Create an account")
def register(
    payload: RegisterRequest,
    settings: AppSettings = Depends(get_app_settings),
    users: UserDirectory = Depends(get_users),
):
    if len(payload.password) < settings.PASSWORD_MIN_LENGTH:
        raise WeakPasswordError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
            details={"field": "password"},
        )
    if len(payload.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise WeakPasswordError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            details={"field": "password"},
        )
    user = users.register(name=payload.name, email=payload.email, password=payload.password)
    return RegisterResponse(id=user.id, name=user.name, email=user.email)
