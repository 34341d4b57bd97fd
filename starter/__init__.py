"""Application factory and top-level wiring for the starter app.

``create_app`` brings together configuration, the cookie session, the request
gate and the routers. Middleware order matters: Starlette runs the most
recently added middleware first, so a request passes through
``RequestIdMiddleware`` (correlation id and access log), then the request gate,
then the cookie session, before it reaches a router.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .core.config import AppSettings, get_settings
from .core.errors import (
    StarterError,
    http_exception_handler,
    starter_error_handler,
    validation_exception_handler,
)
from .core.gate import GateMatcher, RequestGate
from .deps.session import JwtSessionVerifier, SessionVerifier
from .middlewares import RequestGateMiddleware, RequestIdMiddleware
from .routers import api_auth, api_counter, pages
from .services.users import UserDirectory


def create_app(
    settings: AppSettings | None = None,
    *,
    session_verifier: SessionVerifier | None = None,
    users: UserDirectory | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.users = users if users is not None else UserDirectory()
    app.state.gate = RequestGate(settings.gate_config())

    # Cookie session for the CSRF token and the counter demo.
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.APP_SECRET,
        session_cookie=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_AGE,
        same_site="lax",
        https_only=settings.SESSION_COOKIE_SECURE,
    )
    app.add_middleware(
        RequestGateMiddleware,
        gate=app.state.gate,
        matcher=GateMatcher(settings.matcher_config()),
        verifier=session_verifier or JwtSessionVerifier(settings),
        session_timeout=settings.GATE_SESSION_TIMEOUT_SECONDS,
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(pages.router)
    app.include_router(api_auth.router)
    app.include_router(api_counter.router)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarterError, starter_error_handler)
    return app


__all__ = ["create_app"]
