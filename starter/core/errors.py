from __future__ import annotations

from typing import Any
from urllib.parse import quote

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException


class StarterError(Exception):
    """Base class for errors the API reports through the error envelope."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class UserExistsError(StarterError):
    status_code = status.HTTP_409_CONFLICT
    code = "user_exists"


class InvalidCredentialsError(StarterError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"


class WeakPasswordError(StarterError):
    status_code = 422
    code = "validation_error"


class CsrfError(StarterError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "csrf_error"


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        accept = (request.headers.get("accept") or "").lower()
        path = request.url.path
        signin_path = request.app.state.settings.GATE_SIGNIN_PATH
        if "text/html" in accept and not path.startswith("/api") and not path.startswith(signin_path):
            return RedirectResponse(url=f"{signin_path}?callbackUrl={quote(path)}", status_code=302)
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=422,
        code="validation_error",
        message="Validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
    )


async def starter_error_handler(request: Request, exc: StarterError):
    return ErrorEnvelope(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )
