from __future__ import annotations

import logging
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..core.context import principal_ctx_var, request_id_ctx_var

logger = logging.getLogger("starter.request")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation id and write one access log line.

    The line records what the request gate made of the request (``gate``:
    ``skipped``, ``allow`` or ``redirect``, plus ``has_session`` when a lookup
    ran) and the principal a handler identified, if any.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self.header_name) or uuid4().hex
        token = request_id_ctx_var.set(request_id)
        principal_token = principal_ctx_var.set(None)
        request.state.request_id = request_id
        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            response.headers[self.header_name] = request_id
            response.headers.setdefault("X-Response-Time", f"{duration_ms:.2f}ms")
            self._log_access(request, response, duration_ms)
            return response
        finally:
            request_id_ctx_var.reset(token)
            principal_ctx_var.reset(principal_token)

    def _log_access(self, request: Request, response: Response, duration_ms: float) -> None:
        state = request.state
        data = {
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "gate": getattr(state, "gate_outcome", "skipped"),
        }
        has_session = getattr(state, "has_session", None)
        if has_session is not None:
            data["has_session"] = has_session
        # Handlers run in another task or thread; their context changes do not reach here.
        principal = getattr(state, "principal", None)
        if principal:
            principal_ctx_var.set(principal)
        logger.info("request.completed", extra={"extra_data": data})
