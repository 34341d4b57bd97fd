from __future__ import annotations

import asyncio
import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from ..core.gate import GateMatcher, RedirectTo, RequestGate
from ..deps.session import SessionVerifier

logger = logging.getLogger("starter.gate")


class RequestGateMiddleware(BaseHTTPMiddleware):
    """Run the request gate before routing and turn its decision into a response.

    A session lookup that fails or exceeds ``session_timeout`` counts as no
    session, so an unverifiable visitor is sent towards sign-in rather than
    being let in.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        gate: RequestGate,
        matcher: GateMatcher,
        verifier: SessionVerifier,
        session_timeout: float = 2.0,
    ) -> None:
        super().__init__(app)
        self.gate = gate
        self.matcher = matcher
        self.verifier = verifier
        self.session_timeout = session_timeout

    async def _has_session(self, request: Request) -> bool:
        try:
            return bool(await asyncio.wait_for(self.verifier.verify_session(request), self.session_timeout))
        except asyncio.TimeoutError:
            logger.warning(
                "gate.session_lookup_timeout",
                extra={"extra_data": {"path": request.url.path, "timeout_s": self.session_timeout}},
            )
        except Exception:
            logger.warning(
                "gate.session_lookup_failed",
                exc_info=True,
                extra={"extra_data": {"path": request.url.path}},
            )
        return False

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if not self.matcher.matches(path):
            return await call_next(request)

        has_session = await self._has_session(request)
        request.state.has_session = has_session
        decision = self.gate.evaluate(path, has_session)
        if isinstance(decision, RedirectTo):
            request.state.gate_outcome = "redirect"
            logger.info(
                "gate.redirect",
                extra={"extra_data": {"path": path, "target": decision.target, "has_session": has_session}},
            )
            return RedirectResponse(url=decision.target, status_code=307)
        request.state.gate_outcome = "allow"
        return await call_next(request)
