from __future__ import annotations

from .request_gate import RequestGateMiddleware
from .request_id import RequestIdMiddleware

__all__ = ["RequestGateMiddleware", "RequestIdMiddleware"]
