"""Per-request context read by the JSON log formatter."""

from __future__ import annotations

from contextvars import ContextVar

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
# "user:<id>" once a signed session or sign-in has identified the visitor.
principal_ctx_var: ContextVar[str | None] = ContextVar("principal_id", default=None)
