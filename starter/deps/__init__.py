from __future__ import annotations

from .session import JwtSessionVerifier, SessionVerifier, current_session, require_session

__all__ = ["JwtSessionVerifier", "SessionVerifier", "current_session", "require_session"]
