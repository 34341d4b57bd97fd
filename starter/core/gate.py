"""Path-based access policy run before any page is routed.

``RequestGate.evaluate`` looks at nothing but the request path and whether a
verified session accompanied the request, and answers with a ``Decision``:
either let the request through or send the browser somewhere else. The rules
are checked in order and the first match wins:

1. anything under the auth API prefix passes, so the identity callbacks are
   never redirected;
2. the home page passes;
3. a protected page without a session goes to the sign-in page;
4. a sign-in/sign-up page with a session goes home;
5. everything else passes.

``GateMatcher`` decides whether the gate runs for a path at all. Static
assets, image endpoints and the favicon are never gated.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict


class Allow(BaseModel):
    """Continue normal routing."""

    model_config = ConfigDict(frozen=True)


class RedirectTo(BaseModel):
    """Answer with a redirect to ``target``."""

    model_config = ConfigDict(frozen=True)

    target: str


Decision = Union[Allow, RedirectTo]

ALLOW = Allow()


class GateConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    auth_api_prefix: str = "/api/auth"
    home_path: str = "/"
    signin_path: str = "/auth/signin"
    protected_paths: tuple[str, ...] = ("/protected",)
    auth_entry_paths: tuple[str, ...] = ("/auth/signin", "/auth/signup")


class MatcherConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    exclude_prefixes: tuple[str, ...] = ("api", "_next/static", "_next/image")
    exclude_files: tuple[str, ...] = ("favicon.ico",)


class RequestGate:
    def __init__(self, config: GateConfig | None = None) -> None:
        self.config = config or GateConfig()

    def evaluate(self, path: str, has_session: bool) -> Decision:
        config = self.config
        if path.startswith(config.auth_api_prefix):
            return ALLOW
        if path == config.home_path:
            return ALLOW
        if not has_session and path in config.protected_paths:
            return RedirectTo(target=config.signin_path)
        if has_session and path in config.auth_entry_paths:
            return RedirectTo(target=config.home_path)
        return ALLOW


class GateMatcher:
    """Static filter selecting the paths the gate runs against."""

    def __init__(self, config: MatcherConfig | None = None) -> None:
        self.config = config or MatcherConfig()

    def matches(self, path: str) -> bool:
        relative = path.lstrip("/")
        if relative in self.config.exclude_files:
            return False
        return not any(relative.startswith(prefix) for prefix in self.config.exclude_prefixes)


__all__ = [
    "ALLOW",
    "Allow",
    "Decision",
    "GateConfig",
    "GateMatcher",
    "MatcherConfig",
    "RedirectTo",
    "RequestGate",
]
