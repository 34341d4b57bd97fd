"""Decision rules of the request gate and the static path matcher."""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from starter.core.gate import (
    Allow,
    GateConfig,
    GateMatcher,
    MatcherConfig,
    RedirectTo,
    RequestGate,
)


@pytest.fixture()
def gate():
    return RequestGate(GateConfig())


@pytest.mark.parametrize("path", ["/api/auth", "/api/auth/session", "/api/auth/callback/credentials"])
@pytest.mark.parametrize("has_session", [True, False])
def test_auth_api_paths_always_pass(gate, path, has_session):
    assert gate.evaluate(path, has_session) == Allow()


@pytest.mark.parametrize("has_session", [True, False])
def test_home_always_passes(gate, has_session):
    assert gate.evaluate("/", has_session) == Allow()


def test_protected_without_session_goes_to_signin(gate):
    assert gate.evaluate("/protected", False) == RedirectTo(target="/auth/signin")


def test_protected_with_session_passes(gate):
    assert gate.evaluate("/protected", True) == Allow()


@pytest.mark.parametrize("path", ["/auth/signin", "/auth/signup"])
def test_signed_in_user_is_sent_home_from_auth_pages(gate, path):
    assert gate.evaluate(path, True) == RedirectTo(target="/")


@pytest.mark.parametrize("path", ["/auth/signin", "/auth/signup"])
def test_anonymous_user_may_open_auth_pages(gate, path):
    assert gate.evaluate(path, False) == Allow()


@pytest.mark.parametrize("path", ["/about", "/protected/child", "/auth", "/auth/signin/extra", "/PROTECTED", ""])
@pytest.mark.parametrize("has_session", [True, False])
def test_other_paths_default_to_allow(gate, path, has_session):
    assert gate.evaluate(path, has_session) == Allow()


def test_auth_api_rule_wins_over_protected_rule():
    gate = RequestGate(GateConfig(protected_paths=("/api/auth/private",)))
    assert gate.evaluate("/api/auth/private", False) == Allow()


def test_evaluate_is_repeatable(gate):
    cases = [("/protected", False), ("/auth/signin", True), ("/", False), ("/other", True)]
    first = [gate.evaluate(path, has_session) for path, has_session in cases]
    second = [gate.evaluate(path, has_session) for path, has_session in cases]
    assert first == second


def test_configured_paths_are_honoured():
    gate = RequestGate(
        GateConfig(
            home_path="/home",
            signin_path="/login",
            protected_paths=("/account", "/billing"),
            auth_entry_paths=("/login",),
        )
    )
    assert gate.evaluate("/billing", False) == RedirectTo(target="/login")
    assert gate.evaluate("/login", True) == RedirectTo(target="/home")
    assert gate.evaluate("/protected", False) == Allow()


def test_config_is_immutable():
    config = GateConfig()
    with pytest.raises(ValidationError):
        config.home_path = "/elsewhere"  # type: ignore[misc]


@pytest.mark.parametrize(
    "path",
    ["/api", "/api/auth/session", "/api/counter", "/_next/static/chunk.js", "/_next/image", "/favicon.ico"],
)
def test_matcher_skips_excluded_paths(path):
    assert GateMatcher(MatcherConfig()).matches(path) is False


@pytest.mark.parametrize(
    "path", ["/", "/protected", "/auth/signin", "/static/app.css", "/favicon.png", "/favicon.ico.map"]
)
def test_matcher_selects_pages(path):
    assert GateMatcher(MatcherConfig()).matches(path) is True
