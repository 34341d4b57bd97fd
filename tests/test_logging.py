"""JSON log records carry correlation ids, principals and gate outcomes."""

import json
import logging
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from starter import create_app
from starter.core.config import AppSettings
from starter.core.context import principal_ctx_var, request_id_ctx_var
from starter.core.logging import JsonLogFormatter


class JsonCapture(logging.Handler):
    """Formats at emit time, while the request's context is still live."""

    def __init__(self) -> None:
        super().__init__()
        self.setFormatter(JsonLogFormatter(app_name="Starter", env="test"))
        self.lines = []

    def emit(self, record):
        self.lines.append(json.loads(self.format(record)))

    def find(self, message):
        return [line for line in self.lines if line["message"] == message]


@pytest.fixture()
def captured():
    handler = JsonCapture()
    logger = logging.getLogger("starter")
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


@pytest.fixture()
def client():
    settings = AppSettings(_env_file=None, JWT_SECRET="test-jwt-secret", APP_SECRET="test-app-secret")
    return TestClient(create_app(settings), follow_redirects=False)


def _record(**extra):
    record = logging.LogRecord("starter.gate", logging.INFO, __file__, 1, "gate.redirect", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _sign_in(client):
    client.post(
        "/api/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "correct-horse"},
    )
    csrf = client.get("/api/auth/csrf").json()["csrfToken"]
    response = client.post(
        "/api/auth/callback/credentials",
        data={"email": "ada@example.com", "password": "correct-horse", "csrfToken": csrf},
    )
    assert response.status_code == 200


def test_formatter_merges_extra_data_and_context():
    token = request_id_ctx_var.set("req-1")
    principal_token = principal_ctx_var.set("user:42")
    try:
        line = JsonLogFormatter(app_name="Starter", env="test").format(
            _record(extra_data={"path": "/protected", "target": "/auth/signin"})
        )
    finally:
        request_id_ctx_var.reset(token)
        principal_ctx_var.reset(principal_token)
    payload = json.loads(line)
    assert payload["message"] == "gate.redirect"
    assert payload["logger"] == "starter.gate"
    assert payload["app"] == "Starter"
    assert payload["env"] == "test"
    assert payload["request_id"] == "req-1"
    assert payload["principal"] == "user:42"
    assert payload["target"] == "/auth/signin"


def test_formatter_omits_missing_context():
    payload = json.loads(JsonLogFormatter().format(_record()))
    assert "request_id" not in payload
    assert "principal" not in payload
    assert "app" not in payload


def test_signed_in_record_names_the_principal(client, captured):
    _sign_in(client)
    [signed_in] = captured.find("user.signed_in")
    assert signed_in["principal"] == f"user:{signed_in['user_id']}"


def test_access_log_records_gate_outcome(client, captured):
    client.get("/protected")
    client.get("/api/counter")
    redirected, skipped = captured.find("request.completed")
    assert redirected["path"] == "/protected"
    assert redirected["gate"] == "redirect"
    assert redirected["has_session"] is False
    assert redirected["status"] == 307
    assert "principal" not in redirected
    assert skipped["gate"] == "skipped"
    assert "has_session" not in skipped


def test_access_log_names_signed_in_principal(client, captured):
    _sign_in(client)
    client.get("/protected", headers={"X-Request-ID": "req-7"})
    access = [line for line in captured.find("request.completed") if line["path"] == "/protected"][-1]
    assert access["gate"] == "allow"
    assert access["has_session"] is True
    assert access["request_id"] == "req-7"
    assert access["principal"].startswith("user:")
