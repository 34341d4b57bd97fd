from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Mapping

from .config import AppSettings
from .context import principal_ctx_var, request_id_ctx_var

# Replaced by the starter.request access line.
QUIETED_LOGGERS = ("uvicorn.access",)


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record, tagged with the app and the current request."""

    def __init__(self, *, app_name: str | None = None, env: str | None = None) -> None:
        super().__init__()
        self.app_name = app_name
        self.env = env

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.app_name:
            payload["app"] = self.app_name
        if self.env:
            payload["env"] = self.env
        request_id = request_id_ctx_var.get()
        if request_id:
            payload["request_id"] = request_id
        principal = principal_ctx_var.get()
        if principal:
            payload["principal"] = principal
        extra = getattr(record, "extra_data", None)
        if isinstance(extra, Mapping):
            payload.update(extra)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), default=str)


def configure_logging(settings: AppSettings) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter(app_name=settings.APP_NAME, env=settings.APP_ENV))
    logging.root.handlers = [handler]
    logging.root.setLevel(settings.LOG_LEVEL.upper())
    for name in QUIETED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
