"""Environment-driven configuration for the starter app.

Every knob the service reads lives on ``AppSettings``. Values come from the
process environment or a ``.env`` file and are read once, the first time
``get_settings`` is called.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any, Iterable

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .gate import GateConfig, MatcherConfig

PathList = Annotated[tuple[str, ...], NoDecode]


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Starter"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Signs the Starlette cookie session (CSRF token, counter state).
    APP_SECRET: str = "dev-insecure-secret-change-me"
    SESSION_COOKIE_NAME: str = "starter_session"
    # Carries the signed JWT that proves a user is signed in.
    AUTH_COOKIE_NAME: str = "starter.session-token"
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 30
    SESSION_COOKIE_SECURE: bool = False

    JWT_SECRET: str = "change-me"
    PASSWORD_MIN_LENGTH: int = Field(default=8, ge=1)

    GATE_AUTH_API_PREFIX: str = "/api/auth"
    GATE_HOME_PATH: str = "/"
    GATE_SIGNIN_PATH: str = "/auth/signin"
    GATE_PROTECTED_PATHS: PathList = ("/protected",)
    GATE_AUTH_ENTRY_PATHS: PathList = ("/auth/signin", "/auth/signup")
    GATE_EXCLUDE_PREFIXES: PathList = ("api", "_next/static", "_next/image")
    GATE_EXCLUDE_FILES: PathList = ("favicon.ico",)
    GATE_SESSION_TIMEOUT_SECONDS: float = Field(default=2.0, gt=0)

    @field_validator(
        "GATE_PROTECTED_PATHS",
        "GATE_AUTH_ENTRY_PATHS",
        "GATE_EXCLUDE_PREFIXES",
        "GATE_EXCLUDE_FILES",
        mode="before",
    )
    @classmethod
    def parse_path_list(cls, value: Any) -> tuple[str, ...]:
        if value in (None, "", [], ()):
            return ()
        if isinstance(value, str):
            return tuple(item.strip() for item in value.split(",") if item.strip())
        if isinstance(value, Iterable):
            return tuple(str(item).strip() for item in value if str(item).strip())
        raise TypeError("path lists must be a comma separated string or list")

    def gate_config(self) -> GateConfig:
        return GateConfig(
            auth_api_prefix=self.GATE_AUTH_API_PREFIX,
            home_path=self.GATE_HOME_PATH,
            signin_path=self.GATE_SIGNIN_PATH,
            protected_paths=self.GATE_PROTECTED_PATHS,
            auth_entry_paths=self.GATE_AUTH_ENTRY_PATHS,
        )

    def matcher_config(self) -> MatcherConfig:
        return MatcherConfig(
            exclude_prefixes=self.GATE_EXCLUDE_PREFIXES,
            exclude_files=self.GATE_EXCLUDE_FILES,
        )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()


settings = get_settings()
