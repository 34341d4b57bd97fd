from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=320)
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {"name": "Ada", "email": "ada@example.com", "password": "correct-horse"}
        },
    }

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value.strip()

    @field_validator("email")
    @classmethod
    def email_shape(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_RE.match(value):
            raise ValueError("email is not a valid address")
        return value


class RegisterResponse(BaseModel):
    id: str
    name: str
    email: str


class SignInResponse(BaseModel):
    ok: bool
    error: str | None = None
    url: str | None = None


class CsrfResponse(BaseModel):
    csrf_token: str = Field(..., serialization_alias="csrfToken")


class SessionUser(BaseModel):
    name: str
    email: str


class SessionResponse(BaseModel):
    user: SessionUser
    expires: str


class SignOutResponse(BaseModel):
    url: str
