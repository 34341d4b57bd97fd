from __future__ import annotations

from pydantic import BaseModel, Field

from .auth import SessionUser


class HomePage(BaseModel):
    page: str = "home"
    user: SessionUser | None = None


class ProtectedPage(BaseModel):
    page: str = "protected"
    user: SessionUser


class SignInPage(BaseModel):
    page: str = "signin"
    csrf_token: str = Field(..., serialization_alias="csrfToken")


class SignUpPage(BaseModel):
    page: str = "signup"
