from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

ALGORITHM = "HS256"
AUDIENCE = "starter-web"
ISSUER = "starter"
SESSION_TOKEN_TYPE = "session"
# bcrypt rejects longer secrets.
MAX_PASSWORD_BYTES = 72


class SessionClaims(BaseModel):
    sub: str
    name: str
    email: str
    exp: datetime
    iat: datetime
    typ: str
    aud: str
    iss: str


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def issue_session_token(*, subject: str, name: str, email: str, secret: str, max_age: int) -> str:
    now = _now()
    payload: dict[str, Any] = {
        "sub": subject,
        "name": name,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=max_age)).timestamp()),
        "typ": SESSION_TOKEN_TYPE,
        "aud": AUDIENCE,
        "iss": ISSUER,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_session_token(token: str, *, secret: str) -> SessionClaims:
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
            issuer=ISSUER,
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        claims = SessionClaims.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc
    if claims.typ != SESSION_TOKEN_TYPE:
        raise ValueError("Invalid token type")
    return claims


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
