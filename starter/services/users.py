"""In-memory account registry backing registration and credentials sign-in.

Accounts live only as long as the process. Emails are matched
case-insensitively and stored lowercased.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel

from ..core.errors import InvalidCredentialsError, UserExistsError
from ..core.security import hash_password, verify_password

logger = logging.getLogger("starter.auth")


class User(BaseModel):
    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserDirectory:
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    def get_by_email(self, email: str) -> User | None:
        with self._lock:
            return self._users.get(normalize_email(email))

    def register(self, *, name: str, email: str, password: str) -> User:
        key = normalize_email(email)
        # Hash outside the lock; bcrypt is deliberately slow.
        password_hash = hash_password(password)
        with self._lock:
            if key in self._users:
                raise UserExistsError("User already exists", details={"email": key})
            user = User(
                id=uuid4().hex,
                name=name.strip(),
                email=key,
                password_hash=password_hash,
                created_at=datetime.now(tz=timezone.utc),
            )
            self._users[key] = user
        logger.info("user.registered", extra={"extra_data": {"user_id": user.id}})
        return user

    def authenticate(self, *, email: str, password: str) -> User:
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("user.signin_failed", extra={"extra_data": {"email": normalize_email(email)}})
            raise InvalidCredentialsError("CredentialsSignin")
        return user

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
