"""Access-token helpers and the request principal.

Tokens are HS256 JWTs whose ``sub`` claim is the user's external uid.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.config import get_settings
from app.errors import Unauthorized
from app.models.user import ROLE_HOST, ROLE_USER

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True, slots=True)
class Principal:
    """An authenticated caller.

    ``user_id`` is the numeric id resolved from ``uid``; it is None when the
    token names a user the store does not know.
    """
    uid: str
    username: str
    role: str = ROLE_USER
    user_id: int | None = None

    @property
    def is_host(self) -> bool:
        return self.role == ROLE_HOST


def create_access_token(uid: str, username: str, role: str = ROLE_USER) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": uid,
        "username": username,
        "role": role,
        "type": "access",
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and validate an access token. Raises Unauthorized on failure."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid or expired token")
    if payload.get("type") != "access":
        raise Unauthorized("Invalid token type")
    if not payload.get("sub"):
        raise Unauthorized("Invalid token payload")
    return payload
