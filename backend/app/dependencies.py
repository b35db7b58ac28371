"""FastAPI dependency injection for the request principal."""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session, select

from app.db import get_session
from app.errors import Unauthorized
from app.models.user import ROLE_USER, User
from app.security import Principal, decode_access_token

_bearer_scheme = HTTPBearer(auto_error=False)


def get_optional_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    session: Session = Depends(get_session),
) -> Principal | None:
    """Resolve the caller from the Authorization header.

    Returns None for anonymous requests. A header carrying an invalid token
    is rejected with 401 rather than treated as anonymous.
    """
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    uid = payload["sub"]
    user_id = session.exec(select(User.id).where(User.uid == uid)).first()
    return Principal(
        uid=uid,
        username=payload.get("username", ""),
        role=payload.get("role", ROLE_USER),
        user_id=user_id,
    )


def require_principal(
    principal: Principal | None = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise Unauthorized()
    return principal
