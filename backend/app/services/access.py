"""Access control for memos.

Reads are governed by visibility; writes by ownership, with the HOST role as
an independent override.
"""
from __future__ import annotations

from app.errors import Forbidden, Unauthorized
from app.models.memo import VISIBILITY_PUBLIC, Memo
from app.security import Principal


def is_owner(principal: Principal | None, owner_id: int) -> bool:
    return (
        principal is not None
        and principal.user_id is not None
        and principal.user_id == owner_id
    )


def authorize(principal: Principal | None, owner_id: int) -> bool:
    """Decide whether ``principal`` may mutate something owned by ``owner_id``."""
    if principal is None:
        return False
    if is_owner(principal, owner_id):
        return True
    if principal.is_host:
        return True
    return False


def can_read(memo: Memo, principal: Principal | None) -> bool:
    if memo.visibility == VISIBILITY_PUBLIC:
        return True
    return is_owner(principal, memo.creator_id)


def can_write(memo: Memo, principal: Principal | None) -> bool:
    return authorize(principal, memo.creator_id)


def ensure_can_read(memo: Memo, principal: Principal | None) -> None:
    if not can_read(memo, principal):
        raise Forbidden()


def ensure_can_write(memo: Memo, principal: Principal | None) -> None:
    if principal is None:
        raise Unauthorized()
    if not can_write(memo, principal):
        raise Forbidden()
