"""Memo lifecycle: create, update, archive and fetch.

Each mutation commits the memo row first, then resource associations, then
the tag index, as separate commits. A failed tag sync or an unknown resource
reference is logged and does not fail the request.
"""
from __future__ import annotations

import logging
import time
from uuid import uuid4

from sqlmodel import Session, select

from app.config import Settings
from app.errors import InvalidInput, MemoServiceError, NotFound, Unauthorized
from app.models.memo import ROW_STATUS_ARCHIVED, ROW_STATUS_NORMAL, Memo, MemoCreate, MemoUpdate, MemoView
from app.models.user import User
from app.security import Principal
from app.services.access import ensure_can_read, ensure_can_write
from app.services.aggregator import assemble
from app.services.resources import replace_memo_resources, resolve_resource_ids, resource_input_from
from app.services.tag_sync import sync_memo_tags

logger = logging.getLogger(__name__)


def _now() -> int:
    return int(time.time())


def _load_memo(session: Session, memo_id: int) -> Memo:
    memo = session.get(Memo, memo_id)
    if memo is None:
        raise NotFound("Memo not found")
    return memo


def _view(session: Session, memo_id: int, settings: Settings) -> MemoView:
    view = assemble(session, memo_id, settings)
    if view is None:
        # The row was written by this request, so a miss means the store lost it.
        raise MemoServiceError(f"Memo {memo_id} vanished after write")
    return view


def _apply_resources(session: Session, memo_id: int, body: MemoCreate | MemoUpdate) -> None:
    resource_input = resource_input_from(body)
    if resource_input is None:
        return
    resolved = resolve_resource_ids(session, resource_input)
    if resolved.missing:
        logger.info(
            "Dropped %d unknown resource reference(s) for memo %s: %s",
            len(resolved.missing),
            memo_id,
            resolved.missing,
        )
    replace_memo_resources(session, memo_id, resolved.resource_ids)


def _sync_tags(session: Session, memo_id: int, creator_id: int, content: str) -> None:
    result = sync_memo_tags(session, memo_id, creator_id, content)
    if not result.ok:
        logger.warning("Failed to update tags for memo %s: %s", memo_id, result.error)


def create_memo(
    session: Session,
    principal: Principal | None,
    body: MemoCreate,
    settings: Settings,
) -> MemoView:
    if principal is None:
        raise Unauthorized()
    if not body.content:
        raise InvalidInput("Content is required")

    user_id = session.exec(select(User.id).where(User.uid == principal.uid)).first()
    if user_id is None:
        raise NotFound("User not found")

    now = _now()
    memo = Memo(
        uid=str(uuid4()),
        creator_id=user_id,
        content=body.content,
        visibility=body.visibility,
        row_status=ROW_STATUS_NORMAL,
        created_ts=now,
        updated_ts=now,
    )
    session.add(memo)
    session.commit()
    session.refresh(memo)
    memo_id = memo.id

    _apply_resources(session, memo_id, body)
    _sync_tags(session, memo_id, user_id, body.content)

    logger.info("Created memo %s for user %s", memo_id, user_id)
    return _view(session, memo_id, settings)


def get_memo(
    session: Session,
    principal: Principal | None,
    memo_id: int,
    settings: Settings,
) -> MemoView:
    memo = _load_memo(session, memo_id)
    ensure_can_read(memo, principal)
    return _view(session, memo_id, settings)


def update_memo(
    session: Session,
    principal: Principal | None,
    memo_id: int,
    body: MemoUpdate,
    settings: Settings,
) -> MemoView:
    """Apply the fields present in ``body``.

    An explicit resource list (either shape, possibly empty) replaces every
    association; an absent one leaves them untouched.
    """
    if principal is None:
        raise Unauthorized()
    memo = _load_memo(session, memo_id)
    ensure_can_write(memo, principal)

    if body.content is not None:
        memo.content = body.content
    if body.visibility is not None:
        memo.visibility = body.visibility
    memo.updated_ts = _now()
    session.add(memo)
    session.commit()

    _apply_resources(session, memo_id, body)

    if body.content is not None and principal.user_id is not None:
        _sync_tags(session, memo_id, principal.user_id, body.content)

    return _view(session, memo_id, settings)


def archive_memo(
    session: Session,
    principal: Principal | None,
    memo_id: int,
) -> None:
    """Soft delete: mark the memo ARCHIVED. Associations are left in place."""
    if principal is None:
        raise Unauthorized()
    memo = _load_memo(session, memo_id)
    ensure_can_write(memo, principal)

    memo.row_status = ROW_STATUS_ARCHIVED
    memo.updated_ts = _now()
    session.add(memo)
    session.commit()
    logger.info("Archived memo %s", memo_id)
