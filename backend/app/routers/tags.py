"""Tag router: read-only listing of tags derived from memo content."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, func, or_, select

from app.db import get_session
from app.dependencies import get_optional_principal
from app.models.memo import ROW_STATUS_NORMAL, VISIBILITY_PUBLIC, Memo
from app.models.tag import MemoTag, Tag, TagUsage
from app.security import Principal

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("", response_model=list[TagUsage])
async def list_tags(
    q: str | None = Query(None, description="Filter tags by name substring"),
    principal: Principal | None = Depends(get_optional_principal),
    session: Session = Depends(get_session),
) -> list[TagUsage]:
    """Tags on normal memos the caller can read, with usage counts, ordered by name."""
    visible = Memo.visibility == VISIBILITY_PUBLIC
    if principal is not None and principal.user_id is not None:
        visible = or_(visible, Memo.creator_id == principal.user_id)

    statement = (
        select(Tag.name, func.count(func.distinct(Memo.id)))
        .join(MemoTag, MemoTag.tag_id == Tag.id)  # type: ignore[arg-type]
        .join(Memo, Memo.id == MemoTag.memo_id)  # type: ignore[arg-type]
        .where(Memo.row_status == ROW_STATUS_NORMAL)
        .where(visible)
        .group_by(Tag.name)
        .order_by(Tag.name)  # type: ignore[arg-type]
    )
    if q:
        statement = statement.where(Tag.name.contains(q.strip()))  # type: ignore[attr-defined]
    rows = session.exec(statement).all()
    return [TagUsage(name=name, count=count) for name, count in rows]
