from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.config import get_settings
from app.db import get_session
from app.dependencies import get_optional_principal, require_principal
from app.models.memo import (
    MemoCreate,
    MemoStats,
    MemoUpdate,
    MemoView,
    MessageResponse,
    RowStatusType,
    VisibilityType,
)
from app.security import Principal
from app.services import lifecycle
from app.services.aggregator import MemoFilter, list_memos, memo_stats

router = APIRouter(prefix="/api/memos", tags=["memos"])


@router.post("", response_model=MemoView)
async def create_memo(
    body: MemoCreate,
    principal: Principal = Depends(require_principal),
    session: Session = Depends(get_session),
) -> MemoView:
    return lifecycle.create_memo(session, principal, body, get_settings())


@router.get("", response_model=list[MemoView])
async def list_memo_views(
    row_status: RowStatusType = Query("NORMAL", alias="rowStatus"),
    creator_id: int | None = Query(None, alias="creatorId"),
    tag: str | None = Query(None),
    visibility: VisibilityType | None = Query(None),
    limit: int | None = Query(None, ge=0),
    offset: int = Query(0, ge=0),
    session: Session = Depends(get_session),
) -> list[MemoView]:
    settings = get_settings()
    memo_filter = MemoFilter(
        row_status=row_status,
        creator_id=creator_id,
        tag=tag or None,
        visibility=visibility,
        limit=settings.default_list_limit if limit is None else limit,
        offset=offset,
    )
    return list_memos(session, memo_filter, settings)


@router.get("/stats", response_model=MemoStats)
async def get_memo_stats(session: Session = Depends(get_session)) -> MemoStats:
    return memo_stats(session, get_settings())


@router.get("/{memo_id}", response_model=MemoView)
async def get_memo(
    memo_id: int,
    principal: Principal | None = Depends(get_optional_principal),
    session: Session = Depends(get_session),
) -> MemoView:
    return lifecycle.get_memo(session, principal, memo_id, get_settings())


@router.patch("/{memo_id}", response_model=MemoView)
async def update_memo(
    memo_id: int,
    body: MemoUpdate,
    principal: Principal = Depends(require_principal),
    session: Session = Depends(get_session),
) -> MemoView:
    return lifecycle.update_memo(session, principal, memo_id, body, get_settings())


@router.delete("/{memo_id}", response_model=MessageResponse)
async def delete_memo(
    memo_id: int,
    principal: Principal = Depends(require_principal),
    session: Session = Depends(get_session),
) -> MessageResponse:
    lifecycle.archive_memo(session, principal, memo_id)
    return MessageResponse(message="Memo deleted successfully")
