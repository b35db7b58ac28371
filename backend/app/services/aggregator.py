"""Memo aggregator: builds client-facing memo views and listing statistics.

A view is assembled from three tables (memo + user, memo_resource + resource,
memo_tag + tag) in separate queries per memo.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import text as sa_text
from sqlmodel import Session, func, select

from app.config import Settings
from app.models.memo import (
    ROW_STATUS_NORMAL,
    VISIBILITY_PUBLIC,
    DailyCount,
    Memo,
    MemoStats,
    MemoView,
)
from app.models.resource import MemoResource, Resource, ResourceView
from app.models.tag import MemoTag, Tag
from app.models.user import User

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True, slots=True)
class MemoFilter:
    row_status: str = ROW_STATUS_NORMAL
    creator_id: int | None = None
    tag: str | None = None
    visibility: str | None = None
    limit: int = 50
    offset: int = 0


def _iso_from_epoch(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _resource_view(resource: Resource, memo_id: int, settings: Settings) -> ResourceView:
    return ResourceView(
        name=f"{settings.resource_collection}/{resource.uid}",
        uid=resource.uid,
        create_time=_iso_from_epoch(resource.created_ts),
        filename=resource.filename,
        content={},
        external_link="",
        type=resource.type,
        size=resource.size,
        memo=f"{settings.memo_collection}/{memo_id}",
    )


def assemble(session: Session, memo_id: int, settings: Settings) -> MemoView | None:
    """Load a memo with its owner name, resources and tags. None if absent."""
    row = session.exec(
        select(Memo, User.username)
        .join(User, Memo.creator_id == User.id)  # type: ignore[arg-type]
        .where(Memo.id == memo_id)
    ).first()
    if row is None:
        return None
    memo, username = row

    resources = session.exec(
        select(Resource)
        .join(MemoResource, Resource.id == MemoResource.resource_id)  # type: ignore[arg-type]
        .where(MemoResource.memo_id == memo_id)
        .order_by(MemoResource.id)  # type: ignore[arg-type]
    ).all()

    tags = session.exec(
        select(Tag.name)
        .join(MemoTag, Tag.id == MemoTag.tag_id)  # type: ignore[arg-type]
        .where(MemoTag.memo_id == memo_id)
    ).all()

    return MemoView(
        id=memo.id,
        uid=memo.uid,
        creator_id=memo.creator_id,
        creator_username=username,
        content=memo.content,
        visibility=memo.visibility,
        row_status=memo.row_status,
        created_ts=memo.created_ts,
        updated_ts=memo.updated_ts,
        resource_id_list=[r.id for r in resources],
        resources=[_resource_view(r, memo.id, settings) for r in resources],
        tags=list(tags),
    )


def list_memos(session: Session, memo_filter: MemoFilter, settings: Settings) -> list[MemoView]:
    """List memos matching ``memo_filter``, newest first.

    Without a visibility or creator filter only public memos are returned.
    A creator filter alone returns that creator's memos of every visibility.
    """
    statement = (
        select(Memo.id)
        .join(User, Memo.creator_id == User.id)  # type: ignore[arg-type]
        .where(Memo.row_status == memo_filter.row_status)
    )
    if memo_filter.creator_id is not None:
        statement = statement.where(Memo.creator_id == memo_filter.creator_id)
    if memo_filter.visibility:
        statement = statement.where(Memo.visibility == memo_filter.visibility)
    elif memo_filter.creator_id is None:
        statement = statement.where(Memo.visibility == VISIBILITY_PUBLIC)
    if memo_filter.tag:
        tagged = (
            select(MemoTag.memo_id)
            .join(Tag, MemoTag.tag_id == Tag.id)  # type: ignore[arg-type]
            .where(Tag.name == memo_filter.tag)
        )
        statement = statement.where(Memo.id.in_(tagged))  # type: ignore[union-attr]
    statement = (
        statement
        .order_by(Memo.created_ts.desc(), Memo.id.desc())  # type: ignore[attr-defined]
        .offset(memo_filter.offset)
        .limit(memo_filter.limit)
    )

    views: list[MemoView] = []
    for memo_id in session.exec(statement).all():
        view = assemble(session, memo_id, settings)
        if view is not None:
            views.append(view)
    return views


def memo_stats(session: Session, settings: Settings, now: int | None = None) -> MemoStats:
    """Count public normal memos, overall and per day over the trailing window."""
    if now is None:
        now = int(time.time())

    total = session.exec(
        select(func.count())
        .select_from(Memo)
        .where(Memo.row_status == ROW_STATUS_NORMAL)
        .where(Memo.visibility == VISIBILITY_PUBLIC)
    ).one()

    # Dates come from the store so buckets match its calendar, not ours.
    since = now - settings.stats_window_days * SECONDS_PER_DAY
    rows = session.execute(
        sa_text(
            "SELECT DATE(created_ts, 'unixepoch') AS date, COUNT(*) AS count "
            "FROM memo "
            "WHERE row_status = :status AND visibility = :vis AND created_ts > :since "
            "GROUP BY DATE(created_ts, 'unixepoch') "
            "ORDER BY date DESC"
        ),
        {"status": ROW_STATUS_NORMAL, "vis": VISIBILITY_PUBLIC, "since": since},
    ).all()

    histogram = [
        DailyCount(ts=_midnight_epoch(day), count=count)
        for day, count in rows
        if day
    ]
    return MemoStats(total=total, daily_histogram=histogram)


def _midnight_epoch(day: str) -> int:
    """``"2024-05-01"`` -> epoch seconds of that date's UTC midnight."""
    parsed = datetime.strptime(day, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())
