"""Tests for hashtag extraction and memo-tag index synchronization."""
from __future__ import annotations

from unittest.mock import patch

import pytest
from sqlmodel import select

from app.models.memo import Memo
from app.models.tag import MemoTag, Tag
from app.services.tag_sync import extract_tags, sync_memo_tags


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("hello #world", ["world"]),
        ("#first at start", ["first"]),
        ("no tags here", []),
        ("email@example.com#nottag", []),
        ("#a #b #a", ["a", "b"]),
        ("ends with punctuation #done.", ["done"]),
        ("line\n#next line", ["next"]),
        ("#Work and #work", ["Work", "work"]),
        ("lone # sign", []),
        ("#中文 tag", ["中文"]),
    ],
)
def test_extract_tags(content, expected):
    assert extract_tags(content) == expected


def test_extract_tags_empty():
    assert extract_tags("") == []


@pytest.fixture(name="memo")
def memo_fixture(session, alice) -> Memo:
    memo = Memo(uid="tagged", creator_id=alice.id, content="", created_ts=1, updated_ts=1)
    session.add(memo)
    session.commit()
    session.refresh(memo)
    return memo


def _memo_tag_names(session, memo_id: int) -> set[str]:
    rows = session.exec(
        select(Tag.name).join(MemoTag, Tag.id == MemoTag.tag_id).where(MemoTag.memo_id == memo_id)
    ).all()
    return set(rows)


def test_sync_creates_tags_and_links(session, alice, memo):
    result = sync_memo_tags(session, memo.id, alice.id, "hello #world #news")
    assert result.ok is True
    assert result.tags == ["world", "news"]
    assert _memo_tag_names(session, memo.id) == {"world", "news"}
    tag = session.exec(select(Tag).where(Tag.name == "world")).one()
    assert tag.creator_id == alice.id


def test_sync_replaces_stale_links(session, alice, memo):
    sync_memo_tags(session, memo.id, alice.id, "#old #keep")
    sync_memo_tags(session, memo.id, alice.id, "#keep #new")
    assert _memo_tag_names(session, memo.id) == {"keep", "new"}
    # The old tag row stays; only the link is gone
    assert session.exec(select(Tag).where(Tag.name == "old")).first() is not None


def test_sync_reuses_existing_tags(session, alice, bob, memo):
    other = Memo(uid="other", creator_id=bob.id, content="", created_ts=1, updated_ts=1)
    session.add(other)
    session.commit()
    session.refresh(other)

    sync_memo_tags(session, other.id, bob.id, "#shared")
    sync_memo_tags(session, memo.id, alice.id, "#shared")

    tags = session.exec(select(Tag).where(Tag.name == "shared")).all()
    assert len(tags) == 1
    assert tags[0].creator_id == bob.id


def test_sync_is_idempotent(session, alice, memo):
    sync_memo_tags(session, memo.id, alice.id, "#a #b")
    sync_memo_tags(session, memo.id, alice.id, "#a #b")
    links = session.exec(select(MemoTag).where(MemoTag.memo_id == memo.id)).all()
    assert len(links) == 2


def test_sync_with_no_tags_clears_links(session, alice, memo):
    sync_memo_tags(session, memo.id, alice.id, "#gone")
    result = sync_memo_tags(session, memo.id, alice.id, "plain text")
    assert result.ok is True
    assert _memo_tag_names(session, memo.id) == set()


def test_sync_failure_is_reported_not_raised(session, alice, memo):
    with patch("app.services.tag_sync._ensure_tags", side_effect=RuntimeError("db down")):
        result = sync_memo_tags(session, memo.id, alice.id, "#boom")
    assert result.ok is False
    assert "db down" in result.error
    assert _memo_tag_names(session, memo.id) == set()


def test_sync_failure_logs_traceback(session, alice, memo, caplog):
    with patch("app.services.tag_sync._ensure_tags", side_effect=RuntimeError("db down")):
        sync_memo_tags(session, memo.id, alice.id, "#boom")
    [record] = [r for r in caplog.records if r.name == "app.services.tag_sync"]
    assert record.levelname == "WARNING"
    assert record.exc_info is not None
    assert "db down" in caplog.text
