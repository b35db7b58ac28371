"""Tag synchronizer: keeps the memo-tag index in step with memo content."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from sqlalchemy import delete
from sqlmodel import Session, select

from app.models.tag import MemoTag, Tag

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"(?:^|(?<=\s))#([^\s#]+)")
_TRAILING_PUNCT = ".,;:!?"


@dataclass(frozen=True, slots=True)
class TagSyncResult:
    memo_id: int
    ok: bool
    tags: list[str] = field(default_factory=list)
    error: str | None = None


def extract_tags(content: str) -> list[str]:
    """Return the hashtags in ``content``, de-duplicated in order of appearance.

    >>> extract_tags("hello #world, and #world again #x#y")
    ['world', 'x']
    """
    seen: set[str] = set()
    tags: list[str] = []
    for match in _TAG_RE.finditer(content or ""):
        name = match.group(1).rstrip(_TRAILING_PUNCT)
        if name and name not in seen:
            seen.add(name)
            tags.append(name)
    return tags


def _ensure_tags(session: Session, names: list[str], creator_id: int) -> dict[str, int]:
    """Return ``{name: tag_id}`` for ``names``, creating missing tags."""
    if not names:
        return {}
    existing = session.exec(select(Tag).where(Tag.name.in_(names))).all()  # type: ignore[attr-defined]
    ids = {t.name: t.id for t in existing}
    for name in names:
        if name in ids:
            continue
        tag = Tag(name=name, creator_id=creator_id)
        session.add(tag)
        session.flush()
        ids[name] = tag.id
    return ids


def sync_memo_tags(session: Session, memo_id: int, creator_id: int, content: str) -> TagSyncResult:
    """Replace the memo's tag links with exactly the tags found in ``content``.

    Never raises: on failure the session is rolled back and the error is
    returned in the result.
    """
    names = extract_tags(content)
    try:
        tag_ids = _ensure_tags(session, names, creator_id)
        session.execute(delete(MemoTag).where(MemoTag.memo_id == memo_id))  # type: ignore[arg-type]
        for name in names:
            session.add(MemoTag(memo_id=memo_id, tag_id=tag_ids[name]))
        session.commit()
    except Exception as exc:
        session.rollback()
        logger.warning("Tag sync rolled back for memo %s", memo_id, exc_info=True)
        return TagSyncResult(memo_id=memo_id, ok=False, error=str(exc) or type(exc).__name__)
    return TagSyncResult(memo_id=memo_id, ok=True, tags=names)
