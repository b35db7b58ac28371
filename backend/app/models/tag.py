"""Tag model: hashtags derived from memo content."""
from __future__ import annotations

import time

from pydantic import BaseModel
from sqlmodel import Field, SQLModel


class MemoTag(SQLModel, table=True):
    """Many-to-many junction table between memos and tags."""
    __tablename__ = "memo_tag"

    memo_id: int = Field(foreign_key="memo.id", primary_key=True)
    tag_id: int = Field(foreign_key="tag.id", primary_key=True)


class Tag(SQLModel, table=True):
    __tablename__ = "tag"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    creator_id: int | None = Field(default=None, foreign_key="user.id")  # first user to use it
    created_ts: int = Field(default_factory=lambda: int(time.time()))


# --- Pydantic schemas ---

class TagUsage(BaseModel):
    """Tag name with the number of normal memos linked to it."""
    name: str
    count: int
