"""Resource model: binary attachments and their memo associations."""
from __future__ import annotations

import time
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


class Resource(SQLModel, table=True):
    __tablename__ = "resource"

    id: int | None = Field(default=None, primary_key=True)
    uid: str = Field(default_factory=lambda: str(uuid4()), index=True, unique=True)
    filename: str
    type: str = Field(default="")  # media type, e.g. "image/png"
    size: int = Field(default=0)
    external_link: str = Field(default="")
    creator_id: int | None = Field(default=None, foreign_key="user.id")
    created_ts: int = Field(default_factory=lambda: int(time.time()))


class MemoResource(SQLModel, table=True):
    """Link between a memo and a resource.

    Uses a surrogate key: the same resource may be attached twice when the
    client sends duplicate references.
    """
    __tablename__ = "memo_resource"

    id: int | None = Field(default=None, primary_key=True)
    memo_id: int = Field(foreign_key="memo.id", index=True)
    resource_id: int = Field(foreign_key="resource.id", index=True)


# --- Pydantic schemas ---

class ResourceRef(BaseModel):
    """Structured resource reference sent by clients, e.g. {"name": "resources/abc"}."""
    model_config = ConfigDict(extra="ignore")

    name: str | None = None


class ResourceView(BaseModel):
    """Client-facing projection of an attached resource.

    Payload bytes and the external link are always emptied; clients fetch
    the binary through the resource endpoints.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    uid: str
    create_time: str
    filename: str
    content: dict[str, int] = {}  # empty byte payload, serialized as {}
    external_link: str = ""
    type: str
    size: int
    memo: str
