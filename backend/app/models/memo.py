from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from app.models.resource import ResourceRef, ResourceView

VisibilityType = Literal["PRIVATE", "PUBLIC"]
RowStatusType = Literal["NORMAL", "ARCHIVED"]

VISIBILITY_PRIVATE = "PRIVATE"
VISIBILITY_PUBLIC = "PUBLIC"
ROW_STATUS_NORMAL = "NORMAL"
ROW_STATUS_ARCHIVED = "ARCHIVED"


class Memo(SQLModel, table=True):
    __tablename__ = "memo"
    __table_args__ = (
        CheckConstraint("visibility IN ('PRIVATE', 'PUBLIC')", name="ck_memo_visibility"),
        CheckConstraint("row_status IN ('NORMAL', 'ARCHIVED')", name="ck_memo_row_status"),
    )

    id: int | None = Field(default=None, primary_key=True)
    uid: str = Field(index=True, unique=True)  # external id, never changes
    creator_id: int = Field(foreign_key="user.id", index=True)
    content: str
    visibility: str = Field(default=VISIBILITY_PRIVATE)
    row_status: str = Field(default=ROW_STATUS_NORMAL, index=True)
    created_ts: int = Field(index=True)  # epoch seconds
    updated_ts: int


# --- Pydantic schemas for request/response validation ---

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MemoCreate(_CamelModel):
    content: str | None = None
    visibility: VisibilityType = VISIBILITY_PRIVATE
    resource_id_list: list[int] | None = None
    resources: list[ResourceRef] | None = None


class MemoUpdate(_CamelModel):
    content: str | None = None
    visibility: VisibilityType | None = None
    resource_id_list: list[int] | None = None
    resources: list[ResourceRef] | None = None


class MemoView(_CamelModel):
    id: int
    uid: str
    creator_id: int
    creator_username: str | None = None
    content: str
    visibility: str
    row_status: str
    created_ts: int
    updated_ts: int
    resource_id_list: list[int] = []  # kept for older clients; mirrors `resources`
    resources: list[ResourceView] = []
    tags: list[str] = []


class DailyCount(BaseModel):
    ts: int  # midnight (UTC) of the bucket's date, epoch seconds
    count: int


class MemoStats(_CamelModel):
    total: int
    daily_histogram: list[DailyCount] = []


class MessageResponse(BaseModel):
    message: str
