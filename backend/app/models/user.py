"""User model: the principal that owns memos.

Users are provisioned elsewhere; this service only resolves them by uid.
"""
from __future__ import annotations

import time
from uuid import uuid4

from sqlmodel import Field, SQLModel

ROLE_HOST = "HOST"
ROLE_USER = "USER"


class User(SQLModel, table=True):
    __tablename__ = "user"

    id: int | None = Field(default=None, primary_key=True)
    uid: str = Field(default_factory=lambda: str(uuid4()), index=True, unique=True)
    username: str
    role: str = Field(default=ROLE_USER)  # HOST may mutate any memo
    created_ts: int = Field(default_factory=lambda: int(time.time()))
