from __future__ import annotations

from app.models.user import User  # noqa: F401
from app.models.memo import Memo  # noqa: F401
from app.models.resource import MemoResource, Resource  # noqa: F401
from app.models.tag import MemoTag, Tag  # noqa: F401
