"""Resource resolver: turns client resource references into resource ids.

Clients send either raw numeric ids (``resourceIdList``) or structured objects
whose ``name`` is ``<collection>/<uid>`` (``resources``). Both shapes are
normalized into one ordered id list here, before anything is persisted.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import delete
from sqlmodel import Session, select

from app.models.memo import MemoCreate, MemoUpdate
from app.models.resource import MemoResource, Resource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResourceIds:
    """Already-resolved numeric resource ids."""
    ids: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class ResourceRefs:
    """Reference names of the form ``<collection>/<uid>``."""
    names: tuple[str | None, ...]


ResourceInput = ResourceIds | ResourceRefs


@dataclass(frozen=True, slots=True)
class ResolvedResources:
    """Outcome of resolution. ``missing`` lists references that were dropped."""
    resource_ids: list[int] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def resource_input_from(body: MemoCreate | MemoUpdate) -> ResourceInput | None:
    """Pick the resource input shape from a request body.

    Returns None when the body carries no resource field at all, which on
    update means "leave associations alone". A non-empty ``resources`` list
    wins over ``resourceIdList``.
    """
    if body.resources:
        return ResourceRefs(names=tuple(r.name for r in body.resources))
    if body.resource_id_list is not None:
        return ResourceIds(ids=tuple(body.resource_id_list))
    if body.resources is not None:
        return ResourceIds(ids=())
    return None


def _uid_from_name(name: str | None) -> str:
    if not name:
        return ""
    return name.split("/")[-1]


def resolve_resource_ids(session: Session, resource_input: ResourceInput) -> ResolvedResources:
    """Resolve a resource input into existing resource ids, in input order.

    Unknown references are dropped and reported in ``missing``; this never
    raises for a lookup miss. Duplicates are kept.
    """
    resolved: list[int] = []
    missing: list[str] = []

    if isinstance(resource_input, ResourceRefs):
        for name in resource_input.names:
            uid = _uid_from_name(name)
            if not uid:
                missing.append(name or "")
                continue
            resource_id = session.exec(select(Resource.id).where(Resource.uid == uid)).first()
            if resource_id is None:
                logger.info("Resource not found for uid %s", uid)
                missing.append(name or "")
                continue
            resolved.append(resource_id)
        return ResolvedResources(resource_ids=resolved, missing=missing)

    wanted = set(resource_input.ids)
    known: set[int] = set()
    if wanted:
        known = set(
            session.exec(
                select(Resource.id).where(Resource.id.in_(wanted))  # type: ignore[union-attr]
            ).all()
        )
    for resource_id in resource_input.ids:
        if resource_id in known:
            resolved.append(resource_id)
        else:
            logger.info("Resource id %s does not exist", resource_id)
            missing.append(str(resource_id))
    return ResolvedResources(resource_ids=resolved, missing=missing)


def replace_memo_resources(session: Session, memo_id: int, resource_ids: list[int]) -> None:
    """Delete every association of the memo and insert ``resource_ids`` in order."""
    session.execute(delete(MemoResource).where(MemoResource.memo_id == memo_id))  # type: ignore[arg-type]
    for resource_id in resource_ids:
        session.add(MemoResource(memo_id=memo_id, resource_id=resource_id))
    session.commit()
