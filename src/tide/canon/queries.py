# src/tide/canon/queries.py
"""Small read helpers shared by the CRUD functions."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tide.models import CatalogEntry, WorldSQL
from tide.models.validators import catalog_id, to_text

from .errors import NotFound
from .registry import CatalogSpec


async def get_world_conn(session: AsyncSession, world_id: int) -> WorldSQL:
    """Return the world row or raise :class:`NotFound`."""

    world = await session.get(WorldSQL, world_id)
    if world is None:
        raise NotFound(f"World {world_id} not found")
    return world


async def ensure_world_exists(session: AsyncSession, world_id: int) -> None:
    result = await session.execute(select(WorldSQL.id).where(WorldSQL.id == world_id))
    if result.scalar_one_or_none() is None:
        raise NotFound(f"World {world_id} not found")


async def ids_by_name(
    session: AsyncSession, spec: CatalogSpec, names: Iterable[str]
) -> dict[str, int]:
    """Map each known catalog name to its id; unknown names are absent."""

    wanted = list(dict.fromkeys(names))
    if not wanted:
        return {}
    result = await session.execute(
        select(spec.model.name, spec.model.id).where(spec.model.name.in_(wanted))
    )
    return {name: entry_id for name, entry_id in result.all()}


async def resolve_catalog_ids(
    session: AsyncSession,
    spec: CatalogSpec,
    ids: Iterable[object] = (),
    names: Iterable[object] = (),
) -> list[int]:
    """Turn raw ids and names into a de-duplicated id list.

    Ids come first in their given order, followed by resolved names. Names
    match exactly and case-sensitively; names without a match are dropped.
    """

    resolved = [entry_id for entry_id in map(catalog_id, ids) if entry_id is not None]
    clean_names = [name for name in (to_text(n) for n in names) if name is not None]
    by_name = await ids_by_name(session, spec, clean_names)
    resolved.extend(by_name[name] for name in clean_names if name in by_name)
    return list(dict.fromkeys(resolved))


async def list_catalog_conn(session: AsyncSession, spec: CatalogSpec) -> list[CatalogEntry]:
    """Return every entry of a catalog ordered by name."""

    result = await session.execute(
        select(spec.model.id, spec.model.name).order_by(spec.model.name, spec.model.id)
    )
    return [CatalogEntry(id=entry_id, name=name) for entry_id, name in result.all()]


async def world_catalog_conn(
    session: AsyncSession, spec: CatalogSpec, world_id: int
) -> list[CatalogEntry]:
    """Return the catalog entries enabled for ``world_id`` ordered by name."""

    result = await session.execute(
        select(spec.model.id, spec.model.name)
        .join(spec.join_model, spec.member == spec.model.id)
        .where(spec.join_model.world_id == world_id)
        .order_by(spec.model.name, spec.model.id)
    )
    return [CatalogEntry(id=entry_id, name=name) for entry_id, name in result.all()]


__all__ = [
    "get_world_conn",
    "ensure_world_exists",
    "ids_by_name",
    "resolve_catalog_ids",
    "list_catalog_conn",
    "world_catalog_conn",
]
