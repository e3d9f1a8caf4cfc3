# src/tide/canon/crud.py
"""Create/read/replace/delete operations on world aggregates.

Every function here takes an open :class:`AsyncSession` and never commits;
the caller owns the transaction boundary (see
:meth:`tide.canon.db.Database.transaction`).
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from tide.core.logging import get_logger
from tide.core.logs import EventType, Priority, get_event_logger
from tide.models import (
    CatalogEntry,
    WorldAggregate,
    WorldDetails,
    WorldDetailsSQL,
    WorldSQL,
    WorldSummary,
)

from .details import DetailsPatch, build_details_patch, details_defaults
from .errors import ValidationError
from .queries import ensure_world_exists, get_world_conn, resolve_catalog_ids, world_catalog_conn
from .registry import CATALOGS, COLLECTIONS, CatalogSpec, CollectionSpec

# Initialize EventLogger for database operations
event_logger = get_event_logger()
logger = get_logger(__name__)

_UPSERT_DIALECTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}


def get_collection_spec(name: str) -> CollectionSpec:
    """Return the collection called ``name`` or raise :class:`ValidationError`."""
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise ValidationError(f"Unknown collection: {name!r}") from None


def get_catalog_spec(name: str) -> CatalogSpec:
    """Return the catalog called ``name`` or raise :class:`ValidationError`."""
    try:
        return CATALOGS[name]
    except KeyError:
        raise ValidationError(f"Unknown catalog: {name!r}") from None


async def ensure_details_conn(session: AsyncSession, world_id: int) -> None:
    """Insert the default details row for ``world_id`` unless one exists."""

    values = {"world_id": world_id, **details_defaults()}
    dialect_insert = _UPSERT_DIALECTS.get(session.get_bind().dialect.name)
    if dialect_insert is not None:
        stmt = dialect_insert(WorldDetailsSQL).values(**values)
        await session.execute(stmt.on_conflict_do_nothing(index_elements=["world_id"]))
        return

    result = await session.execute(
        select(WorldDetailsSQL.id).where(WorldDetailsSQL.world_id == world_id)
    )
    if result.scalar_one_or_none() is None:
        await session.execute(insert(WorldDetailsSQL).values(**values))


async def get_details_conn(session: AsyncSession, world_id: int) -> WorldDetails:
    result = await session.execute(
        select(WorldDetailsSQL)
        .where(WorldDetailsSQL.world_id == world_id)
        .execution_options(populate_existing=True)
    )
    row = result.scalar_one()
    return WorldDetails.model_validate(row)


async def get_collection_conn(
    session: AsyncSession, spec: CollectionSpec, world_id: int
) -> list[Any]:
    """Return the rows of one collection in their read order."""

    result = await session.execute(
        select(spec.model)
        .where(spec.model.world_id == world_id)
        .order_by(*spec.sort_columns)
        .execution_options(populate_existing=True)
    )
    return [spec.render(row) for row in result.scalars().all()]


async def load_world_aggregate_conn(session: AsyncSession, world_id: int) -> WorldAggregate:
    """Assemble the full aggregate for ``world_id``.

    Creates the details row with defaults on first access. Raises
    :class:`~tide.canon.errors.NotFound` when the world is missing.
    """

    start_time = time.time()
    world = await get_world_conn(session, world_id)
    await ensure_details_conn(session, world_id)

    collections = {
        name: await get_collection_conn(session, spec, world_id)
        for name, spec in COLLECTIONS.items()
    }
    catalogs = {
        spec.aggregate_key: await world_catalog_conn(session, spec, world_id)
        for spec in CATALOGS.values()
    }
    magic = {
        "builtins": collections.pop("magic_builtins"),
        "customs": collections.pop("magic_customs"),
    }
    aggregate = WorldAggregate(
        world=WorldSummary.model_validate(world),
        details=await get_details_conn(session, world_id),
        magic=magic,
        **collections,
        **catalogs,
    )

    event_logger.log(
        EventType.DATABASE_OPERATION,
        f"Loaded world aggregate {world_id}",
        Priority.LOW,
        metadata={
            "operation": "select",
            "table": "world_details",
            "world_id": world_id,
            "duration": time.time() - start_time,
        },
    )
    return aggregate


async def upsert_details_conn(
    session: AsyncSession, world_id: int, fields: Mapping[str, Any] | None
) -> DetailsPatch:
    """Write only the recognised keys of ``fields`` to the details row.

    Returns the coerced patch that was applied.
    """

    start_time = time.time()
    patch = build_details_patch(fields)
    event_logger.log(
        EventType.DATABASE_OPERATION,
        f"Upserting details for world {world_id}",
        Priority.NORMAL,
        metadata={"operation": "upsert", "table": "world_details", "fields": sorted(patch)},
    )

    await ensure_world_exists(session, world_id)
    await ensure_details_conn(session, world_id)
    await session.execute(
        update(WorldDetailsSQL)
        .where(WorldDetailsSQL.world_id == world_id)
        .values(**patch, updated_at=datetime.now(timezone.utc))
    )

    event_logger.log(
        EventType.DATABASE_OPERATION,
        f"Details updated for world {world_id}",
        Priority.NORMAL,
        metadata={
            "operation": "upsert",
            "table": "world_details",
            "duration": time.time() - start_time,
            "success": True,
        },
    )
    return patch


async def replace_collection_conn(
    session: AsyncSession, world_id: int, name: str, items: Iterable[Any]
) -> int:
    """Replace every row of collection ``name`` with ``items``.

    Rows are inserted one statement at a time in input order. Ordered
    collections store the input position as ``order_index``, so skipped items
    leave a gap. Returns the number of rows written.
    """

    spec = get_collection_spec(name)
    table = spec.model.__tablename__
    start_time = time.time()
    await ensure_world_exists(session, world_id)

    await session.execute(delete(spec.model).where(spec.model.world_id == world_id))

    written = skipped = 0
    for position, item in enumerate(items):
        row = spec.coerce(item)
        if row is None:
            skipped += 1
            continue
        if spec.ordered:
            row["order_index"] = position
        await session.execute(insert(spec.model).values(world_id=world_id, **row))
        written += 1

    if skipped:
        logger.debug("Skipped %d invalid %s item(s) for world %s", skipped, name, world_id)
    event_logger.log(
        EventType.DATABASE_OPERATION,
        f"Replaced {name} for world {world_id}",
        Priority.NORMAL,
        metadata={
            "operation": "replace",
            "table": table,
            "rows": written,
            "duration": time.time() - start_time,
        },
    )
    return written


async def replace_catalog_conn(
    session: AsyncSession,
    world_id: int,
    catalog: str,
    ids: Iterable[Any] = (),
    names: Iterable[Any] = (),
) -> list[int]:
    """Replace a world's membership in ``catalog``.

    Returns the ids written. An id with no catalog row violates the foreign
    key and fails the surrounding transaction.
    """

    spec = get_catalog_spec(catalog)
    await ensure_world_exists(session, world_id)
    resolved = await resolve_catalog_ids(session, spec, ids, names)

    await session.execute(
        delete(spec.join_model).where(spec.join_model.world_id == world_id)
    )
    for entry_id in resolved:
        await session.execute(
            insert(spec.join_model).values(world_id=world_id, **{spec.member_column: entry_id})
        )

    event_logger.log(
        EventType.DATABASE_OPERATION,
        f"Replaced {catalog} catalog for world {world_id}",
        Priority.NORMAL,
        metadata={
            "operation": "replace",
            "table": spec.join_model.__tablename__,
            "rows": len(resolved),
        },
    )
    return resolved


async def _existing_catalog_id(
    session: AsyncSession, spec: CatalogSpec, entry_id: Any, name: Any
) -> int | None:
    resolved = await resolve_catalog_ids(
        session, spec, [entry_id] if entry_id is not None else [], [name] if name else []
    )
    if not resolved:
        return None
    result = await session.execute(select(spec.model.id).where(spec.model.id == resolved[0]))
    return result.scalar_one_or_none()


async def add_catalog_entry_conn(
    session: AsyncSession,
    world_id: int,
    catalog: str,
    *,
    entry_id: Any = None,
    name: Any = None,
) -> int | None:
    """Enable one catalog entry for a world.

    Adding an entry twice, or one that cannot be resolved, changes nothing.
    """

    spec = get_catalog_spec(catalog)
    await ensure_world_exists(session, world_id)
    resolved = await _existing_catalog_id(session, spec, entry_id, name)
    if resolved is None:
        logger.debug("No %s entry matches id=%r name=%r", catalog, entry_id, name)
        return None

    present = await session.execute(
        select(spec.member).where(
            spec.join_model.world_id == world_id, spec.member == resolved
        )
    )
    if present.scalar_one_or_none() is None:
        await session.execute(
            insert(spec.join_model).values(world_id=world_id, **{spec.member_column: resolved})
        )
        event_logger.log(
            EventType.DATABASE_OPERATION,
            f"Added {catalog} entry {resolved} to world {world_id}",
            Priority.NORMAL,
            metadata={"operation": "insert", "table": spec.join_model.__tablename__},
        )
    return resolved


async def remove_catalog_entry_conn(
    session: AsyncSession,
    world_id: int,
    catalog: str,
    *,
    entry_id: Any = None,
    name: Any = None,
) -> None:
    """Disable one catalog entry for a world; absent entries are ignored."""

    spec = get_catalog_spec(catalog)
    await ensure_world_exists(session, world_id)
    resolved = await resolve_catalog_ids(
        session, spec, [entry_id] if entry_id is not None else [], [name] if name else []
    )
    if not resolved:
        return
    await session.execute(
        delete(spec.join_model).where(
            spec.join_model.world_id == world_id, spec.member == resolved[0]
        )
    )
    event_logger.log(
        EventType.DATABASE_OPERATION,
        f"Removed {catalog} entry {resolved[0]} from world {world_id}",
        Priority.NORMAL,
        metadata={"operation": "delete", "table": spec.join_model.__tablename__},
    )


async def delete_world_details_conn(session: AsyncSession, world_id: int) -> None:
    """Delete a world and everything it owns.

    Child tables are cleared explicitly so the result does not depend on the
    store enforcing ``ON DELETE CASCADE``.
    """

    start_time = time.time()
    await session.execute(delete(WorldDetailsSQL).where(WorldDetailsSQL.world_id == world_id))
    for spec in COLLECTIONS.values():
        await session.execute(delete(spec.model).where(spec.model.world_id == world_id))
    for catalog in CATALOGS.values():
        await session.execute(
            delete(catalog.join_model).where(catalog.join_model.world_id == world_id)
        )
    await session.execute(delete(WorldSQL).where(WorldSQL.id == world_id))

    event_logger.log(
        EventType.DATABASE_OPERATION,
        f"Deleted world {world_id}",
        Priority.HIGH,
        metadata={
            "operation": "delete",
            "table": "worlds",
            "world_id": world_id,
            "duration": time.time() - start_time,
            "success": True,
        },
    )


async def create_world_conn(
    session: AsyncSession, name: str, description: str | None = None
) -> WorldSummary:
    """Insert a world row and return it."""

    world = WorldSQL(name=name, description=description)
    session.add(world)
    await session.flush()
    event_logger.log(
        EventType.DATABASE_OPERATION,
        f"Created world {world.id}",
        Priority.NORMAL,
        metadata={"operation": "insert", "table": "worlds", "name": name},
    )
    return WorldSummary.model_validate(world)


async def create_catalog_entry_conn(
    session: AsyncSession, catalog: str, name: str, description: str | None = None
) -> CatalogEntry:
    """Insert a race or creature unless one with ``name`` already exists."""

    spec = get_catalog_spec(catalog)
    result = await session.execute(select(spec.model).where(spec.model.name == name))
    entry = result.scalar_one_or_none()
    if entry is None:
        entry = spec.model(name=name, description=description)
        session.add(entry)
        await session.flush()
        event_logger.log(
            EventType.DATABASE_OPERATION,
            f"Created {catalog} entry {name}",
            Priority.LOW,
            metadata={"operation": "insert", "table": spec.model.__tablename__},
        )
    return CatalogEntry(id=entry.id, name=entry.name)


__all__ = [
    "get_collection_spec",
    "get_catalog_spec",
    "ensure_details_conn",
    "get_details_conn",
    "get_collection_conn",
    "load_world_aggregate_conn",
    "upsert_details_conn",
    "replace_collection_conn",
    "replace_catalog_conn",
    "add_catalog_entry_conn",
    "remove_catalog_entry_conn",
    "delete_world_details_conn",
    "create_world_conn",
    "create_catalog_entry_conn",
]
