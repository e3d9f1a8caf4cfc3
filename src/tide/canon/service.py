# src/tide/canon/service.py
"""World-details service: the one entry point handlers talk to."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from tide.core.logging import get_logger
from tide.core.logs import EventType, Priority, get_event_logger, log_calls
from tide.models import CatalogEntry, WorldAggregate, WorldSummary
from tide.models.validators import catalog_id, to_float, to_text

from .commands import (
    AddCatalogEntryCommand,
    Command,
    RemoveCatalogEntryCommand,
    ReplaceCatalogCommand,
    ReplaceCollectionCommand,
    UpsertDetailsCommand,
    parse_command,
)
from .crud import (
    create_catalog_entry_conn,
    create_world_conn,
    delete_world_details_conn,
    get_catalog_spec,
    load_world_aggregate_conn,
)
from .db import Database
from .errors import ValidationError
from .queries import ensure_world_exists, list_catalog_conn

event_logger = get_event_logger()
logger = get_logger(__name__)


def coerce_world_id(value: Any) -> int:
    """Return ``value`` as a positive world id or raise :class:`ValidationError`.

    Numeric strings are accepted because query parameters arrive as text.
    """

    if value is None or value == "":
        raise ValidationError("world_id is required")
    number = catalog_id(to_float(value)) if not isinstance(value, bool) else None
    if number is None or number <= 0:
        raise ValidationError(f"Invalid world_id: {value!r}")
    return number


class WorldDetailsService:
    """Read, patch, replace and delete world aggregates.

    Every write runs in one transaction on ``database``: either all of it
    commits or the store is left as it was.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    async def read(self, world_id: int) -> WorldAggregate:
        """Return the aggregate, creating the details row on first access."""
        async with self.database.transaction("read world details") as session:
            return await load_world_aggregate_conn(session, world_id)

    async def apply(self, world_id: int, command: Command) -> WorldAggregate:
        """Run ``command`` in its own transaction and return a fresh read."""
        event_logger.log(
            EventType.REQUEST,
            f"Applying {command.op} to world {world_id}",
            Priority.NORMAL,
            metadata={"operation": command.op, "world_id": world_id},
        )
        async with self.database.transaction(f"apply {command.op}") as session:
            await command.apply(session, world_id)
        return await self.read(world_id)

    async def save(self, world_id: int, payload: Mapping[str, Any]) -> WorldAggregate:
        """Apply every section of a combined save payload atomically."""
        return await self.apply(world_id, parse_command({**payload, "op": "save"}))

    async def upsert_details(
        self, world_id: int, fields: Mapping[str, Any]
    ) -> WorldAggregate:
        command = UpsertDetailsCommand(op="upsert_details", details=dict(fields))
        return await self.apply(world_id, command)

    async def replace_collection(
        self, world_id: int, name: str, items: Iterable[Any]
    ) -> WorldAggregate:
        command = ReplaceCollectionCommand(
            op="replace_collection", collection=name, items=list(items)
        )
        return await self.apply(world_id, command)

    async def replace_catalog(
        self,
        world_id: int,
        catalog: str,
        ids: Iterable[Any] = (),
        names: Iterable[Any] = (),
    ) -> WorldAggregate:
        get_catalog_spec(catalog)
        command = ReplaceCatalogCommand(
            op="replace_catalog", catalog=catalog, ids=list(ids), names=list(names)
        )
        return await self.apply(world_id, command)

    async def add_catalog_entry(
        self, world_id: int, catalog: str, *, entry_id: Any = None, name: str | None = None
    ) -> WorldAggregate:
        get_catalog_spec(catalog)
        command = AddCatalogEntryCommand(
            op="add_catalog_entry", catalog=catalog, id=entry_id, name=name
        )
        return await self.apply(world_id, command)

    async def remove_catalog_entry(
        self, world_id: int, catalog: str, *, entry_id: Any = None, name: str | None = None
    ) -> WorldAggregate:
        get_catalog_spec(catalog)
        command = RemoveCatalogEntryCommand(
            op="remove_catalog_entry", catalog=catalog, id=entry_id, name=name
        )
        return await self.apply(world_id, command)

    async def delete(self, world_id: int) -> None:
        """Delete the world and everything it owns.

        Raises :class:`~tide.canon.errors.NotFound` before any write when
        the world is missing.
        """
        async with self.database.session() as session:
            await ensure_world_exists(session, world_id)
        async with self.database.transaction("delete world details") as session:
            await delete_world_details_conn(session, world_id)

    async def create_world(self, name: str, description: str | None = None) -> WorldSummary:
        clean = to_text(name)
        if clean is None:
            raise ValidationError("World name is required")
        async with self.database.transaction("create world") as session:
            return await create_world_conn(session, clean, description)

    async def create_catalog_entry(
        self, catalog: str, name: str, description: str | None = None
    ) -> CatalogEntry:
        clean = to_text(name)
        if clean is None:
            raise ValidationError(f"{catalog} entry name is required")
        async with self.database.transaction(f"create {catalog} entry") as session:
            return await create_catalog_entry_conn(session, catalog, clean, description)

    async def list_catalog(self, catalog: str) -> list[CatalogEntry]:
        spec = get_catalog_spec(catalog)
        async with self.database.session() as session:
            return await list_catalog_conn(session, spec)


@log_calls
async def load_catalog_file(service: WorldDetailsService, path: str | Path) -> dict[str, int]:
    """Load races and creatures from a YAML file.

    The document maps ``races`` and ``creatures`` to lists of entries, each
    either a bare name or ``{name, description}``. Existing names are left
    untouched. Returns the number of entries seen per catalog.
    """

    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        raise ValidationError(f"{path}: expected a mapping of catalogs")

    counts: dict[str, int] = {}
    for catalog, entries in data.items():
        get_catalog_spec(catalog)
        counts[catalog] = 0
        for entry in entries or []:
            if isinstance(entry, Mapping):
                name, description = entry.get("name"), entry.get("description")
            else:
                name, description = entry, None
            if to_text(name) is None:
                logger.debug("Skipping unnamed %s entry in %s", catalog, path)
                continue
            await service.create_catalog_entry(catalog, name, description)
            counts[catalog] += 1
    return counts


__all__ = ["WorldDetailsService", "coerce_world_id", "load_catalog_file"]
