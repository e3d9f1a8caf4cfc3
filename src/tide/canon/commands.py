# src/tide/canon/commands.py
"""Write commands accepted by ``POST /api/world-details``.

A request body names its command with ``op``; the remaining keys are the
command's payload. Each command knows how to apply itself to an open
session, so the service only has to wrap :meth:`apply` in a transaction.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BeforeValidator, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from tide.models import TideBaseModel
from tide.models.validators import as_list, catalog_id, to_float

from .crud import (
    add_catalog_entry_conn,
    remove_catalog_entry_conn,
    replace_catalog_conn,
    replace_collection_conn,
    upsert_details_conn,
)
from .errors import ValidationError
from .registry import CATALOGS

CatalogName = Literal["races", "creatures"]

# Old per-action requests: {"worldId", "action": "addRace", "raceId"}.
LEGACY_ACTIONS: dict[str, tuple[str, CatalogName, str]] = {
    "addRace": ("add_catalog_entry", "races", "raceId"),
    "removeRace": ("remove_catalog_entry", "races", "raceId"),
    "addCreature": ("add_catalog_entry", "creatures", "creatureId"),
    "removeCreature": ("remove_catalog_entry", "creatures", "creatureId"),
}


# A lone value where a list is expected becomes a one-element list.
ListField = Annotated[list[Any], BeforeValidator(as_list)]


class MagicPayload(TideBaseModel):
    builtins: ListField = Field(default_factory=list)
    customs: ListField = Field(default_factory=list)


class SaveCommand(TideBaseModel):
    """Apply every section present in the body in one transaction.

    Collections absent from the body keep their rows.
    """

    op: Literal["save"] = "save"
    details: dict[str, Any] | None = None
    tags: ListField = Field(default_factory=list)
    moons: ListField = Field(default_factory=list)
    months: ListField = Field(default_factory=list)
    weekdays: ListField = Field(default_factory=list)
    climates: ListField = Field(default_factory=list)
    magic: MagicPayload | None = None
    unbreakables: ListField = Field(default_factory=list)
    bans: ListField = Field(default_factory=list)
    tone_flags: ListField = Field(default_factory=list)
    realms: ListField = Field(default_factory=list)
    languages: ListField = Field(default_factory=list)
    deities: ListField = Field(default_factory=list)
    factions: ListField = Field(default_factory=list)
    race_ids: ListField = Field(default_factory=list)
    race_names: ListField = Field(default_factory=list)
    creature_ids: ListField = Field(default_factory=list)
    creature_names: ListField = Field(default_factory=list)

    def collections(self) -> dict[str, list[Any]]:
        """Collection name to items, for the collections the body carried."""
        present = self.model_fields_set
        sections = {
            name: getattr(self, name)
            for name in (
                "tags",
                "moons",
                "months",
                "weekdays",
                "climates",
                "unbreakables",
                "bans",
                "tone_flags",
                "realms",
                "languages",
                "deities",
                "factions",
            )
            if name in present
        }
        if self.magic is not None:
            if "builtins" in self.magic.model_fields_set:
                sections["magic_builtins"] = self.magic.builtins
            if "customs" in self.magic.model_fields_set:
                sections["magic_customs"] = self.magic.customs
        return sections

    def catalogs(self) -> dict[str, tuple[list[Any], list[Any]]]:
        present = self.model_fields_set
        sections = {}
        for name, spec in CATALOGS.items():
            ids_key, names_key = spec.payload_keys
            if ids_key in present or names_key in present:
                sections[name] = (getattr(self, ids_key), getattr(self, names_key))
        return sections

    async def apply(self, session: AsyncSession, world_id: int) -> None:
        if "details" in self.model_fields_set:
            await upsert_details_conn(session, world_id, self.details)
        for name, items in self.collections().items():
            await replace_collection_conn(session, world_id, name, items)
        for catalog, (ids, names) in self.catalogs().items():
            await replace_catalog_conn(session, world_id, catalog, ids, names)


class UpsertDetailsCommand(TideBaseModel):
    op: Literal["upsert_details"]
    details: dict[str, Any] = Field(default_factory=dict)

    async def apply(self, session: AsyncSession, world_id: int) -> None:
        await upsert_details_conn(session, world_id, self.details)


class ReplaceCollectionCommand(TideBaseModel):
    op: Literal["replace_collection"]
    collection: str
    items: ListField = Field(default_factory=list)

    async def apply(self, session: AsyncSession, world_id: int) -> None:
        await replace_collection_conn(session, world_id, self.collection, self.items)


class ReplaceCatalogCommand(TideBaseModel):
    op: Literal["replace_catalog"]
    catalog: CatalogName
    ids: ListField = Field(default_factory=list)
    names: ListField = Field(default_factory=list)

    async def apply(self, session: AsyncSession, world_id: int) -> None:
        await replace_catalog_conn(session, world_id, self.catalog, self.ids, self.names)


class AddCatalogEntryCommand(TideBaseModel):
    op: Literal["add_catalog_entry"]
    catalog: CatalogName
    id: Any = None
    name: str | None = None

    async def apply(self, session: AsyncSession, world_id: int) -> None:
        await add_catalog_entry_conn(
            session, world_id, self.catalog, entry_id=self.id, name=self.name
        )


class RemoveCatalogEntryCommand(TideBaseModel):
    op: Literal["remove_catalog_entry"]
    catalog: CatalogName
    id: Any = None
    name: str | None = None

    async def apply(self, session: AsyncSession, world_id: int) -> None:
        await remove_catalog_entry_conn(
            session, world_id, self.catalog, entry_id=self.id, name=self.name
        )


Command = Annotated[
    Union[
        SaveCommand,
        UpsertDetailsCommand,
        ReplaceCollectionCommand,
        ReplaceCatalogCommand,
        AddCatalogEntryCommand,
        RemoveCatalogEntryCommand,
    ],
    Field(discriminator="op"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def _legacy_body(body: Mapping[str, Any]) -> dict[str, Any]:
    op, catalog, id_key = LEGACY_ACTIONS[body["action"]]
    raw = body.get(id_key)
    # legacy forms post ids as strings, e.g. "raceId": "3"
    entry_id = catalog_id(to_float(raw)) if isinstance(raw, str) else raw
    return {"op": op, "catalog": catalog, "id": entry_id}


def parse_command(body: Mapping[str, Any]) -> Command:
    """Validate a request body into a command.

    A body without ``op`` is a ``save``. Unknown ops and malformed payloads
    raise :class:`~tide.canon.errors.ValidationError`.
    """

    if not isinstance(body, Mapping):
        raise ValidationError("Request body must be a JSON object")
    data = dict(body)
    if "op" not in data and data.get("action") in LEGACY_ACTIONS:
        data = _legacy_body(data)
    data.setdefault("op", "save")
    try:
        return _command_adapter.validate_python(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        detail = f"{location}: {first['msg']}" if location else first["msg"]
        raise ValidationError(f"Invalid {data['op']!r} request: {detail}") from exc


__all__ = [
    "Command",
    "SaveCommand",
    "UpsertDetailsCommand",
    "ReplaceCollectionCommand",
    "ReplaceCatalogCommand",
    "AddCatalogEntryCommand",
    "RemoveCatalogEntryCommand",
    "MagicPayload",
    "LEGACY_ACTIONS",
    "parse_command",
]
