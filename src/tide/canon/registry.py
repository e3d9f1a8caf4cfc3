# src/tide/canon/registry.py
"""Registry of the named collections a world owns.

Each :class:`CollectionSpec` says which table backs a collection, how its
input items are coerced, which field is required and how rows are ordered
when read back. The replace algorithm in :mod:`tide.canon.crud` is written
once against this description instead of once per table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from tide.models import (
    CreatureSQL,
    RaceSQL,
    WorldBanSQL,
    WorldClimateSQL,
    WorldCreatureCatalogSQL,
    WorldDeitySQL,
    WorldFactionSQL,
    WorldLanguageSQL,
    WorldMagicCustomSQL,
    WorldMagicSystemSQL,
    WorldMonthSQL,
    WorldMoonSQL,
    WorldRaceCatalogSQL,
    WorldRealmSQL,
    WorldTagSQL,
    WorldToneFlagSQL,
    WorldUnbreakableSQL,
    WorldWeekdaySQL,
)
from tide.models.validators import clamp, to_int, to_text


@dataclass(frozen=True)
class ColumnSpec:
    """How one input field maps onto a collection column."""

    name: str
    kind: Literal["text", "int"] = "text"
    max_length: int | None = None
    default: Any = None
    minimum: int | None = None
    maximum: int | None = None

    def coerce(self, value: Any) -> Any:
        if self.kind == "int":
            result = clamp(to_int(value), self.minimum, self.maximum)
        else:
            result = to_text(value, self.max_length)
        return self.default if result is None else result


@dataclass(frozen=True)
class CollectionSpec:
    """A zero-or-many child table scoped to a world."""

    name: str
    model: type
    columns: tuple[ColumnSpec, ...]
    required: str
    ordered: bool = False

    @property
    def scalar(self) -> bool:
        """True when items are single strings rather than records."""
        return len(self.columns) == 1

    @property
    def sort_columns(self) -> tuple[Any, ...]:
        if self.ordered:
            return (self.model.order_index, self.model.id)
        return (getattr(self.model, self.required), self.model.id)

    def coerce(self, item: Any) -> dict[str, Any] | None:
        """Return column values for ``item`` or ``None`` to skip it."""
        if isinstance(item, Mapping):
            source: Mapping[str, Any] = item
        elif self.scalar and isinstance(item, (str, int, float)) and not isinstance(item, bool):
            source = {self.required: item}
        else:
            return None
        row = {column.name: column.coerce(source.get(column.name)) for column in self.columns}
        if row.get(self.required) is None:
            return None
        return row

    def render(self, row: Any) -> Any:
        """Shape a stored row for the aggregate."""
        if self.scalar and not self.ordered:
            return getattr(row, self.required)
        values = {column.name: getattr(row, column.name) for column in self.columns}
        if self.ordered:
            values["order_index"] = row.order_index
        return values


@dataclass(frozen=True)
class CatalogSpec:
    """Many-to-many membership between worlds and a shared catalog."""

    name: str
    model: type
    join_model: type
    member_column: str
    aggregate_key: str
    payload_keys: tuple[str, str]

    @property
    def member(self) -> Any:
        return getattr(self.join_model, self.member_column)


def _text(name: str, max_length: int) -> ColumnSpec:
    return ColumnSpec(name, "text", max_length=max_length)


COLLECTIONS: dict[str, CollectionSpec] = {
    spec.name: spec
    for spec in (
        CollectionSpec("tags", WorldTagSQL, (_text("value", 80),), "value"),
        CollectionSpec(
            "moons",
            WorldMoonSQL,
            (_text("name", 40), ColumnSpec("cycle_days", "int"), _text("omen", 120)),
            "name",
            ordered=True,
        ),
        CollectionSpec(
            "months",
            WorldMonthSQL,
            (
                _text("name", 30),
                ColumnSpec("days", "int", default=30, minimum=1, maximum=60),
            ),
            "name",
            ordered=True,
        ),
        CollectionSpec("weekdays", WorldWeekdaySQL, (_text("value", 20),), "value", ordered=True),
        CollectionSpec("climates", WorldClimateSQL, (_text("value", 80),), "value"),
        CollectionSpec("magic_builtins", WorldMagicSystemSQL, (_text("system", 80),), "system"),
        CollectionSpec("magic_customs", WorldMagicCustomSQL, (_text("name", 80),), "name"),
        CollectionSpec(
            "unbreakables", WorldUnbreakableSQL, (_text("value", 120),), "value", ordered=True
        ),
        CollectionSpec("bans", WorldBanSQL, (_text("value", 80),), "value"),
        CollectionSpec("tone_flags", WorldToneFlagSQL, (_text("flag", 80),), "flag"),
        CollectionSpec(
            "realms",
            WorldRealmSQL,
            (
                _text("name", 40),
                _text("type", 40),
                _text("traits", 80),
                _text("travel", 80),
                _text("bleed", 80),
            ),
            "name",
            ordered=True,
        ),
        CollectionSpec("languages", WorldLanguageSQL, (_text("value", 80),), "value"),
        CollectionSpec("deities", WorldDeitySQL, (_text("value", 80),), "value"),
        CollectionSpec("factions", WorldFactionSQL, (_text("value", 80),), "value"),
    )
}

CATALOGS: dict[str, CatalogSpec] = {
    "races": CatalogSpec(
        "races",
        RaceSQL,
        WorldRaceCatalogSQL,
        "race_id",
        "race_catalog",
        ("race_ids", "race_names"),
    ),
    "creatures": CatalogSpec(
        "creatures",
        CreatureSQL,
        WorldCreatureCatalogSQL,
        "creature_id",
        "creature_catalog",
        ("creature_ids", "creature_names"),
    ),
}


__all__ = [
    "ColumnSpec",
    "CollectionSpec",
    "CatalogSpec",
    "COLLECTIONS",
    "CATALOGS",
]
