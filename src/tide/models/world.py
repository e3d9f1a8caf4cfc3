# src/tide/models/world.py
"""Read models returned by the world-details service."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base_model import TideBaseModel


class WorldSummary(TideBaseModel):
    id: int
    name: str
    description: str | None = None


class WorldDetails(TideBaseModel):
    """Scalar details of a world with the defaults of a fresh record."""

    pitch: str | None = None
    suns_count: int = 1
    day_hours: float | None = None
    year_days: int | None = None
    leap_rule: str | None = None
    planet_type: str = "Terrestrial"
    planet_type_note: str | None = None
    size_class: str | None = None
    gravity_vs_earth: float | None = None
    water_pct: int | None = None
    tectonics: str = "Medium"
    source_statement: str | None = None
    corruption_level: str = "Moderate"
    corruption_note: str | None = None
    tech_from: str = "Iron"
    tech_to: str = "Industrial"
    player_safe_summary_on: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Moon(TideBaseModel):
    name: str
    cycle_days: int | None = None
    omen: str | None = None
    order_index: int = 0


class Month(TideBaseModel):
    name: str
    days: int = 30
    order_index: int = 0


class OrderedValue(TideBaseModel):
    """A plain string that keeps its author-given position."""

    value: str
    order_index: int = 0


class Realm(TideBaseModel):
    name: str
    type: str | None = None
    traits: str | None = None
    travel: str | None = None
    bleed: str | None = None
    order_index: int = 0


class MagicSystems(TideBaseModel):
    builtins: list[str] = Field(default_factory=list)
    customs: list[str] = Field(default_factory=list)


class CatalogEntry(TideBaseModel):
    """A race or creature as seen from a world's catalog."""

    id: int
    name: str


class WorldAggregate(TideBaseModel):
    """Everything the world-details screen edits, in one object.

    Unordered collections are plain string lists sorted by value; ordered
    ones keep ``order_index`` so clients can round-trip them.
    """

    world: WorldSummary
    details: WorldDetails
    tags: list[str] = Field(default_factory=list)
    moons: list[Moon] = Field(default_factory=list)
    months: list[Month] = Field(default_factory=list)
    weekdays: list[OrderedValue] = Field(default_factory=list)
    climates: list[str] = Field(default_factory=list)
    magic: MagicSystems = Field(default_factory=MagicSystems)
    unbreakables: list[OrderedValue] = Field(default_factory=list)
    bans: list[str] = Field(default_factory=list)
    tone_flags: list[str] = Field(default_factory=list)
    realms: list[Realm] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    deities: list[str] = Field(default_factory=list)
    factions: list[str] = Field(default_factory=list)
    race_catalog: list[CatalogEntry] = Field(default_factory=list)
    creature_catalog: list[CatalogEntry] = Field(default_factory=list)


__all__ = [
    "WorldSummary",
    "WorldDetails",
    "Moon",
    "Month",
    "OrderedValue",
    "Realm",
    "MagicSystems",
    "CatalogEntry",
    "WorldAggregate",
]
