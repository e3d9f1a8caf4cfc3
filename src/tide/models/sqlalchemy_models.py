# src/tide/models/sqlalchemy_models.py
"""SQLAlchemy ORM models for worlds, their details and child collections."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from .base import Base


class WorldSQL(Base):
    """The root of every world aggregate.

    A world owns one details record and a set of named collections, and is
    removed together with everything it owns.
    """

    __tablename__ = "worlds"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())


class WorldDetailsSQL(Base):
    """Scalar profile of a world (1:1 with :class:`WorldSQL`).

    Covers the elevator pitch, calendar basics, planet profile, magic
    source and corruption, technology window and the player-safe summary
    toggle. ``world_id`` is unique so a world never owns two rows.
    """

    __tablename__ = "world_details"
    id = Column(Integer, primary_key=True, autoincrement=True)
    world_id = Column(
        Integer,
        ForeignKey("worlds.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    pitch = Column(Text)
    suns_count = Column(Integer, nullable=False, default=1)
    day_hours = Column(Float)
    year_days = Column(Integer)
    leap_rule = Column(Text)
    planet_type = Column(String(40), nullable=False, default="Terrestrial")
    planet_type_note = Column(Text)
    size_class = Column(String(40))
    gravity_vs_earth = Column(Float)
    water_pct = Column(Integer)
    tectonics = Column(String(40), nullable=False, default="Medium")
    source_statement = Column(Text)
    corruption_level = Column(String(40), nullable=False, default="Moderate")
    corruption_note = Column(Text)
    tech_from = Column(String(40), nullable=False, default="Iron")
    tech_to = Column(String(40), nullable=False, default="Industrial")
    player_safe_summary_on = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())


class WorldChildMixin:
    """Surrogate key plus the owning world for collection tables."""

    id = Column(Integer, primary_key=True, autoincrement=True)

    @declared_attr
    def world_id(cls):  # noqa: N805
        return Column(
            Integer,
            ForeignKey("worlds.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class WorldTagSQL(WorldChildMixin, Base):
    """Free-form tag attached to a world."""

    __tablename__ = "world_tags"
    value = Column(String(80), nullable=False)


class WorldMoonSQL(WorldChildMixin, Base):
    """A moon in the world's sky, in the order the author listed them."""

    __tablename__ = "world_moons"
    name = Column(String(40), nullable=False)
    cycle_days = Column(Integer)
    omen = Column(String(120))
    order_index = Column(Integer, nullable=False, default=0)


class WorldMonthSQL(WorldChildMixin, Base):
    """Calendar month with its length in days."""

    __tablename__ = "world_months"
    name = Column(String(30), nullable=False)
    days = Column(Integer, nullable=False, default=30)
    order_index = Column(Integer, nullable=False, default=0)


class WorldWeekdaySQL(WorldChildMixin, Base):
    __tablename__ = "world_weekdays"
    value = Column(String(20), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)


class WorldClimateSQL(WorldChildMixin, Base):
    __tablename__ = "world_climates"
    value = Column(String(80), nullable=False)


class WorldMagicSystemSQL(WorldChildMixin, Base):
    """Built-in magic system enabled for a world."""

    __tablename__ = "world_magic_systems"
    system = Column(String(80), nullable=False)


class WorldMagicCustomSQL(WorldChildMixin, Base):
    """Author-defined magic system name."""

    __tablename__ = "world_magic_customs"
    name = Column(String(80), nullable=False)


class WorldUnbreakableSQL(WorldChildMixin, Base):
    """Canon rule that must never be broken, ranked by the author."""

    __tablename__ = "world_unbreakables"
    value = Column(String(120), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)


class WorldBanSQL(WorldChildMixin, Base):
    __tablename__ = "world_bans"
    value = Column(String(80), nullable=False)


class WorldToneFlagSQL(WorldChildMixin, Base):
    __tablename__ = "world_tone_flags"
    flag = Column(String(80), nullable=False)


class WorldRealmSQL(WorldChildMixin, Base):
    """A cosmological realm and how it touches the material world.

    ``travel`` describes how mortals cross over; ``bleed`` describes how the
    realm leaks into the world when nobody is crossing.
    """

    __tablename__ = "world_realms"
    name = Column(String(40), nullable=False)
    type = Column(String(40))
    traits = Column(String(80))
    travel = Column(String(80))
    bleed = Column(String(80))
    order_index = Column(Integer, nullable=False, default=0)


class WorldLanguageSQL(WorldChildMixin, Base):
    __tablename__ = "world_languages"
    value = Column(String(80), nullable=False)


class WorldDeitySQL(WorldChildMixin, Base):
    __tablename__ = "world_deities"
    value = Column(String(80), nullable=False)


class WorldFactionSQL(WorldChildMixin, Base):
    __tablename__ = "world_factions"
    value = Column(String(80), nullable=False)


class RaceSQL(Base):
    """Playable race shared by every world."""

    __tablename__ = "races"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())


class CreatureSQL(Base):
    """Creature shared by every world."""

    __tablename__ = "creatures"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())


class WorldRaceCatalogSQL(Base):
    """Association between a world and the races available in it."""

    __tablename__ = "world_race_catalog"
    world_id = Column(
        Integer, ForeignKey("worlds.id", ondelete="CASCADE"), primary_key=True
    )
    race_id = Column(
        Integer, ForeignKey("races.id", ondelete="CASCADE"), primary_key=True
    )


class WorldCreatureCatalogSQL(Base):
    """Association between a world and the creatures found in it."""

    __tablename__ = "world_creature_catalog"
    world_id = Column(
        Integer, ForeignKey("worlds.id", ondelete="CASCADE"), primary_key=True
    )
    creature_id = Column(
        Integer, ForeignKey("creatures.id", ondelete="CASCADE"), primary_key=True
    )


__all__ = [
    "WorldSQL",
    "WorldDetailsSQL",
    "WorldChildMixin",
    "WorldTagSQL",
    "WorldMoonSQL",
    "WorldMonthSQL",
    "WorldWeekdaySQL",
    "WorldClimateSQL",
    "WorldMagicSystemSQL",
    "WorldMagicCustomSQL",
    "WorldUnbreakableSQL",
    "WorldBanSQL",
    "WorldToneFlagSQL",
    "WorldRealmSQL",
    "WorldLanguageSQL",
    "WorldDeitySQL",
    "WorldFactionSQL",
    "RaceSQL",
    "CreatureSQL",
    "WorldRaceCatalogSQL",
    "WorldCreatureCatalogSQL",
]
