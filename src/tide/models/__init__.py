"""Pydantic and SQLAlchemy models for worlds and their collections."""

from .base import Base  # Import SQLAlchemy Base
from .base_model import TideBaseModel
from .sqlalchemy_models import (
    CreatureSQL,
    RaceSQL,
    WorldBanSQL,
    WorldChildMixin,
    WorldClimateSQL,
    WorldCreatureCatalogSQL,
    WorldDeitySQL,
    WorldDetailsSQL,
    WorldFactionSQL,
    WorldLanguageSQL,
    WorldMagicCustomSQL,
    WorldMagicSystemSQL,
    WorldMonthSQL,
    WorldMoonSQL,
    WorldRaceCatalogSQL,
    WorldRealmSQL,
    WorldSQL,
    WorldTagSQL,
    WorldToneFlagSQL,
    WorldUnbreakableSQL,
    WorldWeekdaySQL,
)
from .world import (
    CatalogEntry,
    MagicSystems,
    Month,
    Moon,
    OrderedValue,
    Realm,
    WorldAggregate,
    WorldDetails,
    WorldSummary,
)

__all__ = [
    "TideBaseModel",
    "WorldSummary",
    "WorldDetails",
    "Moon",
    "Month",
    "OrderedValue",
    "Realm",
    "MagicSystems",
    "CatalogEntry",
    "WorldAggregate",
    "Base",  # Export SQLAlchemy Base
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
