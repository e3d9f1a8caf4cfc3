# src/tide/canon/details.py
"""Allow-list and coercion rules for the world details record.

A details update is a *patch*: a mapping holding only the fields the caller
sent. :func:`build_details_patch` filters an arbitrary payload down to the
allow-list and coerces each value into its column's domain, so the update
statement only ever touches those columns.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, TypedDict

from tide.models.validators import clamp, to_bool, to_float, to_int, to_text

FieldKind = Literal["text", "int", "float", "bool"]


class DetailsPatch(TypedDict, total=False):
    pitch: str | None
    suns_count: int
    day_hours: float | None
    year_days: int | None
    leap_rule: str | None
    planet_type: str
    planet_type_note: str | None
    size_class: str | None
    gravity_vs_earth: float | None
    water_pct: int | None
    tectonics: str
    source_statement: str | None
    corruption_level: str
    corruption_note: str | None
    tech_from: str
    tech_to: str
    player_safe_summary_on: bool


@dataclass(frozen=True)
class DetailField:
    """One column of the details record and the domain of its values."""

    name: str
    kind: FieldKind
    default: Any = None
    nullable: bool = True
    minimum: float | None = None
    maximum: float | None = None
    max_length: int | None = None

    def coerce(self, value: Any) -> Any:
        if self.kind == "bool":
            return to_bool(value, default=self.default)
        if self.kind == "text":
            result: Any = to_text(value, self.max_length)
        elif self.kind == "int":
            result = clamp(to_int(value), self.minimum, self.maximum)
        else:
            result = clamp(to_float(value), self.minimum, self.maximum)
        if result is None and not self.nullable:
            return self.default
        return result


DETAIL_FIELDS: dict[str, DetailField] = {
    f.name: f
    for f in (
        DetailField("pitch", "text", max_length=500),
        DetailField("suns_count", "int", default=1, nullable=False, minimum=0, maximum=5),
        DetailField("day_hours", "float"),
        DetailField("year_days", "int"),
        DetailField("leap_rule", "text", max_length=120),
        DetailField("planet_type", "text", default="Terrestrial", nullable=False, max_length=40),
        DetailField("planet_type_note", "text", max_length=120),
        DetailField("size_class", "text", max_length=40),
        DetailField("gravity_vs_earth", "float"),
        DetailField("water_pct", "int", minimum=0, maximum=100),
        DetailField("tectonics", "text", default="Medium", nullable=False, max_length=40),
        DetailField("source_statement", "text", max_length=500),
        DetailField("corruption_level", "text", default="Moderate", nullable=False, max_length=40),
        DetailField("corruption_note", "text", max_length=500),
        DetailField("tech_from", "text", default="Iron", nullable=False, max_length=40),
        DetailField("tech_to", "text", default="Industrial", nullable=False, max_length=40),
        DetailField("player_safe_summary_on", "bool", default=True, nullable=False),
    )
}


def build_details_patch(fields: Mapping[str, Any] | None) -> DetailsPatch:
    """Return the coerced subset of ``fields`` that names known columns.

    Unknown keys are dropped silently.
    """
    patch: dict[str, Any] = {}
    for key, value in (fields or {}).items():
        spec = DETAIL_FIELDS.get(key)
        if spec is not None:
            patch[key] = spec.coerce(value)
    return DetailsPatch(**patch)  # type: ignore[typeddict-item]


def details_defaults() -> DetailsPatch:
    """Values of a freshly created details record."""
    return DetailsPatch(**{name: f.default for name, f in DETAIL_FIELDS.items()})  # type: ignore[typeddict-item]


__all__ = [
    "DetailField",
    "DetailsPatch",
    "DETAIL_FIELDS",
    "build_details_patch",
    "details_defaults",
]
