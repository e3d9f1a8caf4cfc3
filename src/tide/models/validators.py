# src/tide/models/validators.py
"""Lenient coercion helpers for request payload values.

Browsers post numbers as strings, checkboxes as ``"on"`` and optional fields
as empty strings. These helpers normalise such values instead of rejecting
them; callers decide what ``None`` means for their field.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

_TRUE_VALUES = {"1", "true", "on", "yes"}
_FALSE_VALUES = {"0", "false", "off", "no"}

# signed 64-bit, the widest INTEGER both SQLite and PostgreSQL BIGINT store
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def to_float(value: Any, default: float | None = None) -> float | None:
    """Return ``value`` as a finite float, or ``default``."""
    if value is None or value == "" or isinstance(value, (Mapping, list, tuple)):
        return default
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if math.isfinite(number) else default


def to_int(value: Any, default: int | None = None) -> int | None:
    """Return ``value`` truncated toward zero, or ``default``.

    Integers outside the signed 64-bit range count as invalid.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        result = value
    else:
        number = to_float(value)
        if number is None:
            return default
        result = math.trunc(number)
    if not INT64_MIN <= result <= INT64_MAX:
        return default
    return result


def to_bool(value: Any, default: bool = False) -> bool:
    """Interpret checkbox-style values as a boolean."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return default


def clamp(value: float | None, lower: float | None, upper: float | None) -> Any:
    """Clamp ``value`` into ``[lower, upper]``; ``None`` passes through."""
    if value is None:
        return None
    if lower is not None and value < lower:
        return type(value)(lower)
    if upper is not None and value > upper:
        return type(value)(upper)
    return value


def to_text(value: Any, max_length: int | None = None) -> str | None:
    """Return ``value`` as a trimmed string cut to ``max_length``.

    Empty strings become ``None``. Mappings and lists are not text.
    """
    if value is None or isinstance(value, (Mapping, list, tuple, set)):
        return None
    text = str(value).strip()
    if not text:
        return None
    if max_length is not None:
        text = text[:max_length]
    return text


def as_list(value: Any) -> list[Any]:
    """Wrap a single value into a list; ``None`` and empty values become ``[]``."""
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def catalog_id(value: Any) -> int | None:
    """Return ``value`` as a catalog id if it is a finite, integral number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        return None
    return to_int(value)


__all__ = [
    "to_float",
    "to_int",
    "to_bool",
    "clamp",
    "to_text",
    "as_list",
    "catalog_id",
]
