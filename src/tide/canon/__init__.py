# src/tide/canon/__init__.py
"""Persistence layer for world aggregates."""

from .db import Database, create_database
from .errors import NotFound, PersistenceError, TideError, ValidationError
from .service import WorldDetailsService, coerce_world_id, load_catalog_file

__all__ = [
    "Database",
    "create_database",
    "TideError",
    "ValidationError",
    "NotFound",
    "PersistenceError",
    "WorldDetailsService",
    "coerce_world_id",
    "load_catalog_file",
]
