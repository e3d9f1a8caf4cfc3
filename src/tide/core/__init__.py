# src/tide/core/__init__.py
"""Core utilities for Tide."""

from .env import reload_config
from .logging import get_logger, init_logging
from .logs import EventType, Priority, get_event_logger

__all__ = [
    "reload_config",
    "init_logging",
    "get_logger",
    "get_event_logger",
    "EventType",
    "Priority",
]
