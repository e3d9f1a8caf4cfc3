# src/tide/core/logs.py
"""Structured event logging for persistence and request handling.

Events carry a type, a priority and free-form metadata. They are kept in a
bounded in-memory history (useful for diagnostics and tests) and forwarded to
the standard ``tide.events`` logger so they end up wherever
:func:`tide.core.logging.init_logging` routes output.
"""

from __future__ import annotations

import functools
import inspect
import json
import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, cast
from uuid import uuid4

from tide.config import config


class EventType(Enum):
    """Event types for structured logging."""

    SYSTEM = "system"
    REQUEST = "request"
    DATABASE_OPERATION = "database_operation"
    WARNING = "warning"
    ERROR = "error"
    ERROR_HANDLING_START = "error_handling_start"
    ERROR_ROLLBACK = "error_rollback"


class Priority(Enum):
    """Event priority levels."""

    CRITICAL = 1  # Errors, system failures
    HIGH = 2  # Schema changes, deletes
    NORMAL = 3  # Regular reads and writes
    LOW = 4  # Debug chatter


_PRIORITY_LEVELS = {
    Priority.CRITICAL: logging.ERROR,
    Priority.HIGH: logging.INFO,
    Priority.NORMAL: logging.INFO,
    Priority.LOW: logging.DEBUG,
}


@dataclass
class StructuredLogEvent:
    """Structured log event with metadata."""

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: float = field(default_factory=time.time)
    event_type: EventType = EventType.SYSTEM
    priority: Priority = Priority.NORMAL
    message: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "event_id": self.event_id,
            "timestamp": self.timestamp,
            "event_type": self.event_type.value,
            "priority": self.priority.value,
            "priority_name": self.priority.name,
            "message": self.message,
            "metadata": self.metadata,
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), default=str)


class EventLogger:
    """Records structured events and mirrors them to standard logging."""

    def __init__(self, max_events: int = 1000) -> None:
        self.max_events = max_events
        self._events: deque[StructuredLogEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()
        self._logger = logging.getLogger("tide.events")

    def log(
        self,
        event_type: EventType,
        message: str,
        priority: Priority = Priority.NORMAL,
        *,
        metadata: dict[str, Any] | None = None,
    ) -> StructuredLogEvent:
        """Record ``message`` as a structured event and return it."""
        event = StructuredLogEvent(
            event_type=event_type,
            priority=priority,
            message=message,
            metadata=dict(metadata or {}),
        )
        with self._lock:
            self._events.append(event)

        level = _PRIORITY_LEVELS.get(priority, logging.INFO)
        if event_type in (EventType.ERROR, EventType.ERROR_ROLLBACK):
            level = logging.ERROR
        elif event_type == EventType.WARNING:
            level = max(level, logging.WARNING)
        self._logger.log(
            level,
            "[%s] %s%s",
            event_type.value,
            message,
            self._format_key_metadata(event),
            extra={"event_id": event.event_id, "event_type": event_type.value},
        )
        return event

    @staticmethod
    def _format_key_metadata(event: StructuredLogEvent) -> str:
        key_info = []
        for key in ("operation", "table", "world_id", "rows"):
            if key in event.metadata:
                key_info.append(f"{key}={event.metadata[key]}")
        if "duration" in event.metadata:
            key_info.append(f"{event.metadata['duration'] * 1000:.1f}ms")
        if "success" in event.metadata:
            key_info.append("ok" if event.metadata["success"] else "failed")
        return f" <{' | '.join(key_info)}>" if key_info else ""

    def log_error_handling_start(
        self,
        error_type: str,
        error_msg: str,
        context: str,
        metadata: dict[str, Any] | None = None,
    ) -> StructuredLogEvent:
        """Log the start of error handling for a failed operation."""
        details = dict(metadata or {})
        details.update({"error_type": error_type, "error_message": error_msg})
        return self.log(
            EventType.ERROR_HANDLING_START,
            f"{context} failed with {error_type}: {error_msg}",
            Priority.CRITICAL,
            metadata=details,
        )

    def get_events(
        self,
        event_type: EventType | None = None,
        limit: int | None = None,
    ) -> list[StructuredLogEvent]:
        """Return recorded events, newest last."""
        with self._lock:
            events = list(self._events)
        if event_type is not None:
            events = [e for e in events if e.event_type == event_type]
        if limit is not None:
            events = events[-limit:]
        return events

    def clear(self) -> None:
        """Forget every recorded event."""
        with self._lock:
            self._events.clear()


# Global event logger instance
_event_logger: EventLogger | None = None


def get_event_logger() -> EventLogger:
    """Get global event logger instance."""
    global _event_logger
    if _event_logger is None:
        _event_logger = EventLogger(max_events=config.system.event_history)
    return _event_logger


def log_calls(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorate ``func`` to log entry, exit and failures at the DEBUG level."""
    event_logger = get_event_logger()

    def _failed(start_time: float, exc: Exception) -> None:
        event_logger.log(
            EventType.ERROR,
            f"Error in {func.__qualname__}: {exc}",
            Priority.CRITICAL,
            metadata={
                "function": func.__qualname__,
                "error_type": type(exc).__name__,
                "duration": time.time() - start_time,
            },
        )

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
            except Exception as exc:
                _failed(start_time, exc)
                raise
            event_logger.log(
                EventType.SYSTEM,
                f"Exiting {func.__qualname__}",
                Priority.LOW,
                metadata={"function": func.__qualname__, "duration": time.time() - start_time},
            )
            return result

        return cast(Callable[..., Any], async_wrapper)

    @functools.wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            _failed(start_time, exc)
            raise
        event_logger.log(
            EventType.SYSTEM,
            f"Exiting {func.__qualname__}",
            Priority.LOW,
            metadata={"function": func.__qualname__, "duration": time.time() - start_time},
        )
        return result

    return cast(Callable[..., Any], sync_wrapper)


__all__ = [
    "EventLogger",
    "StructuredLogEvent",
    "EventType",
    "Priority",
    "get_event_logger",
    "log_calls",
]
