"""Logging helpers for Tide."""

import json
import logging
import os
import sys

from tide.config import config

_LOGGING_INITIALIZED = False

# attributes every LogRecord has; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach extras if present
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            try:
                json.dumps(value)
                data[key] = value
            except (TypeError, ValueError):
                data[key] = str(value)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def _str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _plain_handler(log_level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    return handler


def init_logging(
    level: str | None = None,
    format: str | None = None,
    include_trace: bool | None = None,
    *,
    force: bool = False,
) -> None:
    """
    Initialize global logging configuration for Tide.

    Environment variables:
      - TIDE_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL (default INFO)
      - TIDE_LOG_FORMAT: plain|rich|json (default: auto rich if available, else plain)
      - TIDE_LOG_INCLUDE_TRACE: bool (default False)
    """
    global _LOGGING_INITIALIZED
    if _LOGGING_INITIALIZED and not force:
        return

    env_level = os.getenv("TIDE_LOG_LEVEL", "").upper() or config.system.log_level
    env_format = os.getenv("TIDE_LOG_FORMAT", "") or config.system.log_format
    env_include_trace = os.getenv("TIDE_LOG_INCLUDE_TRACE")

    resolved_level = (level or env_level or "INFO").upper()
    resolved_format = (format or env_format or "").lower()
    resolved_include_trace = (
        include_trace
        if include_trace is not None
        else _str_to_bool(env_include_trace, default=config.system.log_include_trace)
    )

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = level_map.get(resolved_level, logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)
    for h in list(root.handlers):
        root.removeHandler(h)

    if not resolved_format:
        try:
            import rich  # noqa: F401

            resolved_format = "rich"
        except ImportError:
            resolved_format = "plain"

    handler: logging.Handler
    if resolved_format == "json":
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(JsonFormatter())
    elif resolved_format == "rich":
        try:
            from rich.logging import RichHandler

            handler = RichHandler(
                level=log_level,
                rich_tracebacks=resolved_include_trace,
                show_time=True,
                show_level=True,
                show_path=False,
                markup=False,
            )
            handler.setFormatter(logging.Formatter("%(message)s"))
        except ImportError:
            resolved_format = "plain"
            handler = _plain_handler(log_level)
    else:
        handler = _plain_handler(log_level)

    root.addHandler(handler)

    for noisy in ("uvicorn.access", "asyncio", "httpx", "aiosqlite"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    from tide import __version__

    logging.getLogger("tide.start").info(
        "Initializing logging | version=%s level=%s format=%s include_trace=%s",
        __version__,
        resolved_level,
        resolved_format,
        str(resolved_include_trace),
    )

    _LOGGING_INITIALIZED = True


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger with the provided name, or the package logger if None.
    """
    return logging.getLogger(name or "tide")


__all__ = ["JsonFormatter", "init_logging", "get_logger"]
