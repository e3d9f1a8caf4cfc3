# src/tide/core/env.py
"""Environment configuration utilities."""

from __future__ import annotations

from ..config import TideConfig


def reload_config(env_file: str | None = ".env") -> TideConfig:
    """Build a fresh configuration from the environment and ``env_file``."""
    return TideConfig.load(env_file)


__all__ = ["reload_config"]
