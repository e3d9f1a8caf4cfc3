"""Configuration package for Tide."""

from .config import DatabaseConfig, SystemConfig, TideConfig, config

__all__ = ["DatabaseConfig", "SystemConfig", "TideConfig", "config"]
