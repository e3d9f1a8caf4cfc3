"""HTTP interface for the world-details service."""

from .main import create_app

__all__ = ["create_app"]
