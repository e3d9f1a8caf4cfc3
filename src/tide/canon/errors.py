# src/tide/canon/errors.py
"""Errors raised by the world-details persistence layer."""

from __future__ import annotations


class TideError(Exception):
    """Base class for errors that reach the HTTP boundary."""

    status_code = 500


class ValidationError(TideError):
    """A required identifier or the request shape is missing or invalid."""

    status_code = 400


class NotFound(TideError):
    """The referenced world does not exist."""

    status_code = 404


class PersistenceError(TideError):
    """A transaction failed and was rolled back."""

    status_code = 500


__all__ = ["TideError", "ValidationError", "NotFound", "PersistenceError"]
