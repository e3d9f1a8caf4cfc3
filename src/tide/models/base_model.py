# src/tide/models/base_model.py
"""Shared Pydantic base model for Tide read models and commands."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TideBaseModel(BaseModel):
    """Base model that reads ORM rows and ignores unexpected keys."""

    model_config = ConfigDict(
        from_attributes=True,
        extra="ignore",
        validate_assignment=True,
    )


__all__ = ["TideBaseModel"]
