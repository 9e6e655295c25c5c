"""Shared base model definitions for Playpack domain objects."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PlaypackBaseModel(BaseModel):
    """Base model configured for Playpack-wide defaults.

    Instances are immutable; packing steps build new values instead of editing existing ones.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


__all__ = ["PlaypackBaseModel"]
