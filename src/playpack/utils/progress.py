"""Progress tracking types shared across CLI and services."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProcessingStage(str, Enum):
    """Lifecycle stages of a playlist operation."""

    FETCHING_IDS = "fetching_ids"
    FETCHING_DURATIONS = "fetching_durations"
    PACKING = "packing"
    COMPLETE = "complete"


class ProgressUpdate(BaseModel):
    """Structured progress payload for UI rendering and logging."""

    stage: ProcessingStage
    processed: int = Field(ge=0)
    total: Optional[int] = Field(default=None, ge=0)
    message: str
    playlist_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


ProgressHandler = Callable[[ProgressUpdate], None]


__all__ = ["ProcessingStage", "ProgressHandler", "ProgressUpdate"]
