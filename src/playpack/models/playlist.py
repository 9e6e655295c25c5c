"""Pydantic models describing YouTube Data API playlist responses."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from playpack.models.base import PlaypackBaseModel

AVAILABLE_PRIVACY_STATUSES = frozenset({"private", "unlisted", "public"})


class AvailabilityStatus(str, Enum):
    """Whether a playlist item can be looked up for its duration."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @classmethod
    def from_privacy_status(cls, privacy_status: Optional[str]) -> "AvailabilityStatus":
        """Map a raw ``status.privacyStatus`` value; anything unrecognised is unavailable."""

        if privacy_status in AVAILABLE_PRIVACY_STATUSES:
            return cls.AVAILABLE
        return cls.UNAVAILABLE


class PlaylistEntry(PlaypackBaseModel):
    """A single item from a ``playlistItems`` page."""

    video_id: str = Field(min_length=1)
    status: AvailabilityStatus = AvailabilityStatus.UNAVAILABLE


class PlaylistPage(PlaypackBaseModel):
    """One page of playlist items plus the token for the next page, if any."""

    items: List[PlaylistEntry] = Field(default_factory=list)
    next_page_token: Optional[str] = None


class VideoDuration(PlaypackBaseModel):
    """Raw ISO-8601 duration reported by the ``videos`` endpoint."""

    video_id: str = Field(min_length=1)
    iso_duration: str = ""


__all__ = ["AVAILABLE_PRIVACY_STATUSES", "AvailabilityStatus", "PlaylistEntry", "PlaylistPage", "VideoDuration"]
