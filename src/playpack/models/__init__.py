"""Domain models for playlists, segments, and packed master playlists."""

from playpack.models.playlist import AvailabilityStatus, PlaylistEntry, PlaylistPage, VideoDuration
from playpack.models.segment import Bucket, MasterPlaylist, Segment

__all__ = [
    "AvailabilityStatus",
    "Bucket",
    "MasterPlaylist",
    "PlaylistEntry",
    "PlaylistPage",
    "Segment",
    "VideoDuration",
]
