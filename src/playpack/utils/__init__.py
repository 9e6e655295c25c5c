"""Utility helpers shared across Playpack modules."""

from playpack.utils.progress import ProcessingStage, ProgressHandler, ProgressUpdate
from playpack.utils.validation import InvalidPlaylistURLError, extract_playlist_id

__all__ = ["InvalidPlaylistURLError", "ProcessingStage", "ProgressHandler", "ProgressUpdate", "extract_playlist_id"]
