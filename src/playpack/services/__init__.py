"""Service layer for the Playpack application."""

from playpack.services.playlist import PlaylistService, PlaylistSession
from playpack.services.youtube_api import ApiCallCounter, MissingApiKeyError, NetworkError, YouTubeDataClient

__all__ = [
    "ApiCallCounter",
    "MissingApiKeyError",
    "NetworkError",
    "PlaylistService",
    "PlaylistSession",
    "YouTubeDataClient",
]
