"""Async client for the YouTube Data API v3 endpoints used by Playpack."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

import httpx
from rich.console import Console

from playpack.config.settings import YOUTUBE_MAX_RESULTS, Settings, get_settings
from playpack.models.playlist import AvailabilityStatus, PlaylistEntry, PlaylistPage, VideoDuration


class NetworkError(RuntimeError):
    """Raised when a request fails at the transport layer or returns a non-success status."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MissingApiKeyError(ValueError):
    """Raised when no YouTube API key is configured."""


@dataclass(slots=True)
class ApiCallCounter:
    """Counts outbound API requests for display."""

    count: int = 0

    def increment(self) -> int:
        self.count += 1
        return self.count


class YouTubeDataClient:
    """Thin wrapper over ``playlistItems`` and ``videos`` list calls.

    Requests are issued one at a time; there are no retries and no timeouts.
    """

    def __init__(
        self,
        api_key: str,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        counter: Optional[ApiCallCounter] = None,
    ) -> None:
        if not api_key:
            raise MissingApiKeyError("A YouTube API key is required (set YOUTUBE_API_KEY or pass --api-key).")
        self._settings = settings or get_settings()
        self._console = console or Console()
        self._api_key = api_key
        self._base_url = str(self._settings.youtube_api_base_url).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=None)
        self.counter = counter or ApiCallCounter()

    async def __aenter__(self) -> "YouTubeDataClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""

        if self._owns_client:
            await self._http.aclose()

    @property
    def call_count(self) -> int:
        return self.counter.count

    async def fetch_page(self, playlist_id: str, page_token: Optional[str] = None) -> PlaylistPage:
        """Fetch one page of playlist items.

        Parameters
        ----------
        playlist_id:
            Identifier taken from the playlist URL's ``list`` parameter.
        page_token:
            Token returned by the previous page, or ``None`` for the first page.

        Returns
        -------
        PlaylistPage
            Items with their availability and the next page token, ``None`` on the last page.

        Raises
        ------
        NetworkError
            If the request fails or the API answers with a non-success status.
        """

        params = {
            "part": "contentDetails,status",
            "maxResults": str(self._settings.packing.page_size),
            "playlistId": playlist_id,
            "pageToken": page_token or "",
        }
        data = await self._get("playlistItems", params)

        entries: List[PlaylistEntry] = []
        for item in _as_list(data.get("items")):
            item_dict = _as_dict(item)
            video_id = _as_dict(item_dict.get("contentDetails")).get("videoId")
            if not isinstance(video_id, str) or not video_id:
                self._console.log(f"[yellow]Skipping playlist item without a video ID[/yellow] (playlist_id={playlist_id})")
                continue
            privacy_status = _as_dict(item_dict.get("status")).get("privacyStatus")
            entries.append(
                PlaylistEntry(
                    video_id=video_id,
                    status=AvailabilityStatus.from_privacy_status(
                        privacy_status if isinstance(privacy_status, str) else None
                    ),
                )
            )

        raw_next = data.get("nextPageToken")
        next_page_token = raw_next if isinstance(raw_next, str) and raw_next else None
        return PlaylistPage(items=entries, next_page_token=next_page_token)

    async def fetch_durations(self, video_ids: Sequence[str]) -> List[VideoDuration]:
        """Fetch ISO-8601 durations for up to 50 videos in a single call."""

        if len(video_ids) > YOUTUBE_MAX_RESULTS:
            raise ValueError(f"At most {YOUTUBE_MAX_RESULTS} video IDs may be requested at once.")
        if not video_ids:
            return []

        data = await self._get("videos", {"part": "contentDetails", "id": ",".join(video_ids)})

        durations: List[VideoDuration] = []
        for item in _as_list(data.get("items")):
            item_dict = _as_dict(item)
            video_id = item_dict.get("id")
            if not isinstance(video_id, str) or not video_id:
                continue
            iso_duration = _as_dict(item_dict.get("contentDetails")).get("duration")
            durations.append(
                VideoDuration(video_id=video_id, iso_duration=iso_duration if isinstance(iso_duration, str) else "")
            )
        return durations

    async def _get(self, endpoint: str, params: Mapping[str, str]) -> dict[str, Any]:
        self.counter.increment()
        url = f"{self._base_url}/{endpoint}"
        try:
            response = await self._http.get(url, params={**params, "key": self._api_key})
        except httpx.HTTPError as exc:
            raise NetworkError(f"Request to {endpoint} failed: {exc}") from exc

        if not response.is_success:
            raise NetworkError(
                f"Error: {response.reason_phrase or response.status_code} ({endpoint})",
                status_code=response.status_code,
            )
        try:
            return _as_dict(response.json())
        except ValueError as exc:
            raise NetworkError(f"Invalid JSON returned by {endpoint}") from exc


def _as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: object) -> list[Any]:
    return value if isinstance(value, list) else []


__all__ = ["ApiCallCounter", "MissingApiKeyError", "NetworkError", "YouTubeDataClient"]
