"""Playlist workflows: collect IDs, resolve durations, and build master playlists."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from rich.console import Console

from playpack.config.settings import Settings, get_settings
from playpack.models.playlist import AvailabilityStatus
from playpack.models.segment import MasterPlaylist, Segment
from playpack.services.packing import (
    build_segments,
    chunk_ids,
    create_master_playlist,
    normalize_duration,
    shuffle_segments,
)
from playpack.services.youtube_api import YouTubeDataClient
from playpack.utils.progress import ProcessingStage, ProgressHandler, ProgressUpdate
from playpack.utils.validation import extract_playlist_id


@dataclass(slots=True)
class PlaylistSession:
    """State accumulated for one playlist across the fetch and pack operations.

    Lists are filled incrementally, so whatever was collected before a failure stays available.
    """

    playlist_url: str
    available_video_ids: List[str] = field(default_factory=list)
    unavailable_video_ids: List[str] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)

    @property
    def playlist_id(self) -> str:
        return extract_playlist_id(self.playlist_url)


class PlaylistService:
    """Runs the playlist operations against a :class:`YouTubeDataClient`."""

    def __init__(
        self,
        client: YouTubeDataClient,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
    ) -> None:
        self._client = client
        self._settings = settings or get_settings()
        self._console = console or Console()

    async def fetch_video_ids(
        self,
        session: PlaylistSession,
        *,
        on_progress: Optional[ProgressHandler] = None,
    ) -> PlaylistSession:
        """Page through the playlist and split its items by availability.

        Parameters
        ----------
        session:
            Session whose ID lists are reset and then filled in arrival order.
        on_progress:
            Optional callback invoked after every item.

        Returns
        -------
        PlaylistSession
            The same session, for chaining.

        Raises
        ------
        playpack.utils.validation.InvalidPlaylistURLError
            If the session URL carries no playlist ID.
        playpack.services.youtube_api.NetworkError
            If any page request fails. Items from earlier pages remain on the session.
        """

        playlist_id = session.playlist_id
        session.available_video_ids.clear()
        session.unavailable_video_ids.clear()

        page_token: Optional[str] = None
        while True:
            page = await self._client.fetch_page(playlist_id, page_token)
            for entry in page.items:
                if entry.status is AvailabilityStatus.AVAILABLE:
                    session.available_video_ids.append(entry.video_id)
                else:
                    session.unavailable_video_ids.append(entry.video_id)
                processed = len(session.available_video_ids) + len(session.unavailable_video_ids)
                self._emit_progress(
                    on_progress,
                    ProcessingStage.FETCHING_IDS,
                    processed,
                    None,
                    f"Available: {len(session.available_video_ids)} | "
                    f"Unavailable: {len(session.unavailable_video_ids)}",
                    playlist_id,
                )
            page_token = page.next_page_token
            if page_token is None:
                break

        self._console.log(
            f"Collected {len(session.available_video_ids)} available and "
            f"{len(session.unavailable_video_ids)} unavailable video IDs (playlist_id={playlist_id})"
        )
        return session

    async def fetch_video_durations(
        self,
        session: PlaylistSession,
        *,
        on_progress: Optional[ProgressHandler] = None,
    ) -> List[Segment]:
        """Resolve durations for the available videos and lay them on a running clock.

        IDs are fetched first when the session has none. Durations are requested in chunks of at
        most ``duration_batch_size`` IDs, one chunk at a time, in playlist order.
        """

        if not session.available_video_ids:
            await self.fetch_video_ids(session, on_progress=on_progress)

        playlist_id = session.playlist_id
        total = len(session.available_video_ids)
        session.segments = []
        clock = 0
        for chunk in chunk_ids(session.available_video_ids, self._settings.packing.duration_batch_size):
            durations = await self._client.fetch_durations(chunk)
            requested = set(chunk)
            missing = requested - {item.video_id for item in durations}
            if missing:
                self._console.log(f"[yellow]{len(missing)} video(s) returned no duration and were skipped[/yellow]")
            if len(requested) < len(chunk):
                self._console.log(
                    f"[yellow]{len(chunk) - len(requested)} duplicate video ID(s) in one batch "
                    "were returned once by the API[/yellow]"
                )
            pairs = [(item.video_id, normalize_duration(item.iso_duration)) for item in durations]
            for segment in build_segments(pairs, start_offset=clock):
                session.segments.append(segment)
                clock = segment.end_offset
                self._emit_progress(
                    on_progress,
                    ProcessingStage.FETCHING_DURATIONS,
                    len(session.segments),
                    total,
                    f"{segment.video_id}: {segment.start_offset}s - {segment.end_offset}s",
                    playlist_id,
                )

        return list(session.segments)

    async def build_master_playlist(
        self,
        session: PlaylistSession,
        *,
        rng: Optional[random.Random] = None,
        on_progress: Optional[ProgressHandler] = None,
    ) -> MasterPlaylist:
        """Fetch durations, shuffle, pack into fixed-capacity buckets, and balance the last one."""

        segments = await self.fetch_video_durations(session, on_progress=on_progress)
        capacity = self._settings.packing.bucket_capacity_seconds
        self._emit_progress(
            on_progress,
            ProcessingStage.PACKING,
            0,
            len(segments),
            f"Packing {len(segments)} videos into {capacity}s buckets",
            session.playlist_id,
        )

        source = rng or random.Random()
        master = create_master_playlist(shuffle_segments(segments, source), capacity=capacity, rng=source)

        self._console.log(f"Packed {len(segments)} videos into {len(master)} bucket(s)")
        self._emit_progress(
            on_progress,
            ProcessingStage.COMPLETE,
            master.item_count,
            master.item_count,
            "Master playlist ready",
            session.playlist_id,
        )
        return master

    def _emit_progress(
        self,
        callback: Optional[ProgressHandler],
        stage: ProcessingStage,
        processed: int,
        total: Optional[int],
        message: str,
        playlist_id: Optional[str],
    ) -> None:
        """Emit a progress update to the supplied callback if one exists."""

        if callback is None:
            return
        callback(
            ProgressUpdate(
                stage=stage,
                processed=processed,
                total=total,
                message=message,
                playlist_id=playlist_id,
            )
        )


__all__ = ["PlaylistService", "PlaylistSession"]
