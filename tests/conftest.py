"""Shared fixtures: an in-memory YouTube Data API and isolated settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import httpx
import pytest
from rich.console import Console

from playpack.config.settings import PackingConfig, Settings, get_settings
from playpack.services.youtube_api import ApiCallCounter, YouTubeDataClient

PlaylistRow = Tuple[str, Optional[str]]


@dataclass
class FakeYouTubeApi:
    """Serves ``playlistItems`` pages and ``videos`` durations from memory.

    ``pages`` holds ``(video_id, privacy_status)`` rows per page; a ``None`` status omits the field.
    ``fail_on_call`` makes the n-th request (1-based) answer with HTTP 500.
    """

    pages: List[List[PlaylistRow]]
    durations: Dict[str, str] = field(default_factory=dict)
    fail_on_call: Optional[int] = None
    requests: List[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_on_call is not None and len(self.requests) == self.fail_on_call:
            return httpx.Response(500, json={"error": {"message": "backend failure"}})

        if request.url.path.endswith("/playlistItems"):
            token = request.url.params.get("pageToken") or "0"
            index = int(token)
            items = []
            for video_id, privacy_status in self.pages[index] if self.pages else []:
                item: dict[str, object] = {"contentDetails": {"videoId": video_id}}
                if privacy_status is not None:
                    item["status"] = {"privacyStatus": privacy_status}
                items.append(item)
            body: dict[str, object] = {"items": items}
            if index + 1 < len(self.pages):
                body["nextPageToken"] = str(index + 1)
            return httpx.Response(200, json=body)

        if request.url.path.endswith("/videos"):
            ids = request.url.params["id"].split(",")
            items = [
                {"id": video_id, "contentDetails": {"duration": self.durations[video_id]}}
                for video_id in dict.fromkeys(ids)
                if video_id in self.durations
            ]
            return httpx.Response(200, json={"items": items})

        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls_to(self, endpoint: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path.endswith(f"/{endpoint}")]


def make_client(
    api: FakeYouTubeApi,
    *,
    settings: Settings,
    counter: Optional[ApiCallCounter] = None,
    console: Optional[Console] = None,
) -> YouTubeDataClient:
    return YouTubeDataClient(
        "test-key",
        settings=settings,
        console=console or Console(quiet=True),
        http_client=httpx.AsyncClient(transport=api.transport()),
        counter=counter,
    )


def public_rows(video_ids: Sequence[str]) -> List[PlaylistRow]:
    return [(video_id, "public") for video_id in video_ids]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    monkeypatch.delenv("YOUTUBE_API_BASE_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(packing=PackingConfig())


@pytest.fixture
def quiet_console() -> Console:
    return Console(quiet=True)
