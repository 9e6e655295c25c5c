"""Tests for the YouTube Data API client."""

from __future__ import annotations

import asyncio

import httpx
import pytest
from rich.console import Console

from conftest import FakeYouTubeApi, make_client
from playpack.config.settings import Settings
from playpack.models.playlist import AvailabilityStatus
from playpack.services.youtube_api import ApiCallCounter, MissingApiKeyError, NetworkError, YouTubeDataClient


def test_fetch_page_maps_privacy_statuses(settings: Settings) -> None:
    api = FakeYouTubeApi(
        pages=[
            [
                ("a", "public"),
                ("b", "unlisted"),
                ("c", "private"),
                ("d", "privacyStatusUnspecified"),
                ("e", None),
            ]
        ]
    )
    client = make_client(api, settings=settings)

    page = asyncio.run(client.fetch_page("PL1"))

    assert [(entry.video_id, entry.status) for entry in page.items] == [
        ("a", AvailabilityStatus.AVAILABLE),
        ("b", AvailabilityStatus.AVAILABLE),
        ("c", AvailabilityStatus.AVAILABLE),
        ("d", AvailabilityStatus.UNAVAILABLE),
        ("e", AvailabilityStatus.UNAVAILABLE),
    ]
    assert page.next_page_token is None


def test_fetch_page_sends_expected_query(settings: Settings) -> None:
    api = FakeYouTubeApi(pages=[[("a", "public")], [("b", "public")]])
    client = make_client(api, settings=settings)

    page = asyncio.run(client.fetch_page("PL1", "1"))

    params = api.requests[0].url.params
    assert api.requests[0].url.path == "/youtube/v3/playlistItems"
    assert params["part"] == "contentDetails,status"
    assert params["maxResults"] == "50"
    assert params["playlistId"] == "PL1"
    assert params["pageToken"] == "1"
    assert params["key"] == "test-key"
    assert [entry.video_id for entry in page.items] == ["b"]


def test_fetch_page_returns_next_token(settings: Settings) -> None:
    api = FakeYouTubeApi(pages=[[("a", "public")], [("b", "public")]])
    client = make_client(api, settings=settings)

    page = asyncio.run(client.fetch_page("PL1"))

    assert page.next_page_token == "1"
    assert api.requests[0].url.params["pageToken"] == ""


def test_fetch_durations_joins_ids(settings: Settings) -> None:
    api = FakeYouTubeApi(pages=[], durations={"a": "PT1M", "b": "PT2S"})
    client = make_client(api, settings=settings)

    durations = asyncio.run(client.fetch_durations(["a", "b", "missing"]))

    assert api.requests[0].url.params["id"] == "a,b,missing"
    assert api.requests[0].url.params["part"] == "contentDetails"
    assert [(item.video_id, item.iso_duration) for item in durations] == [("a", "PT1M"), ("b", "PT2S")]


def test_fetch_durations_limits_batch_size(settings: Settings) -> None:
    api = FakeYouTubeApi(pages=[])
    client = make_client(api, settings=settings)

    with pytest.raises(ValueError):
        asyncio.run(client.fetch_durations([f"id{index}" for index in range(51)]))
    assert asyncio.run(client.fetch_durations([])) == []
    assert api.requests == []
    assert client.call_count == 0


def test_every_request_is_counted(settings: Settings) -> None:
    api = FakeYouTubeApi(pages=[[("a", "public")]], durations={"a": "PT1S"})
    counter = ApiCallCounter()
    client = make_client(api, settings=settings, counter=counter)

    async def scenario() -> None:
        await client.fetch_page("PL1")
        await client.fetch_durations(["a"])

    asyncio.run(scenario())

    assert counter.count == 2
    assert client.call_count == 2


def test_error_status_raises_network_error(settings: Settings) -> None:
    api = FakeYouTubeApi(pages=[[("a", "public")]], fail_on_call=1)
    client = make_client(api, settings=settings)

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(client.fetch_page("PL1"))

    assert excinfo.value.status_code == 500
    assert client.call_count == 1


def test_transport_failure_raises_network_error(settings: Settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = YouTubeDataClient(
        "test-key",
        settings=settings,
        console=Console(quiet=True),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(client.fetch_page("PL1"))

    assert excinfo.value.status_code is None
    assert client.call_count == 1


def test_missing_api_key_is_rejected(settings: Settings) -> None:
    with pytest.raises(MissingApiKeyError):
        YouTubeDataClient("", settings=settings)
