"""Validation helpers for YouTube playlist URLs and identifiers."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse


class InvalidPlaylistURLError(ValueError):
    """Raised when a provided URL does not carry a playlist identifier."""


_PLAYLIST_ID_PATTERN = re.compile(r"^[0-9A-Za-z_-]+$")


def extract_playlist_id(url: str) -> str:
    """Return the ``list`` query parameter of a playlist URL, or a raw playlist ID unchanged."""

    stripped = url.strip()
    if _PLAYLIST_ID_PATTERN.fullmatch(stripped):
        return stripped

    parsed = urlparse(stripped)
    if parsed.scheme in {"http", "https"} and parsed.netloc:
        candidates = parse_qs(parsed.query).get("list", [])
        if candidates and _PLAYLIST_ID_PATTERN.fullmatch(candidates[0]):
            return candidates[0]

    raise InvalidPlaylistURLError(f"Invalid YouTube playlist URL or ID: {url!r}")


__all__ = ["InvalidPlaylistURLError", "extract_playlist_id"]
