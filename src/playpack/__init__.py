"""Playpack: pack YouTube playlists into bounded-duration master playlists."""

__version__ = "0.1.0"

__all__ = ["__version__"]
