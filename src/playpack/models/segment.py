"""Pydantic models for timeline segments and packed master playlists."""

from __future__ import annotations

from typing import List

from pydantic import Field, model_validator

from playpack.models.base import PlaypackBaseModel


class Segment(PlaypackBaseModel):
    """A video placed on a continuous timeline.

    Offsets are whole seconds. ``end_offset - start_offset`` is the video's normalised duration and
    survives every rebase performed by the packer and balancer.
    """

    video_id: str = Field(min_length=1, serialization_alias="videoId")
    start_offset: int = Field(ge=0, serialization_alias="startTime")
    end_offset: int = Field(ge=0, serialization_alias="endTime")

    @model_validator(mode="after")
    def _check_ordering(self) -> "Segment":
        if self.end_offset < self.start_offset:
            raise ValueError("end_offset must not precede start_offset")
        return self

    @property
    def duration(self) -> int:
        """Length of the segment in seconds."""

        return self.end_offset - self.start_offset

    def rebased(self, start_offset: int) -> "Segment":
        """Return a copy of this segment moved to ``start_offset`` with the same duration."""

        return Segment(video_id=self.video_id, start_offset=start_offset, end_offset=start_offset + self.duration)


class Bucket(PlaypackBaseModel):
    """One fixed-capacity sub-playlist whose segments start at offset zero."""

    segments: List[Segment] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def total_duration(self) -> int:
        """Sum of segment durations in seconds."""

        return sum(segment.duration for segment in self.segments)

    @property
    def end_offset(self) -> int:
        """Offset at which the next appended segment should start."""

        return self.segments[-1].end_offset if self.segments else 0

    def video_ids(self) -> List[str]:
        return [segment.video_id for segment in self.segments]


class MasterPlaylist(PlaypackBaseModel):
    """Ordered collection of buckets produced by a single packing run."""

    buckets: List[Bucket] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.buckets)

    @property
    def item_count(self) -> int:
        return sum(len(bucket) for bucket in self.buckets)

    def to_export_payload(self) -> list[list[dict[str, object]]]:
        """Nested ``[[{videoId, startTime, endTime}, ...], ...]`` structure used for exports."""

        return [
            [segment.model_dump(mode="json", by_alias=True) for segment in bucket.segments] for bucket in self.buckets
        ]


__all__ = ["Bucket", "MasterPlaylist", "Segment"]
