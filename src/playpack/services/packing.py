"""Timeline construction and bucket packing for master playlists.

Every function here is pure apart from the random source it is handed: inputs are never mutated and
new :class:`~playpack.models.segment.Segment` values are built whenever offsets change.
"""

from __future__ import annotations

import math
import random
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from playpack.config.settings import TWELVE_HOURS_SECONDS
from playpack.models.segment import Bucket, MasterPlaylist, Segment

DURATION_BUFFER_SECONDS = 1

_ISO8601_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def parse_iso8601_duration(iso_duration: str) -> int:
    """Convert a ``PT[nH][nM][nS]`` duration into whole seconds.

    Parameters
    ----------
    iso_duration:
        Duration string as reported by the YouTube ``videos`` endpoint.

    Returns
    -------
    int
        ``hours * 3600 + minutes * 60 + seconds``. Absent components count as zero and strings
        that do not match at all yield ``0`` rather than raising.
    """

    match = _ISO8601_DURATION_PATTERN.search(iso_duration or "")
    if match is None:
        return 0

    hours, minutes, seconds = (int(group) if group else 0 for group in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def adjust_duration(seconds: int) -> int:
    """Return the half-up rounded midpoint of a ±1 second window around ``seconds``.

    The lower bound is clamped at zero, so the result equals the input for every positive duration
    and ``0`` becomes ``1``.
    """

    lower = max(0, seconds - DURATION_BUFFER_SECONDS)
    upper = seconds + DURATION_BUFFER_SECONDS
    return math.floor((lower + upper) / 2 + 0.5)


def normalize_duration(iso_duration: str) -> int:
    """Parse and adjust an ISO-8601 duration in one step."""

    return adjust_duration(parse_iso8601_duration(iso_duration))


def build_segments(items: Iterable[Tuple[str, int]], *, start_offset: int = 0) -> List[Segment]:
    """Lay ``(video_id, seconds)`` pairs end to end on a running clock.

    Order is preserved exactly and duplicate IDs are passed through. ``start_offset`` lets callers
    continue a timeline across several batches.
    """

    segments: List[Segment] = []
    clock = start_offset
    for video_id, duration in items:
        segments.append(Segment(video_id=video_id, start_offset=clock, end_offset=clock + duration))
        clock += duration
    return segments


def shuffle_segments(segments: Sequence[Segment], rng: Optional[random.Random] = None) -> List[Segment]:
    """Return a Fisher-Yates permutation of ``segments`` without touching the caller's sequence."""

    source = rng or random.Random()
    shuffled = list(segments)
    for i in range(len(shuffled) - 1, 0, -1):
        j = source.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def pack_segments(segments: Iterable[Segment], capacity: int = TWELVE_HOURS_SECONDS) -> List[Bucket]:
    """Greedily pack segments, in arrival order, into buckets of at most ``capacity`` seconds.

    A new bucket is opened whenever the next segment would overflow the current one. A segment
    longer than ``capacity`` is never split: it is placed into an empty bucket on its own. Offsets
    are rebased so each bucket starts at zero.
    """

    if capacity <= 0:
        raise ValueError("capacity must be positive")

    buckets: List[Bucket] = []
    current: List[Segment] = []
    clock = 0
    for segment in segments:
        duration = segment.duration
        if clock + duration > capacity and current:
            buckets.append(Bucket(segments=current))
            current = []
            clock = 0
        current.append(segment.rebased(clock))
        clock += duration

    if current:
        buckets.append(Bucket(segments=current))
    return buckets


def fill_gap(buckets: Sequence[Bucket], rng: Optional[random.Random] = None) -> List[Bucket]:
    """Top off an undersized final bucket with random items borrowed from the other buckets.

    The target is the floor of the mean bucket size by item count. Borrowed segments come from a
    donor pool holding every segment outside the final bucket; each pool entry is used at most once
    and donor buckets keep their own copies. Borrowed segments are appended contiguously after the
    final bucket's last offset.
    """

    result = list(buckets)
    if len(result) < 2:
        return result

    source = rng or random.Random()
    average_size = sum(len(bucket) for bucket in result) // len(result)
    last_segments = list(result[-1].segments)
    if len(last_segments) >= average_size:
        return result

    donor_pool = [segment for bucket in result[:-1] for segment in bucket.segments]
    while len(last_segments) < average_size and donor_pool:
        borrowed = donor_pool.pop(source.randrange(len(donor_pool)))
        start = last_segments[-1].end_offset if last_segments else 0
        last_segments.append(borrowed.rebased(start))

    result[-1] = Bucket(segments=last_segments)
    return result


def create_master_playlist(
    segments: Sequence[Segment],
    *,
    capacity: int = TWELVE_HOURS_SECONDS,
    rng: Optional[random.Random] = None,
) -> MasterPlaylist:
    """Pack already-ordered segments and balance the final bucket."""

    return MasterPlaylist(buckets=fill_gap(pack_segments(segments, capacity), rng=rng))


def chunk_ids(video_ids: Sequence[str], size: int) -> List[List[str]]:
    """Split ``video_ids`` into consecutive groups of at most ``size`` items."""

    if size <= 0:
        raise ValueError("size must be positive")
    return [list(video_ids[index : index + size]) for index in range(0, len(video_ids), size)]


__all__ = [
    "DURATION_BUFFER_SECONDS",
    "adjust_duration",
    "build_segments",
    "chunk_ids",
    "create_master_playlist",
    "fill_gap",
    "normalize_duration",
    "pack_segments",
    "parse_iso8601_duration",
    "shuffle_segments",
]
