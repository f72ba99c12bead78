"""Frame index selection and seek planning.

Pure functions used by VideoFrameExtractor. They carry no I/O and are
tested directly.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

# Seconds to back off before a target when the stream's GOP size is unknown
DEFAULT_KEYFRAME_INTERVAL = 5.0

# Typical encoder GOP length in frames (x264/x265 default keyint)
ASSUMED_GOP_FRAMES = 250

MIN_KEYFRAME_INTERVAL = 2.0


@dataclass(frozen=True)
class SeekPlan:
    """Two-stage seek for one target timestamp.

    Attributes:
        coarse_seconds: Input-side ``-ss``; a fast, keyframe-aligned jump
            landing at or before the target.
        offset_seconds: Output-side ``-ss``; decoded, frame-accurate
            distance from the coarse position to the target.
    """

    coarse_seconds: float
    offset_seconds: float


def indices_by_count(total_frames: int, requested: int) -> list[int]:
    """Pick ``requested`` frame indices spread uniformly over the video.

    Each index sits at the middle of its equal-width segment. At most
    ``total_frames`` indices are returned, and none when ``requested`` is 0.

    Raises:
        ValueError: If ``total_frames`` is not positive or ``requested`` is
            negative.
    """
    if total_frames <= 0:
        raise ValueError(f"total_frames must be positive, got {total_frames}")
    if requested < 0:
        raise ValueError(f"requested must not be negative, got {requested}")
    if requested == 0:
        return []

    count = min(requested, total_frames)
    interval = total_frames / count
    return [math.floor(i * interval + interval / 2) for i in range(count)]


def indices_by_rate(
    total_frames: int, source_fps: float, target_fps: float
) -> list[int]:
    """Pick every Nth frame so the result approximates ``target_fps``.

    The step is ``round(source_fps / target_fps)``, never below 1, so a
    target above the source rate yields every frame.

    Raises:
        ValueError: If any argument is not positive.
    """
    if total_frames <= 0:
        raise ValueError(f"total_frames must be positive, got {total_frames}")
    if source_fps <= 0 or target_fps <= 0:
        raise ValueError("source_fps and target_fps must be positive")

    step = max(1, round(source_fps / target_fps))
    return list(range(0, total_frames, step))


def dedupe_indices(indices: Iterable[int]) -> list[int]:
    """Drop repeated indices, keeping the first occurrence."""
    return list(dict.fromkeys(indices))


def estimate_keyframe_interval(r_frame_rate: float | None) -> float:
    """Estimate the keyframe spacing in seconds from the stream rate.

    Assumes a 250-frame GOP, clamped to at least 2 seconds. Streams with
    longer GOPs make the coarse seek land after the target's keyframe, which
    costs accuracy; shorter GOPs only cost extra decoding.
    """
    if r_frame_rate is None or r_frame_rate <= 0:
        return DEFAULT_KEYFRAME_INTERVAL
    return max(MIN_KEYFRAME_INTERVAL, ASSUMED_GOP_FRAMES / r_frame_rate)


def plan_seek(target_seconds: float, keyframe_interval: float) -> SeekPlan:
    """Split a target timestamp into coarse and precise seek offsets.

    ``coarse_seconds + offset_seconds == target_seconds`` and
    ``offset_seconds <= keyframe_interval``.
    """
    coarse = max(0.0, target_seconds - keyframe_interval)
    return SeekPlan(coarse_seconds=coarse, offset_seconds=target_seconds - coarse)
