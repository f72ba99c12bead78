"""Frame sampling from video files."""

from ffmpegx.frames.exceptions import (
    FrameExtractionError,
    NotInitializedError,
    NoVideoStreamError,
    UnknownFrameCountError,
)
from ffmpegx.frames.indices import (
    DEFAULT_KEYFRAME_INTERVAL,
    SeekPlan,
    dedupe_indices,
    estimate_keyframe_interval,
    indices_by_count,
    indices_by_rate,
    plan_seek,
)
from ffmpegx.frames.sampler import VideoFrameExtractor

__all__ = [
    "DEFAULT_KEYFRAME_INTERVAL",
    "FrameExtractionError",
    "NoVideoStreamError",
    "NotInitializedError",
    "SeekPlan",
    "UnknownFrameCountError",
    "VideoFrameExtractor",
    "dedupe_indices",
    "estimate_keyframe_interval",
    "indices_by_count",
    "indices_by_rate",
    "plan_seek",
]
