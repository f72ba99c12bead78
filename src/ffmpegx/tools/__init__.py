"""External tool helpers.

This module provides executable discovery for ffmpeg/ffprobe and parsing of
ffmpeg's stderr progress lines.
"""

from ffmpegx.tools.detection import (
    find_executable,
    local_search_dirs,
    resolve_tool_path,
)
from ffmpegx.tools.ffmpeg_progress import (
    PROGRESS_PREFIX,
    ProgressSample,
    parse_stderr_progress,
    parse_timestamp,
)

__all__ = [
    # Detection
    "find_executable",
    "local_search_dirs",
    "resolve_tool_path",
    # FFmpeg progress parsing
    "PROGRESS_PREFIX",
    "ProgressSample",
    "parse_stderr_progress",
    "parse_timestamp",
]
