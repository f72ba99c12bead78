"""Command construction for ffmpeg invocations."""

from ffmpegx.command.builder import (
    FORMAT_FLAG,
    INPUT_FLAG,
    LOG_LEVELS,
    PRESETS,
    STDOUT_PIPE,
    FFmpegCommand,
)

__all__ = [
    "FFmpegCommand",
    "FORMAT_FLAG",
    "INPUT_FLAG",
    "LOG_LEVELS",
    "PRESETS",
    "STDOUT_PIPE",
]
