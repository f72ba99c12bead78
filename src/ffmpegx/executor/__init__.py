"""ffmpeg process execution.

FFmpegRunner drives one ffmpeg subprocess and reports its lifecycle through
RunnerEvents; execute_ffmpeg wraps command building and listener cleanup
around a single run.
"""

from ffmpegx.executor.events import (
    END,
    ERROR,
    PROGRESS,
    START,
    STDERR,
    VALID_EVENTS,
    RunnerEvents,
)
from ffmpegx.executor.execute import execute_ffmpeg, listener_scope
from ffmpegx.executor.runner import ExecutionResult, FFmpegRunner

__all__ = [
    "END",
    "ERROR",
    "PROGRESS",
    "START",
    "STDERR",
    "VALID_EVENTS",
    "ExecutionResult",
    "FFmpegRunner",
    "RunnerEvents",
    "execute_ffmpeg",
    "listener_scope",
]
