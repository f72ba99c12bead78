"""ffmpegx - build, run, and post-process ffmpeg invocations from Python.

Public API:

- FFmpegCommand: ordered global/input/output argument builder
- FFmpegRunner: asyncio subprocess runner with progress and lifecycle events
- execute_ffmpeg: configure-then-run helper with listener cleanup
- probe: ffprobe JSON probing into typed ProbeData
- VideoFrameExtractor: uniform frame sampling with two-stage seeking
"""

from ffmpegx.command import FFmpegCommand
from ffmpegx.exceptions import (
    ConfigurationError,
    ExecutionError,
    FFmpegXError,
    ProbeError,
    RunnerBusyError,
    SpawnError,
)
from ffmpegx.executor import (
    ExecutionResult,
    FFmpegRunner,
    RunnerEvents,
    execute_ffmpeg,
)
from ffmpegx.frames import (
    FrameExtractionError,
    NoVideoStreamError,
    NotInitializedError,
    UnknownFrameCountError,
    VideoFrameExtractor,
)
from ffmpegx.introspector import ProbeData, ProbeFormat, ProbeStream, probe
from ffmpegx.tools import ProgressSample, parse_stderr_progress

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Command model
    "FFmpegCommand",
    # Execution
    "ExecutionResult",
    "FFmpegRunner",
    "RunnerEvents",
    "execute_ffmpeg",
    # Probing
    "ProbeData",
    "ProbeFormat",
    "ProbeStream",
    "probe",
    # Progress
    "ProgressSample",
    "parse_stderr_progress",
    # Frame sampling
    "VideoFrameExtractor",
    # Errors
    "FFmpegXError",
    "ConfigurationError",
    "SpawnError",
    "ExecutionError",
    "ProbeError",
    "RunnerBusyError",
    "FrameExtractionError",
    "NoVideoStreamError",
    "UnknownFrameCountError",
    "NotInitializedError",
]
