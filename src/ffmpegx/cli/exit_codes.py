"""Exit codes for the ffmpegx CLI and the errors that produce them.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Invalid arguments or configuration
    20-29: Input file problems
    30-39: Missing tools
    40-49: ffmpeg run failures
    50-59: Unreadable ffprobe output
"""

from enum import IntEnum

from ffmpegx.exceptions import ExecutionError, ProbeError, SpawnError
from ffmpegx.frames.exceptions import FrameExtractionError, NoVideoStreamError


class ExitCode(IntEnum):
    """Exit codes for ffmpegx CLI commands."""

    SUCCESS = 0

    GENERAL_ERROR = 1
    INTERRUPTED = 2

    INVALID_ARGUMENTS = 10
    CONFIG_ERROR = 11

    TARGET_NOT_FOUND = 20
    NO_VIDEO_STREAM = 22

    TOOL_NOT_AVAILABLE = 30

    OPERATION_FAILED = 40
    NO_FRAMES_EXTRACTED = 41

    PARSE_ERROR = 51


# First matching type wins, so subclasses come before their bases
_ERROR_EXIT_CODES: tuple[tuple[type[BaseException], ExitCode], ...] = (
    (KeyboardInterrupt, ExitCode.INTERRUPTED),
    (SpawnError, ExitCode.TOOL_NOT_AVAILABLE),
    (ProbeError, ExitCode.PARSE_ERROR),
    (NoVideoStreamError, ExitCode.NO_VIDEO_STREAM),
    (FrameExtractionError, ExitCode.OPERATION_FAILED),
    (ExecutionError, ExitCode.OPERATION_FAILED),
)


def exit_code_for(error: BaseException) -> ExitCode:
    """Map an error raised by a command to its exit code."""
    for error_type, code in _ERROR_EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.GENERAL_ERROR
