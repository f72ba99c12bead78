"""Exception hierarchy for ffmpegx.

All errors raised by the command model, the process runner and the probe
client derive from FFmpegXError so callers can catch the whole family.
Frame sampler preconditions live in ffmpegx.frames.exceptions.
"""

from __future__ import annotations


class FFmpegXError(Exception):
    """Base class for ffmpegx errors."""

    pass


class ConfigurationError(FFmpegXError):
    """Raised when a command cannot be rendered into a valid argument list.

    Always raised locally, before any subprocess is spawned.
    """

    pass


class SpawnError(FFmpegXError):
    """Raised when an executable is missing or cannot be launched."""

    def __init__(self, message: str, executable: str) -> None:
        self.executable = executable
        super().__init__(message)


class ExecutionError(FFmpegXError):
    """Raised when ffmpeg exits with a non-zero status.

    Attributes:
        returncode: Process exit status (negative when killed by a signal).
        stderr: Everything ffmpeg wrote to stderr before exiting.
        command: Argument vector that was executed, executable first.
    """

    def __init__(
        self,
        returncode: int,
        stderr: str,
        command: list[str] | None = None,
    ) -> None:
        self.returncode = returncode
        self.stderr = stderr
        self.command = command or []
        super().__init__(f"ffmpeg exited with code {returncode}")


class ProbeError(FFmpegXError):
    """Raised when ffprobe fails or returns unusable output.

    Attributes:
        stderr: Captured stderr when ffprobe exited non-zero.
        stdout: Raw stdout when the JSON report could not be parsed.
    """

    def __init__(
        self,
        message: str,
        *,
        stderr: str | None = None,
        stdout: str | None = None,
    ) -> None:
        self.stderr = stderr
        self.stdout = stdout
        super().__init__(message)


class RunnerBusyError(FFmpegXError):
    """Raised when a runner is asked to execute while a process is live."""

    pass
