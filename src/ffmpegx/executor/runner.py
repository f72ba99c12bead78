"""Asynchronous ffmpeg process runner.

FFmpegRunner spawns ffmpeg, collects stdout bytes, streams stderr line by
line (emitting progress samples parsed from it) and resolves the run from
the exit code. A runner drives at most one process at a time.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import re
import shlex
import signal
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ffmpegx.exceptions import ExecutionError, RunnerBusyError, SpawnError
from ffmpegx.executor.events import END, ERROR, PROGRESS, START, STDERR, RunnerEvents
from ffmpegx.introspector.ffprobe import probe as probe_file
from ffmpegx.introspector.types import ProbeData
from ffmpegx.tools.ffmpeg_progress import parse_stderr_progress

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 65536

# SIGKILL does not exist on Windows
DEFAULT_KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)

# ffmpeg ends progress lines with a bare carriage return
_LINE_BREAK = re.compile(r"\r\n|\n|\r")


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a successful ffmpeg run.

    Attributes:
        stderr: Full stderr text.
        output: Concatenated stdout bytes, or None when stdout was empty.
        command: Argument vector that was executed, executable first.
        returncode: Process exit status (always 0 for a result).
    """

    stderr: str
    output: bytes | None
    command: list[str] = field(default_factory=list)
    returncode: int = 0


class _StderrLineSplitter:
    """Incrementally decode stderr chunks and split them into lines.

    A trailing partial line is held until the next chunk and is dropped at
    EOF if no line break ever ends it. A ``\\r`` at the end of a chunk is
    also held, since it may be the first half of ``\\r\\n``.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: bytes) -> tuple[str, list[str]]:
        """Consume a chunk.

        Returns:
            Tuple of (decoded text, completed lines).
        """
        text = self._decoder.decode(chunk)
        return text, self._split(self._pending + text, final=False)

    def flush(self) -> tuple[str, list[str]]:
        """Finish decoding at EOF.

        Returns:
            Tuple of (decoded text, lines completed by a held ``\\r``).
        """
        text = self._decoder.decode(b"", final=True)
        return text, self._split(self._pending + text, final=True)

    def _split(self, buffer: str, *, final: bool) -> list[str]:
        hold = ""
        if not final and buffer.endswith("\r"):
            # Might be the first half of \r\n; wait for the next chunk
            buffer, hold = buffer[:-1], "\r"
        parts = _LINE_BREAK.split(buffer)
        tail = parts.pop()
        self._pending = "" if final else tail + hold
        return parts


def _default_tool_path(name: str) -> str:
    from ffmpegx.config import get_config
    from ffmpegx.tools.detection import resolve_tool_path

    tools = get_config().tools
    configured = tools.ffmpeg if name == "ffmpeg" else tools.ffprobe
    return resolve_tool_path(name, configured)


class FFmpegRunner:
    """Runs ffmpeg as a subprocess and reports its lifecycle.

    Example:
        runner = FFmpegRunner()
        runner.events.on("progress", lambda p: print(p.time))
        result = await runner.execute(["-i", "in.mp4", "out.webm"])
    """

    def __init__(
        self,
        ffmpeg_path: str | Path | None = None,
        ffprobe_path: str | Path | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            ffmpeg_path: Explicit ffmpeg executable. If not provided, uses
                the configured path, then discovery, then "ffmpeg".
            ffprobe_path: Explicit ffprobe executable, resolved the same way.
        """
        self._ffmpeg_path = str(ffmpeg_path) if ffmpeg_path else None
        self._ffprobe_path = str(ffprobe_path) if ffprobe_path else None
        self._process: asyncio.subprocess.Process | None = None
        self._busy = False
        self.events = RunnerEvents()

    @property
    def ffmpeg_path(self) -> str:
        if self._ffmpeg_path is None:
            self._ffmpeg_path = _default_tool_path("ffmpeg")
        return self._ffmpeg_path

    @property
    def ffprobe_path(self) -> str:
        if self._ffprobe_path is None:
            self._ffprobe_path = _default_tool_path("ffprobe")
        return self._ffprobe_path

    @property
    def is_running(self) -> bool:
        """True from the start of execute() until the run settles."""
        return self._busy

    @property
    def pid(self) -> int | None:
        """Process id of the live ffmpeg process, if one has been spawned."""
        return self._process.pid if self._process is not None else None

    async def probe(
        self, path: str | Path, ffprobe_path: str | Path | None = None
    ) -> ProbeData:
        """Probe a media file with this runner's ffprobe (or an override)."""
        return await probe_file(path, ffprobe_path or self.ffprobe_path)

    def kill(self, sig: int = DEFAULT_KILL_SIGNAL) -> None:
        """Send a signal to the live process, if any.

        The run still settles through the normal exit path, so a killed
        process surfaces as an ExecutionError with a negative return code.
        """
        process = self._process
        if process is None or process.returncode is not None:
            return
        logger.debug("Sending signal %s to ffmpeg (pid %s)", sig, process.pid)
        try:
            process.send_signal(sig)
        except ProcessLookupError:
            logger.debug("ffmpeg (pid %s) already exited", process.pid)

    async def execute(self, args: Sequence[str]) -> ExecutionResult:
        """Run ffmpeg with the given arguments.

        Args:
            args: Arguments after the executable, typically
                FFmpegCommand.render().

        Returns:
            ExecutionResult with stdout bytes and stderr text.

        Raises:
            RunnerBusyError: If this runner already has a live process.
            SpawnError: If ffmpeg cannot be launched.
            ExecutionError: If ffmpeg exits with a non-zero status.
        """
        if self._busy:
            raise RunnerBusyError("Runner already has a running ffmpeg process")

        self._busy = True
        try:
            return await self._run(args)
        finally:
            self._busy = False
            self._process = None

    async def _run(self, args: Sequence[str]) -> ExecutionResult:
        command = [self.ffmpeg_path, *(str(a) for a in args)]
        command_line = shlex.join(command)
        self.events.emit(START, command_line)
        logger.debug("Spawning: %s", command_line)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            error = SpawnError(
                f"Failed to launch ffmpeg ({command[0]}): {e}", command[0]
            )
            self.events.emit(ERROR, error)
            raise error from e

        self._process = process
        output, stderr_parts = await asyncio.gather(
            self._read_stdout(process),
            self._read_stderr(process),
        )
        returncode = await process.wait()
        self._process = None

        stderr = "".join(stderr_parts)
        logger.debug(
            "ffmpeg exited with code %d",
            returncode,
            extra={"returncode": returncode, "stdout_bytes": len(output)},
        )

        if returncode != 0:
            error = ExecutionError(returncode, stderr, command)
            self.events.emit(ERROR, error)
            raise error

        result = ExecutionResult(
            stderr=stderr,
            output=bytes(output) or None,
            command=command,
            returncode=returncode,
        )
        self.events.emit(END, result)
        return result

    async def _read_stdout(self, process: asyncio.subprocess.Process) -> bytearray:
        assert process.stdout is not None
        buffer = bytearray()
        while chunk := await process.stdout.read(READ_CHUNK_SIZE):
            buffer.extend(chunk)
        return buffer

    async def _read_stderr(self, process: asyncio.subprocess.Process) -> list[str]:
        assert process.stderr is not None
        splitter = _StderrLineSplitter()
        parts: list[str] = []
        while chunk := await process.stderr.read(READ_CHUNK_SIZE):
            text, lines = splitter.feed(chunk)
            parts.append(text)
            self._dispatch_lines(lines)
        text, lines = splitter.flush()
        parts.append(text)
        self._dispatch_lines(lines)
        return parts

    def _dispatch_lines(self, lines: list[str]) -> None:
        for line in lines:
            self.events.emit(STDERR, line)
            sample = parse_stderr_progress(line)
            if sample is not None:
                self.events.emit(PROGRESS, sample)
