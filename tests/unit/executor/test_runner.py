"""Tests for FFmpegRunner.

The running interpreter stands in for ffmpeg: each test passes
``-c <script>`` so the real asyncio subprocess path is exercised.
"""

import asyncio
import shlex
import signal
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from ffmpegx.exceptions import ExecutionError, RunnerBusyError, SpawnError
from ffmpegx.executor.runner import ExecutionResult, FFmpegRunner, _StderrLineSplitter
from ffmpegx.tools.ffmpeg_progress import ProgressSample


def _script(*lines: str) -> list[str]:
    return ["-c", "\n".join(("import sys, time", *lines))]


@pytest.fixture
def runner(python_tool: str) -> FFmpegRunner:
    return FFmpegRunner(ffmpeg_path=python_tool, ffprobe_path="ffprobe-test")


class TestStderrLineSplitter:
    """Tests for incremental stderr line splitting."""

    def test_mixed_terminators(self) -> None:
        """Should split on \\r\\n, \\n and a bare \\r."""
        splitter = _StderrLineSplitter()
        _, lines = splitter.feed(b"a\r\nb\nc\rd")
        assert lines == ["a", "b", "c"]
        assert splitter.flush()[1] == []

    def test_partial_line_carried_over(self) -> None:
        """Should join a line split across chunks."""
        splitter = _StderrLineSplitter()
        assert splitter.feed(b"fra")[1] == []
        lines = splitter.feed(b"me=1 time=00:00:00.04\n")[1]
        assert lines == ["frame=1 time=00:00:00.04"]

    def test_crlf_split_across_chunks(self) -> None:
        """Should not emit an empty line when \\r\\n straddles two chunks."""
        splitter = _StderrLineSplitter()
        assert splitter.feed(b"first\r")[1] == []
        assert splitter.feed(b"\nsecond\n")[1] == ["first", "second"]
        assert splitter.flush()[1] == []

    def test_bare_cr_at_chunk_end(self) -> None:
        """Should emit the line once the next chunk or EOF shows no \\n follows."""
        splitter = _StderrLineSplitter()
        assert splitter.feed(b"one\r")[1] == []
        assert splitter.feed(b"two\r")[1] == ["one"]
        assert splitter.flush()[1] == ["two"]

    def test_unterminated_tail_not_emitted(self) -> None:
        """Should keep text without a line break out of the emitted lines."""
        splitter = _StderrLineSplitter()
        text, lines = splitter.feed(b"a\nfinal-partial")
        assert lines == ["a"]
        assert text == "a\nfinal-partial"
        assert splitter.flush() == ("", [])

    def test_multibyte_character_split(self) -> None:
        """Should decode UTF-8 sequences split across chunks."""
        splitter = _StderrLineSplitter()
        encoded = "título\n".encode()
        first, _ = splitter.feed(encoded[:2])
        second, lines = splitter.feed(encoded[2:])
        assert first + second == "título\n"
        assert lines == ["título"]

    def test_invalid_bytes_replaced(self) -> None:
        """Should replace undecodable bytes instead of failing."""
        splitter = _StderrLineSplitter()
        _, lines = splitter.feed(b"bad \xff byte\n")
        assert lines == ["bad � byte"]


class TestExecuteSuccess:
    """Tests for successful runs."""

    @pytest.mark.asyncio
    async def test_collects_stdout_and_stderr(self, runner: FFmpegRunner) -> None:
        """Should return stdout bytes and the full stderr text."""
        args = _script(
            "sys.stdout.buffer.write(b'\\x89PNG' * 3)",
            "sys.stderr.write('line one\\nline two\\n')",
        )

        result = await runner.execute(args)

        assert isinstance(result, ExecutionResult)
        assert result.output == b"\x89PNG" * 3
        assert result.stderr == "line one\nline two\n"
        assert result.returncode == 0
        assert result.command == [runner.ffmpeg_path, *args]
        assert not runner.is_running

    @pytest.mark.asyncio
    async def test_large_output_is_ordered(self, runner: FFmpegRunner) -> None:
        """Should concatenate many stdout chunks in order."""
        result = await runner.execute(
            _script("sys.stdout.buffer.write(bytes(range(256)) * 2048)")
        )
        assert result.output == bytes(range(256)) * 2048

    @pytest.mark.asyncio
    async def test_empty_stdout_is_none(self, runner: FFmpegRunner) -> None:
        """Should report output=None when nothing was written to stdout."""
        result = await runner.execute(_script("pass"))
        assert result.output is None
        assert result.stderr == ""

    @pytest.mark.asyncio
    async def test_lifecycle_events(self, runner: FFmpegRunner) -> None:
        """Should emit start, stderr lines, progress and end in order."""
        events: list[tuple[str, object]] = []
        for name in ("start", "stderr", "progress", "end", "error"):
            runner.events.on(name, lambda p, name=name: events.append((name, p)))

        args = _script(
            "sys.stderr.write('Input #0, mov\\n')",
            "sys.stderr.write('frame=   10 fps=5.0 q=2.0 size=N/A time=00:00:00.40 "
            "bitrate=N/A speed=1.0x\\r')",
            "sys.stderr.write('frame=   20 fps=5.0 q=2.0 size=N/A time=00:00:00.80 "
            "bitrate=N/A speed=1.0x\\r')",
            "sys.stderr.write('done')",
        )
        result = await runner.execute(args)

        names = [name for name, _ in events]
        assert names == [
            "start",
            "stderr",
            "stderr",
            "progress",
            "stderr",
            "progress",
            "end",
        ]
        assert events[0][1] == shlex.join([runner.ffmpeg_path, *args])
        progress = [p for name, p in events if name == "progress"]
        assert all(isinstance(p, ProgressSample) for p in progress)
        assert [p.frame for p in progress] == [10, 20]
        assert ("stderr", "done") not in events
        assert result.stderr.endswith("\rdone")
        assert events[-1] == ("end", result)

    @pytest.mark.asyncio
    async def test_unterminated_stderr_tail(self, runner: FFmpegRunner) -> None:
        """Should keep an unterminated tail in stderr text but not emit it."""
        lines: list[str] = []
        runner.events.on("stderr", lines.append)

        result = await runner.execute(_script("sys.stderr.write('a\\nfinal-partial')"))

        assert lines == ["a"]
        assert result.stderr == "a\nfinal-partial"

    @pytest.mark.asyncio
    async def test_listener_exception_does_not_break_run(
        self, runner: FFmpegRunner
    ) -> None:
        """Should finish the run even if a listener raises."""

        def broken(payload):
            raise RuntimeError("listener bug")

        runner.events.on("stderr", broken)
        runner.events.on("end", broken)

        result = await runner.execute(_script("sys.stderr.write('x\\n')"))
        assert result.stderr == "x\n"

    @pytest.mark.asyncio
    async def test_runner_is_reusable(self, runner: FFmpegRunner) -> None:
        """Should accept a new execute once the previous one settled."""
        await runner.execute(_script("pass"))
        result = await runner.execute(_script("sys.stdout.write('again')"))
        assert result.output == b"again"


class TestExecuteFailure:
    """Tests for failing runs."""

    @pytest.mark.asyncio
    async def test_non_zero_exit(self, runner: FFmpegRunner) -> None:
        """Should raise ExecutionError with code and stderr, and emit error."""
        errors = []
        ends = []
        runner.events.on("error", errors.append)
        runner.events.on("end", ends.append)

        with pytest.raises(ExecutionError) as exc_info:
            await runner.execute(
                _script("sys.stderr.write('Conversion failed!\\n')", "sys.exit(1)")
            )

        error = exc_info.value
        assert error.returncode == 1
        assert error.stderr == "Conversion failed!\n"
        assert str(error) == "ffmpeg exited with code 1"
        assert errors == [error]
        assert ends == []
        assert not runner.is_running

    @pytest.mark.asyncio
    async def test_spawn_failure(self, temp_dir: Path) -> None:
        """Should raise SpawnError and emit error when ffmpeg is missing."""
        runner = FFmpegRunner(ffmpeg_path=temp_dir / "no-ffmpeg")
        starts = []
        errors = []
        runner.events.on("start", starts.append)
        runner.events.on("error", errors.append)

        with pytest.raises(SpawnError) as exc_info:
            await runner.execute(["-version"])

        assert len(starts) == 1
        assert errors == [exc_info.value]
        assert not runner.is_running


class TestRunnerState:
    """Tests for busy state and kill()."""

    @pytest.mark.asyncio
    async def test_busy_while_running_and_kill(self, runner: FFmpegRunner) -> None:
        """Should reject a second execute, and surface kill as a failure."""
        task = asyncio.create_task(runner.execute(_script("time.sleep(30)")))
        for _ in range(200):
            if runner.pid is not None:
                break
            await asyncio.sleep(0.01)
        assert runner.is_running
        assert runner.pid is not None

        with pytest.raises(RunnerBusyError):
            await runner.execute(_script("pass"))

        runner.kill()
        with pytest.raises(ExecutionError) as exc_info:
            await task
        assert exc_info.value.returncode == -signal.SIGKILL
        assert not runner.is_running

    @pytest.mark.asyncio
    async def test_overlapping_execute_rejected_before_spawn(
        self, runner: FFmpegRunner
    ) -> None:
        """Should reject a second execute started in the same loop tick."""
        first, second = await asyncio.gather(
            runner.execute(_script("pass")),
            runner.execute(_script("pass")),
            return_exceptions=True,
        )
        assert first.returncode == 0
        assert isinstance(second, RunnerBusyError)
        assert not runner.is_running

    def test_kill_without_process_is_noop(self, runner: FFmpegRunner) -> None:
        """Should do nothing when no process is live."""
        runner.kill()
        runner.kill(signal.SIGTERM)
        assert not runner.is_running
        assert runner.pid is None


class TestRunnerPaths:
    """Tests for tool path resolution and probe delegation."""

    def test_explicit_paths(self, python_tool: str) -> None:
        """Should use explicit paths as given."""
        runner = FFmpegRunner(ffmpeg_path=python_tool, ffprobe_path=Path("/x/ffprobe"))
        assert runner.ffmpeg_path == python_tool
        assert runner.ffprobe_path == "/x/ffprobe"

    def test_configured_path(self, python_tool: str) -> None:
        """Should fall back to the configured ffmpeg path."""
        with patch.dict("os.environ", {"FFMPEGX_FFMPEG_PATH": python_tool}):
            assert FFmpegRunner().ffmpeg_path == python_tool

    @pytest.mark.asyncio
    async def test_probe_uses_runner_ffprobe(self, runner: FFmpegRunner) -> None:
        """Should delegate to the probe client with the runner's ffprobe."""
        with patch(
            "ffmpegx.executor.runner.probe_file", new=AsyncMock(return_value="data")
        ) as mock_probe:
            assert await runner.probe("clip.mp4") == "data"
            mock_probe.assert_awaited_once_with("clip.mp4", "ffprobe-test")

            await runner.probe("clip.mp4", ffprobe_path="/other/ffprobe")
            mock_probe.assert_awaited_with("clip.mp4", "/other/ffprobe")
