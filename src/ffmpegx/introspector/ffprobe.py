"""ffprobe-based media probing.

probe() runs ffprobe once per file and requests the combined format and
streams report as JSON. There is no incremental probing.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
from pathlib import Path

from ffmpegx.exceptions import ProbeError, SpawnError
from ffmpegx.introspector.parsers import parse_probe_output
from ffmpegx.introspector.types import ProbeData

logger = logging.getLogger(__name__)

PROBE_ARGS = (
    "-v",
    "quiet",
    "-print_format",
    "json",
    "-show_format",
    "-show_streams",
)


def build_probe_command(ffprobe_path: str, path: str | Path) -> list[str]:
    """Return the full ffprobe argument vector for a file."""
    return [ffprobe_path, *PROBE_ARGS, str(path)]


def _default_ffprobe_path() -> str:
    from ffmpegx.config import get_config
    from ffmpegx.tools.detection import resolve_tool_path

    return resolve_tool_path("ffprobe", get_config().tools.ffprobe)


async def probe(path: str | Path, ffprobe_path: str | Path | None = None) -> ProbeData:
    """Probe a media file with ffprobe.

    Args:
        path: Media file to probe.
        ffprobe_path: Optional explicit ffprobe executable. If not provided,
            uses the configured path, then PATH and local directories.

    Returns:
        ProbeData with stream and format metadata.

    Raises:
        SpawnError: If ffprobe cannot be launched.
        ProbeError: If ffprobe exits non-zero or its output is not a valid
            JSON report.
    """
    executable = str(ffprobe_path) if ffprobe_path else _default_ffprobe_path()
    command = build_probe_command(executable, path)
    logger.debug("Probing: %s", shlex.join(command))

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise SpawnError(
            f"Failed to launch ffprobe ({executable}): {e}", executable
        ) from e

    stdout_bytes, stderr_bytes = await process.communicate()
    stdout = stdout_bytes.decode("utf-8", errors="replace")
    stderr = stderr_bytes.decode("utf-8", errors="replace")

    if process.returncode != 0:
        raise ProbeError(
            f"ffprobe exited with code {process.returncode} for {path}",
            stderr=stderr,
        )

    try:
        data = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ProbeError(
            f"Failed to parse ffprobe JSON output for {path}: {e}",
            stdout=stdout,
        ) from e

    return parse_probe_output(data, source=str(path))


class FFprobeIntrospector:
    """ffprobe client bound to one resolved executable.

    Resolves the ffprobe path once and reuses it for every probe.
    """

    def __init__(self, ffprobe_path: str | Path | None = None) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. If not provided,
                uses the configured path or discovery.
        """
        self.ffprobe_path = (
            str(ffprobe_path) if ffprobe_path else _default_ffprobe_path()
        )

    async def get_file_info(self, path: Path) -> ProbeData:
        """Probe a media file.

        Raises:
            ProbeError: If the file does not exist or cannot be probed.
            SpawnError: If ffprobe cannot be launched.
        """
        if not path.exists():
            raise ProbeError(f"File not found: {path}")
        return await probe(path, self.ffprobe_path)
