"""External tool discovery.

Resolves the ffmpeg and ffprobe executables. Resolution order:

1. An explicitly configured path (argument, environment, or config file)
2. The system PATH
3. Conventional local directories (``./bin`` and the working directory)
4. The bare tool name, left to the operating system to resolve at spawn
"""

import logging
import os
import platform
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def _executable_name(name: str) -> str:
    if platform.system() == "Windows" and not name.lower().endswith(".exe"):
        return f"{name}.exe"
    return name


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def local_search_dirs() -> list[Path]:
    """Return the local directories searched after PATH."""
    cwd = Path.cwd()
    return [cwd / "bin", cwd]


def find_executable(name: str) -> Path | None:
    """Find a tool executable on PATH or in the local search directories.

    Args:
        name: Tool name (e.g., "ffmpeg").

    Returns:
        Absolute path to the executable, or None if not found.
    """
    which_result = shutil.which(name)
    if which_result:
        return Path(which_result).resolve()

    exe_name = _executable_name(name)
    for directory in local_search_dirs():
        candidate = directory / exe_name
        if _is_executable(candidate):
            return candidate.resolve()

    return None


def resolve_tool_path(name: str, configured_path: Path | str | None = None) -> str:
    """Resolve the command used to launch a tool.

    Args:
        name: Tool name (e.g., "ffprobe").
        configured_path: Optional configured path override.

    Returns:
        The configured path if usable, else the discovered path, else the
        bare tool name.
    """
    if configured_path:
        configured = Path(configured_path).expanduser()
        if configured.is_file():
            return str(configured)
        logger.warning("Configured path for %s is not a file: %s", name, configured)

    found = find_executable(name)
    if found is not None:
        return str(found)

    logger.debug("%s not found locally, deferring to the OS search path", name)
    return name
