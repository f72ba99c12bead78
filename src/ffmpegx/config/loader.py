"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. Keyword overrides (CLI flags, explicit arguments)
2. Environment variables (FFMPEGX_*)
3. Config file (~/.ffmpegx/config.toml)
4. Default values

Environment variables:
- FFMPEGX_FFMPEG_PATH: Path to ffmpeg executable
- FFMPEGX_FFPROBE_PATH: Path to ffprobe executable
- FFMPEGX_CONFIG_PATH: Path to config file (overrides default location)
- FFMPEGX_LOG_LEVEL / FFMPEGX_LOG_FILE / FFMPEGX_LOG_FORMAT
- FFMPEGX_FRAMES_QUALITY: -q:v used for extracted frames
- FFMPEGX_FRAMES_MAX_CONCURRENCY: Max ffmpeg processes per extraction batch
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from ffmpegx.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from ffmpegx.config.env import EnvReader
from ffmpegx.config.models import FFmpegXConfig
from ffmpegx.exceptions import FFmpegXError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".ffmpegx"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# path -> (parsed dict, mtime); reloaded automatically when the file changes
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


class ConfigFileError(FFmpegXError):
    """Raised in strict mode when the config file cannot be read or parsed."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(message)


def get_default_config_path() -> Path:
    """Get the config file path, honoring FFMPEGX_CONFIG_PATH."""
    env_path = os.environ.get("FFMPEGX_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_toml_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load and parse a TOML file.

    Args:
        path: Path to the TOML file.
        strict: If True, raise ConfigFileError instead of returning {} on
            read or parse failures.

    Returns:
        Parsed dictionary; empty if the file doesn't exist.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigFileError(f"Cannot load config file {path}: {e}", path) from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def load_config_file(
    path: Path | None = None, *, strict: bool = False
) -> dict[str, Any]:
    """Load configuration from TOML file with mtime-based caching.

    Args:
        path: Path to config file. If None, uses default location.
        strict: Passed through to load_toml_file().

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        result = load_toml_file(path, strict=strict)
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # Keyword overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    max_concurrency: int | None = None,
    quality: int | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> FFmpegXConfig:
    """Get ffmpegx configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides FFMPEGX_CONFIG_PATH).
        ffmpeg_path: Override for the ffmpeg path.
        ffprobe_path: Override for the ffprobe path.
        log_level: Override log level.
        log_file: Override log file.
        log_format: Override log format ("text" or "json").
        max_concurrency: Override frame extraction concurrency.
        quality: Override frame extraction -q:v.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigFileError on config file failures.

    Returns:
        FFmpegXConfig with merged configuration.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    cli_source = ConfigSource(
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        logging_level=log_level,
        logging_file=log_file,
        logging_format=log_format,
        frames_max_concurrency=max_concurrency,
        frames_quality=quality,
    )

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(cli_source)
    return builder.build()
