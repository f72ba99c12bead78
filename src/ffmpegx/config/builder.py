"""Configuration builder with explicit layering.

ConfigBuilder composes FFmpegXConfig from several ConfigSources; later
sources override earlier ones for every value they actually set.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from ffmpegx.config.env import EnvReader
from ffmpegx.config.models import (
    LOG_FORMATS,
    LOG_LEVELS,
    FFmpegXConfig,
    FramesConfig,
    LoggingConfig,
    ToolPathsConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None means "not specified in this source" and never overrides a value
    from a lower-precedence source.
    """

    # Tool paths
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None

    # Frames config
    frames_quality: int | None = None
    frames_max_concurrency: int | None = None


class ConfigBuilder:
    """Builds FFmpegXConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(ConfigSource(ffmpeg_path=Path("/opt/ffmpeg/bin/ffmpeg")))
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply configuration source, overriding existing values.

        Fields left as None keep the value from earlier sources.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> FFmpegXConfig:
        """Build the final FFmpegXConfig with defaults for unset values.

        Raises:
            ValueError: If a layered value fails model validation.
        """
        tools = ToolPathsConfig(
            ffmpeg=self._get("ffmpeg_path", None),
            ffprobe=self._get("ffprobe_path", None),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        # 0 means "no limit"
        max_concurrency = self._get("frames_max_concurrency", None)
        frames = FramesConfig(
            quality=self._get("frames_quality", 2),
            max_concurrency=max_concurrency if max_concurrency else None,
        )

        return FFmpegXConfig(tools=tools, logging=logging_config, frames=frames)


def _optional_path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Recognized tables: ``[tools]`` (ffmpeg, ffprobe), ``[logging]`` and
    ``[frames]`` (quality, max_concurrency).
    """
    tools = file_config.get("tools", {})
    logging_conf = file_config.get("logging", {})
    frames = file_config.get("frames", {})

    return ConfigSource(
        ffmpeg_path=_optional_path(tools.get("ffmpeg")),
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
        frames_quality=frames.get("quality"),
        frames_max_concurrency=frames.get("max_concurrency"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from FFMPEGX_* environment variables."""
    return ConfigSource(
        ffmpeg_path=reader.get_path("FFMPEG_PATH"),
        ffprobe_path=reader.get_path("FFPROBE_PATH"),
        logging_level=reader.get_choice("LOG_LEVEL", LOG_LEVELS),
        logging_file=reader.get_path("LOG_FILE"),
        logging_format=reader.get_choice("LOG_FORMAT", LOG_FORMATS),
        frames_quality=reader.get_int("FRAMES_QUALITY", minimum=1),
        # 0 means "no limit"
        frames_max_concurrency=reader.get_int("FRAMES_MAX_CONCURRENCY", minimum=0),
    )
