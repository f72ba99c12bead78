"""Configuration data models.

This module defines dataclasses for ffmpegx configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

LOG_LEVELS = frozenset(("debug", "info", "warning", "error"))
LOG_FORMATS = frozenset(("text", "json"))


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH
    and the local search directories.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class LoggingConfig:
    """Configuration for library and CLI logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.level.lower() not in LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(LOG_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(LOG_FORMATS)}, got {self.format}"
            )


@dataclass
class FramesConfig:
    """Configuration for frame sampling."""

    # JPEG quality scale passed as -q:v (2 = near best, 31 = worst)
    quality: int = 2

    # Max ffmpeg processes per extraction batch (None = one per frame)
    max_concurrency: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 1 <= self.quality <= 31:
            raise ValueError(f"quality must be between 1 and 31, got {self.quality}")
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValueError(
                f"max_concurrency must be at least 1, got {self.max_concurrency}"
            )


@dataclass
class FFmpegXConfig:
    """Root configuration object."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    frames: FramesConfig = field(default_factory=FramesConfig)
