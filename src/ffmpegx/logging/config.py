"""Logging setup for applications built on ffmpegx.

The library only creates module loggers under ``ffmpegx``. Applications
such as the CLI call configure_logging() to replace the root handlers with
a rotating log file and/or stderr, every record tagged with the frame
context.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from ffmpegx.logging.context import FrameContextFilter
from ffmpegx.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from ffmpegx.config.models import LoggingConfig

TEXT_FORMAT = "%(asctime)s - %(frame_tag)s%(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def build_formatter(log_format: str) -> logging.Formatter:
    """Return the formatter for "text" or "json" output."""
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def _open_log_file(config: LoggingConfig) -> RotatingFileHandler | None:
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not set up yet, so report on stderr directly
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> list[logging.Handler]:
    """Install root handlers described by a LoggingConfig.

    Logs to the configured file, to stderr as well when include_stderr is
    set, and to stderr alone when no file is configured or it cannot be
    opened.

    Returns:
        The handlers now attached to the root logger.
    """
    level = logging.getLevelNamesMapping()[config.level.upper()]

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = build_formatter(config.format)
    context_filter = FrameContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        root_logger.addHandler(handler)
    return handlers
