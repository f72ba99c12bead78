"""Structured logging module for ffmpegx.

Provides configurable logging with JSON format support and file rotation,
plus per-frame context for concurrent frame extraction.
"""

from ffmpegx.logging.config import build_formatter, configure_logging
from ffmpegx.logging.context import (
    FrameContextFilter,
    frame_context,
    get_frame_context,
)
from ffmpegx.logging.handlers import JSONFormatter

__all__ = [
    "FrameContextFilter",
    "JSONFormatter",
    "build_formatter",
    "configure_logging",
    "frame_context",
    "get_frame_context",
]
