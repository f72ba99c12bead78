"""Frame context for structured logging.

Frame extraction runs one asyncio task per frame. Each task copies the
current contextvars, so setting the frame context inside a task tags every
log record emitted on its behalf (runner start/exit, failures) with the
frame index and source video.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_video_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "video_path", default=None
)
_frame_index: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "frame_index", default=None
)


@contextmanager
def frame_context(
    frame_index: int,
    video_path: Path | str | None = None,
) -> Generator[None, None, None]:
    """Tag log records emitted inside the block with a frame index.

    Example:
        with frame_context(120, "/videos/clip.mp4"):
            logger.info("Extracting")  # text format: "[F120] Extracting"
    """
    video_token = _video_path.set(str(video_path) if video_path is not None else None)
    frame_token = _frame_index.set(frame_index)
    try:
        yield
    finally:
        _frame_index.reset(frame_token)
        _video_path.reset(video_token)


def get_frame_context() -> tuple[int | None, str | None]:
    """Return (frame_index, video_path) for the current context."""
    return _frame_index.get(), _video_path.get()


class FrameContextFilter(logging.Filter):
    """Logging filter that injects frame context into log records.

    Adds frame_index and video_path attributes, plus a compact frame_tag
    such as "[F120] " for the text format (empty outside a frame context).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        frame_index, video_path = get_frame_context()
        # Values passed through extra= take precedence over an empty context
        if frame_index is None:
            frame_index = getattr(record, "frame_index", None)
        if video_path is None:
            video_path = getattr(record, "video_path", None)
        record.frame_index = frame_index
        record.video_path = video_path
        record.frame_tag = f"[F{frame_index}] " if frame_index is not None else ""
        return True
