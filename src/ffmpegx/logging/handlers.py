"""JSON log formatting for ffmpegx.

Emits one JSON object per line. Records logged inside frame_context() carry
a ``frame`` object, so the lines of one extraction batch can be grouped per
frame.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has; anything else arrived through extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

_FRAME_ATTRS = frozenset(("frame_index", "video_path", "frame_tag"))


def _frame_fields(record: logging.LogRecord) -> dict[str, Any]:
    frame: dict[str, Any] = {}
    index = getattr(record, "frame_index", None)
    if index is not None:
        frame["index"] = index
    video = getattr(record, "video_path", None)
    if video is not None:
        frame["video"] = video
    return frame


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Keys:
    - timestamp: ISO-8601 UTC
    - level, logger, message
    - frame: ``{"index", "video"}`` when logged inside a frame context
    - context: remaining ``extra=`` values (e.g. returncode)
    - exception: formatted traceback when exc_info is set
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        frame = _frame_fields(record)
        if frame:
            entry["frame"] = frame

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
            and key not in _FRAME_ATTRS
            and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
