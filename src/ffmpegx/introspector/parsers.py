"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe values into Python types. All functions
are pure (no I/O, no side effects) for easy testing.
"""

import logging
import math
from typing import Any

from pydantic import ValidationError

from ffmpegx.exceptions import ProbeError
from ffmpegx.introspector.types import ProbeData

logger = logging.getLogger(__name__)


def parse_duration(value: str | None) -> float | None:
    """Parse duration string from ffprobe into seconds.

    Args:
        value: Duration string from ffprobe (e.g., "3600.000") or None.

    Returns:
        Duration in seconds as float, or None if parsing fails.
    """
    if value is None:
        return None
    try:
        duration = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(duration) or math.isinf(duration):
        return None
    return duration


def parse_frame_rate(value: str | None) -> float | None:
    """Parse an ffprobe frame rate ("30000/1001" or "25") into fps.

    Args:
        value: Rational "N/D" or decimal string.

    Returns:
        Frames per second, or None for missing, zero ("0/0") or
        malformed values.
    """
    if not value:
        return None
    try:
        if "/" in value:
            num, denom = value.split("/", 1)
            fps = int(num) / int(denom)
        else:
            fps = float(value)
    except (ValueError, ZeroDivisionError):
        return None
    if fps <= 0 or math.isnan(fps) or math.isinf(fps):
        return None
    return fps


def parse_frame_count(value: str | None) -> int | None:
    """Parse an ffprobe ``nb_frames`` value.

    Returns:
        Positive frame count, or None when absent, zero or malformed.
    """
    if value is None:
        return None
    try:
        count = int(value)
    except (ValueError, TypeError):
        return None
    return count if count > 0 else None


def parse_probe_output(data: Any, source: str | None = None) -> ProbeData:
    """Validate a decoded ffprobe report into ProbeData.

    Args:
        data: Decoded JSON from ``ffprobe -print_format json``.
        source: File path for error messages.

    Returns:
        Immutable ProbeData.

    Raises:
        ProbeError: If the report is missing ``streams``/``format`` or does
            not match the expected shape.
    """
    context = f" for {source}" if source else ""
    if not isinstance(data, dict):
        raise ProbeError(f"Unexpected ffprobe output{context}: not a JSON object")
    for key in ("streams", "format"):
        if key not in data:
            raise ProbeError(
                f"Missing '{key}' in ffprobe output{context}. "
                "File may be corrupted or not a valid media file."
            )

    try:
        return ProbeData.model_validate(data)
    except ValidationError as e:
        raise ProbeError(f"Invalid ffprobe output{context}: {e}") from e
