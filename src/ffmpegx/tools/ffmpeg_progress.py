"""FFmpeg stderr progress parsing.

While encoding, ffmpeg periodically writes a status line to stderr:

    frame=  120 fps=25.0 q=23.0 size=     256kB time=00:00:04.80 bitrate= 426.7kbits/s speed=0.98x

parse_stderr_progress() turns such a line into a ProgressSample. Lines that
are not status lines, or that carry no usable time, produce None.
"""

import re
from dataclasses import dataclass

# Status lines always lead with the frame counter
PROGRESS_PREFIX = "frame="

# key=value with optional padding after '=' (ffmpeg right-aligns numbers)
_FIELD_PATTERN = re.compile(r"(\w+)=\s*(\S+)")

_TIME_PATTERN = re.compile(r"^(-?)(\d+):(\d+):(\d+(?:\.\d+)?)$")

# Recognized keys and their converters
_INT_KEYS = frozenset(("frame",))
_FLOAT_KEYS = frozenset(("fps", "q"))
_STR_KEYS = frozenset(("size", "time", "bitrate", "speed"))


@dataclass
class ProgressSample:
    """One parsed ffmpeg status line."""

    time: str
    raw: str
    frame: int | None = None
    fps: float | None = None
    q: float | None = None
    size: str | None = None
    bitrate: str | None = None
    speed: str | None = None

    @property
    def time_seconds(self) -> float | None:
        """Get the elapsed media time in seconds."""
        return parse_timestamp(self.time)


def parse_timestamp(value: str | None) -> float | None:
    """Parse an ffmpeg ``HH:MM:SS.ss`` timestamp into seconds.

    Args:
        value: Timestamp string, e.g. "00:01:23.45".

    Returns:
        Seconds as float, or None if the string is not a timestamp.
    """
    if not value:
        return None
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        return None
    sign, hours, minutes, seconds = match.groups()
    total = int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    return -total if sign else total


def _convert_progress_value(key: str, value: str) -> int | float | str | None:
    """Convert a progress value to the appropriate type.

    Args:
        key: The field name.
        value: The string value to convert.

    Returns:
        Converted value, or None for "N/A" and unparseable numbers.
    """
    if value == "N/A":
        return None
    if key in _INT_KEYS:
        try:
            return int(value)
        except ValueError:
            return None
    if key in _FLOAT_KEYS:
        try:
            return float(value)
        except ValueError:
            return None
    return value


def parse_stderr_progress(line: str) -> ProgressSample | None:
    """Parse an ffmpeg stderr status line.

    Args:
        line: One line of ffmpeg stderr, without its line terminator.

    Returns:
        ProgressSample, or None if the line is not a status line or has no
        parseable time field.
    """
    if not line.lstrip().startswith(PROGRESS_PREFIX):
        return None

    fields: dict[str, int | float | str] = {}
    for key, value in _FIELD_PATTERN.findall(line):
        if key not in _INT_KEYS and key not in _FLOAT_KEYS and key not in _STR_KEYS:
            continue
        converted = _convert_progress_value(key, value)
        if converted is not None:
            fields[key] = converted

    time = fields.pop("time", None)
    if time is None:
        return None

    return ProgressSample(time=str(time), raw=line, **fields)  # type: ignore[arg-type]
