"""Media probing via ffprobe.

Provides the async probe client, the typed report models and the pure
parsers used to validate ffprobe's JSON output.
"""

from ffmpegx.introspector.ffprobe import FFprobeIntrospector, build_probe_command, probe
from ffmpegx.introspector.formatters import format_human, format_json
from ffmpegx.introspector.parsers import (
    parse_duration,
    parse_frame_count,
    parse_frame_rate,
    parse_probe_output,
)
from ffmpegx.introspector.types import (
    AUDIO,
    CODEC_TYPES,
    VIDEO,
    ProbeData,
    ProbeFormat,
    ProbeStream,
)

__all__ = [
    "AUDIO",
    "CODEC_TYPES",
    "VIDEO",
    "FFprobeIntrospector",
    "ProbeData",
    "ProbeFormat",
    "ProbeStream",
    "build_probe_command",
    "format_human",
    "format_json",
    "parse_duration",
    "parse_frame_count",
    "parse_frame_rate",
    "parse_probe_output",
    "probe",
]
