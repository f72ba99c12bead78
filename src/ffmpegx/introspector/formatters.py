"""Formatters for probe results.

This module provides functions to format ProbeData for human-readable or
JSON output. Used by the ``ffmpegx probe`` command.
"""

import json
from typing import Any

from ffmpegx.introspector.parsers import parse_frame_rate
from ffmpegx.introspector.types import AUDIO, SUBTITLE, VIDEO, ProbeData, ProbeStream


def format_human(data: ProbeData) -> str:
    """Format probe data for human-readable output.

    Args:
        data: The probe report to format.

    Returns:
        Formatted string for terminal output.
    """
    lines: list[str] = []

    lines.append(f"File: {data.format.filename}")
    container = data.format.format_long_name or data.format.format_name
    lines.append(f"Container: {container.split(',')[0]}")
    duration = data.duration_seconds
    if duration is not None:
        lines.append(f"Duration: {duration:.3f}s")
    lines.append("")

    groups = (
        ("Video", data.video_streams),
        ("Audio", [s for s in data.streams if s.codec_type == AUDIO]),
        ("Subtitles", [s for s in data.streams if s.codec_type == SUBTITLE]),
        (
            "Other",
            [
                s
                for s in data.streams
                if s.codec_type not in (VIDEO, AUDIO, SUBTITLE)
            ],
        ),
    )

    lines.append("Streams:")
    for label, streams in groups:
        if not streams:
            continue
        lines.append(f"  {label}:")
        for stream in streams:
            lines.append(f"    {format_stream_line(stream)}")

    if not data.streams:
        lines.append("  (no streams found)")

    return "\n".join(lines)


def format_stream_line(stream: ProbeStream) -> str:
    """Format a single stream for human output.

    Args:
        stream: The stream to format.

    Returns:
        Formatted stream line.
    """
    parts = [f"#{stream.index}", f"[{stream.codec_type}]"]

    if stream.codec_name:
        parts.append(stream.codec_name)

    if stream.is_video:
        if stream.width and stream.height:
            parts.append(f"{stream.width}x{stream.height}")
        if stream.avg_frame_rate:
            fps = frame_rate_to_fps(stream.avg_frame_rate)
            if fps:
                parts.append(f"@ {fps}fps")
        if stream.nb_frames:
            parts.append(f"({stream.nb_frames} frames)")

    if stream.codec_type == AUDIO:
        channel_layout = stream.extensions.get("channel_layout")
        if channel_layout:
            parts.append(str(channel_layout))

    return " ".join(parts)


def frame_rate_to_fps(frame_rate: str) -> str | None:
    """Convert frame rate string to decimal FPS.

    Args:
        frame_rate: Frame rate as "N/D" or decimal string.

    Returns:
        Formatted FPS string or None if invalid.
    """
    fps = parse_frame_rate(frame_rate)
    if fps is None:
        return None
    # e.g. 23.976 or 30
    if fps == int(fps):
        return str(int(fps))
    return f"{fps:.3f}".rstrip("0").rstrip(".")


def format_json(data: ProbeData) -> str:
    """Format probe data as JSON.

    The full report is emitted, including fields that are not typed on the
    models.
    """
    return json.dumps(probe_to_dict(data), indent=2)


def probe_to_dict(data: ProbeData) -> dict[str, Any]:
    """Convert ProbeData to a JSON-serializable dict, dropping None values."""
    return data.model_dump(mode="json", exclude_none=True)
