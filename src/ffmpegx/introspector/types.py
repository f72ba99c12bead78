"""Typed models for ffprobe's JSON report.

ffprobe emits many more fields than ffmpegx uses, and the set grows with
each release. The models type the fields ffmpegx relies on and keep every
other key in an open extension map (pydantic ``extra="allow"``), exposed
through the ``extensions`` property.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Known ffprobe codec_type values
VIDEO = "video"
AUDIO = "audio"
SUBTITLE = "subtitle"
DATA = "data"
ATTACHMENT = "attachment"

CODEC_TYPES = frozenset((VIDEO, AUDIO, SUBTITLE, DATA, ATTACHMENT))


class _ProbeModel(BaseModel):
    # ffprobe reports durations, sizes and bitrates as strings; accept
    # numbers too so hand-written reports validate the same way
    model_config = ConfigDict(extra="allow", frozen=True, coerce_numbers_to_str=True)

    @property
    def extensions(self) -> dict[str, Any]:
        """Fields present in the report but not typed on the model."""
        return dict(self.model_extra or {})


class ProbeStream(_ProbeModel):
    """One entry of the ``streams`` array."""

    index: int
    codec_type: str
    codec_name: str | None = None
    codec_long_name: str | None = None
    width: int | None = None
    height: int | None = None
    duration: str | None = None
    bit_rate: str | None = None
    avg_frame_rate: str | None = None
    r_frame_rate: str | None = None
    nb_frames: str | None = None

    @property
    def is_video(self) -> bool:
        return self.codec_type == VIDEO


class ProbeFormat(_ProbeModel):
    """The ``format`` object describing the container."""

    filename: str
    nb_streams: int
    format_name: str
    format_long_name: str | None = None
    duration: str | None = None
    size: str | None = None
    bit_rate: str | None = None


class ProbeData(_ProbeModel):
    """Complete ffprobe report: streams plus container format."""

    streams: list[ProbeStream] = Field(default_factory=list)
    format: ProbeFormat

    @property
    def video_streams(self) -> list[ProbeStream]:
        """Video streams in report order."""
        return [s for s in self.streams if s.is_video]

    def first_video_stream(self) -> ProbeStream | None:
        """Return the first stream of video kind, or None."""
        return next(iter(self.video_streams), None)

    @property
    def duration_seconds(self) -> float | None:
        """Container duration in seconds, or None if absent/unparseable."""
        from ffmpegx.introspector.parsers import parse_duration

        return parse_duration(self.format.duration)
