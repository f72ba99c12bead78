"""Ordered FFmpeg command builder.

ffmpeg is sensitive to where an option appears: global options come first,
input options must precede the ``-i`` they apply to, and output options must
precede the output target. FFmpegCommand keeps the three groups apart and
only joins them when the command is rendered.

Example:
    >>> cmd = FFmpegCommand()
    >>> cmd.seek_input(12.5)
    >>> cmd.set_input("movie.mkv")
    >>> cmd.frames(1)
    >>> cmd.output_format("image2pipe")
    >>> cmd.render()
    ['-ss', '12.5', '-i', 'movie.mkv', '-vframes', '1', '-f', 'image2pipe', 'pipe:1']
"""

from __future__ import annotations

import shlex
from pathlib import Path

from ffmpegx.exceptions import ConfigurationError

# Output target used when the result is captured from stdout
STDOUT_PIPE = "pipe:1"

INPUT_FLAG = "-i"
FORMAT_FLAG = "-f"

LOG_LEVELS = frozenset(
    (
        "quiet",
        "panic",
        "fatal",
        "error",
        "warning",
        "info",
        "verbose",
        "debug",
        "trace",
    )
)

PRESETS = frozenset(
    (
        "ultrafast",
        "superfast",
        "veryfast",
        "faster",
        "fast",
        "medium",
        "slow",
        "slower",
        "veryslow",
        "placebo",
    )
)

OptionValue = str | int | float | Path


class FFmpegCommand:
    """Mutable builder for one ffmpeg invocation.

    Options are appended in call order with no deduplication; conflicting
    flags are the caller's responsibility. Nothing is validated until
    render() is called.
    """

    def __init__(self) -> None:
        self.global_args: list[str] = []
        self.input_args: list[str] = []
        self.output_args: list[str] = []
        self.input_file: str | None = None
        self.output_file: str | None = None

    # ------------------------------------------------------------------
    # Raw options
    # ------------------------------------------------------------------

    def add_global_option(self, key: str, value: OptionValue | None = None) -> None:
        """Append a global option (placed before any input)."""
        _append_option(self.global_args, key, value)

    def add_input_option(self, key: str, value: OptionValue | None = None) -> None:
        """Append an input option (placed before ``-i``)."""
        _append_option(self.input_args, key, value)

    def add_output_option(self, key: str, value: OptionValue | None = None) -> None:
        """Append an output option (placed before the output target)."""
        _append_option(self.output_args, key, value)

    # ------------------------------------------------------------------
    # Input / output
    # ------------------------------------------------------------------

    def set_input(self, path: str | Path) -> None:
        self.input_file = str(path)

    def set_output(self, path: str | Path) -> None:
        """Set the output file. Without one, output goes to stdout."""
        self.output_file = str(path)

    # ------------------------------------------------------------------
    # Global options
    # ------------------------------------------------------------------

    def overwrite(self) -> None:
        """Overwrite output files without asking (``-y``)."""
        self.add_global_option("-y")

    def log_level(self, level: str) -> None:
        """Set ffmpeg's log verbosity (``-v``).

        Raises:
            ValueError: If level is not one of ffmpeg's level names.
        """
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{level}'. "
                f"Must be one of: {', '.join(sorted(LOG_LEVELS))}"
            )
        self.add_global_option("-v", level)

    # ------------------------------------------------------------------
    # Time control
    # ------------------------------------------------------------------

    def seek_input(self, timestamp: str | float) -> None:
        """Fast, keyframe-based seek before decoding (input ``-ss``)."""
        self.add_input_option("-ss", timestamp)

    def duration_input(self, duration: str | float) -> None:
        """Limit how much of the input is read (input ``-t``)."""
        self.add_input_option("-t", duration)

    def seek(self, timestamp: str | float) -> None:
        """Frame-accurate seek by decoding and discarding (output ``-ss``)."""
        self.add_output_option("-ss", timestamp)

    def duration(self, duration: str | float) -> None:
        """Limit the output duration (output ``-t``)."""
        self.add_output_option("-t", duration)

    # ------------------------------------------------------------------
    # Video options
    # ------------------------------------------------------------------

    def video_codec(self, codec: str) -> None:
        """Set the video codec (``-c:v``); use "copy" to skip re-encoding."""
        self.add_output_option("-c:v", codec)

    def frame_rate(self, rate: float) -> None:
        self.add_output_option("-r", rate)

    def size(self, size: str) -> None:
        """Set output dimensions, e.g. "1280x720" or "hd720" (``-s``)."""
        self.add_output_option("-s", size)

    def video_bitrate(self, bitrate: str) -> None:
        self.add_output_option("-b:v", bitrate)

    def crf(self, value: int) -> None:
        """Constant rate factor for quality-based encoding (``-crf``)."""
        self.add_output_option("-crf", value)

    def preset(self, preset: str) -> None:
        """Encoder speed/quality preset (``-preset``).

        Raises:
            ValueError: If preset is not a known x264/x265 preset name.
        """
        if preset not in PRESETS:
            raise ValueError(
                f"Invalid preset '{preset}'. "
                f"Must be one of: {', '.join(sorted(PRESETS))}"
            )
        self.add_output_option("-preset", preset)

    def quality(self, value: int) -> None:
        """Fixed quality scale for image codecs (``-q:v``, 2 is near-best)."""
        self.add_output_option("-q:v", value)

    def frames(self, count: int) -> None:
        """Stop after this many video frames (``-vframes``)."""
        self.add_output_option("-vframes", count)

    # ------------------------------------------------------------------
    # Audio options
    # ------------------------------------------------------------------

    def audio_codec(self, codec: str) -> None:
        self.add_output_option("-c:a", codec)

    def audio_bitrate(self, bitrate: str) -> None:
        self.add_output_option("-b:a", bitrate)

    def audio_channels(self, channels: int) -> None:
        self.add_output_option("-ac", channels)

    def audio_sample_rate(self, rate: int) -> None:
        self.add_output_option("-ar", rate)

    # ------------------------------------------------------------------
    # Stream control and filters
    # ------------------------------------------------------------------

    def no_video(self) -> None:
        self.add_output_option("-vn")

    def no_audio(self) -> None:
        self.add_output_option("-an")

    def filter(self, filter_graph: str) -> None:
        """Apply a video filter graph (``-vf``)."""
        self.add_output_option("-vf", filter_graph)

    def output_format(self, fmt: str) -> None:
        """Force the output container/muxer (``-f``)."""
        self.add_output_option(FORMAT_FLAG, fmt)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def has_output_format(self) -> bool:
        """Return True if the output args contain ``-f`` followed by a value."""
        return any(
            arg == FORMAT_FLAG and i < len(self.output_args) - 1
            for i, arg in enumerate(self.output_args)
        )

    def render(self) -> list[str]:
        """Render the final ffmpeg argument list (without the executable).

        Rendering does not modify the builder and may be repeated.

        Returns:
            global args, input args, ``-i <input>``, output args, and the
            output file or ``pipe:1`` when writing to stdout.

        Raises:
            ConfigurationError: If no input is set, or if output goes to
                stdout and no ``-f`` format was given.
        """
        if not self.input_file:
            raise ConfigurationError(
                "Input file not specified. Call set_input() before rendering."
            )

        args = [
            *self.global_args,
            *self.input_args,
            INPUT_FLAG,
            self.input_file,
            *self.output_args,
        ]

        if self.output_file:
            args.append(self.output_file)
        else:
            if not self.has_output_format():
                raise ConfigurationError(
                    "Output format (-f) is required when no output file is "
                    "specified."
                )
            args.append(STDOUT_PIPE)
        return args

    @property
    def final_args(self) -> list[str]:
        return self.render()

    def __str__(self) -> str:
        try:
            return shlex.join(self.render())
        except ConfigurationError:
            return "<incomplete ffmpeg command>"


def _append_option(args: list[str], key: str, value: OptionValue | None) -> None:
    args.append(key)
    if value is not None:
        args.append(str(value))
