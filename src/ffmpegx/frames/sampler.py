"""Uniform frame sampling from a video file.

VideoFrameExtractor probes a video once, then extracts frames as encoded
images by running one ffmpeg process per frame. Each process seeks in two
stages: a fast input-side seek to a point one keyframe interval before the
target, then a decoded output-side seek for the remainder, so every frame
is accurate without decoding the video from the start.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable
from pathlib import Path

from ffmpegx.command.builder import FFmpegCommand
from ffmpegx.exceptions import FFmpegXError
from ffmpegx.executor.execute import execute_ffmpeg
from ffmpegx.executor.runner import FFmpegRunner
from ffmpegx.frames.exceptions import (
    FrameExtractionError,
    NotInitializedError,
    NoVideoStreamError,
    UnknownFrameCountError,
)
from ffmpegx.frames.indices import (
    dedupe_indices,
    estimate_keyframe_interval,
    indices_by_count,
    indices_by_rate,
    plan_seek,
)
from ffmpegx.introspector.ffprobe import probe
from ffmpegx.introspector.parsers import (
    parse_duration,
    parse_frame_count,
    parse_frame_rate,
)
from ffmpegx.introspector.types import ProbeStream
from ffmpegx.logging.context import frame_context

logger = logging.getLogger(__name__)

IMAGE_PIPE_FORMAT = "image2pipe"


def _format_seconds(value: float) -> str:
    return f"{value:.6f}"


class VideoFrameExtractor:
    """Extract uniformly distributed frames from one video.

    Example:
        extractor = VideoFrameExtractor("clip.mp4")
        await extractor.initialize()
        images = await extractor.extract(total_frames=10)
    """

    def __init__(
        self,
        video_path: str | Path,
        *,
        runner_factory: Callable[[], FFmpegRunner] | None = None,
        ffmpeg_path: str | Path | None = None,
        ffprobe_path: str | Path | None = None,
        max_concurrency: int | None = None,
        quality: int | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            video_path: Video file to sample.
            runner_factory: Callable returning a fresh FFmpegRunner for each
                frame. Defaults to FFmpegRunner(ffmpeg_path, ffprobe_path).
            ffmpeg_path: Explicit ffmpeg executable for the default runners.
            ffprobe_path: Explicit ffprobe executable for probing.
            max_concurrency: Maximum ffmpeg processes at once. None uses the
                configured value, which defaults to one process per frame.
            quality: JPEG quality passed as -q:v (1 best to 31 worst). None
                uses the configured value (default 2).

        Raises:
            FileNotFoundError: If the video does not exist.
            ValueError: If max_concurrency is less than 1.
        """
        self.video_path = Path(video_path)
        if not self.video_path.exists():
            raise FileNotFoundError(f"Video file not found: {self.video_path}")
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(
                f"max_concurrency must be at least 1, got {max_concurrency}"
            )

        if quality is None or max_concurrency is None:
            from ffmpegx.config import get_config

            frames_config = get_config().frames
            if quality is None:
                quality = frames_config.quality
            if max_concurrency is None:
                max_concurrency = frames_config.max_concurrency

        self.quality = quality
        self.max_concurrency = max_concurrency
        self._ffmpeg_path = ffmpeg_path
        self._ffprobe_path = ffprobe_path
        self._runner_factory = runner_factory or self._default_runner

        self._video_stream: ProbeStream | None = None
        self._fps: float | None = None
        self._total_frames: int | None = None
        self._keyframe_interval: float | None = None

    def _default_runner(self) -> FFmpegRunner:
        return FFmpegRunner(self._ffmpeg_path, self._ffprobe_path)

    @property
    def is_initialized(self) -> bool:
        return self._video_stream is not None

    @property
    def video_stream(self) -> ProbeStream:
        self._require_initialized()
        assert self._video_stream is not None
        return self._video_stream

    @property
    def fps(self) -> float:
        self._require_initialized()
        assert self._fps is not None
        return self._fps

    @property
    def total_frames(self) -> int:
        self._require_initialized()
        assert self._total_frames is not None
        return self._total_frames

    @property
    def keyframe_interval_seconds(self) -> float:
        self._require_initialized()
        assert self._keyframe_interval is not None
        return self._keyframe_interval

    def _require_initialized(self) -> None:
        if self._video_stream is None:
            raise NotInitializedError(
                "VideoFrameExtractor.initialize() must be awaited before use"
            )

    async def initialize(self) -> None:
        """Probe the video and derive frame rate, frame count and GOP estimate.

        Can be awaited again to re-probe.

        Raises:
            NoVideoStreamError: If the file has no video stream.
            FrameExtractionError: If no frame rate can be determined.
            UnknownFrameCountError: If the frame count cannot be determined.
            ProbeError: If ffprobe fails.
            SpawnError: If ffprobe cannot be launched.
        """
        data = await probe(self.video_path, self._ffprobe_path)

        stream = data.first_video_stream()
        if stream is None:
            raise NoVideoStreamError(f"No video stream found in {self.video_path}")

        r_frame_rate = parse_frame_rate(stream.r_frame_rate)
        fps = parse_frame_rate(stream.avg_frame_rate) or r_frame_rate
        if fps is None:
            raise FrameExtractionError(
                f"Cannot determine frame rate of {self.video_path} "
                f"(avg_frame_rate={stream.avg_frame_rate!r})"
            )

        total = parse_frame_count(stream.nb_frames)
        if total is None:
            duration = data.duration_seconds
            if duration is None:
                duration = parse_duration(stream.duration)
            if duration is None:
                raise UnknownFrameCountError(
                    f"Cannot determine frame count of {self.video_path}: "
                    "no nb_frames and no duration"
                )
            total = math.floor(duration * fps)
            if total <= 0:
                raise UnknownFrameCountError(
                    f"Computed frame count of {self.video_path} is not positive "
                    f"(duration={duration}, fps={fps})"
                )

        self._video_stream = stream
        self._fps = fps
        self._total_frames = total
        self._keyframe_interval = estimate_keyframe_interval(r_frame_rate)

        logger.debug(
            "Initialized %s: %d frames at %.3f fps, keyframe interval %.2fs",
            self.video_path,
            total,
            fps,
            self._keyframe_interval,
            extra={"video_path": str(self.video_path)},
        )

    def select_indices(
        self, total_frames: int | None = None, fps: float | None = None
    ) -> list[int]:
        """Return the ascending, de-duplicated frame indices to extract.

        Raises:
            NotInitializedError: If initialize() has not completed.
            ValueError: Unless exactly one selector is given, with a
                non-negative count or a positive rate.
        """
        self._require_initialized()
        if (total_frames is None) == (fps is None):
            raise ValueError("Specify exactly one of total_frames or fps")

        if total_frames is not None:
            if total_frames < 0:
                raise ValueError(
                    f"total_frames must not be negative, got {total_frames}"
                )
            indices = indices_by_count(self.total_frames, total_frames)
        else:
            assert fps is not None
            if fps <= 0:
                raise ValueError(f"fps must be positive, got {fps}")
            indices = indices_by_rate(self.total_frames, self.fps, fps)
        return dedupe_indices(indices)

    async def extract(
        self, total_frames: int | None = None, fps: float | None = None
    ) -> list[bytes]:
        """Extract frames as encoded images.

        Args:
            total_frames: Number of frames spread uniformly over the video.
            fps: Target sampling rate in frames per second.

        Returns:
            Image buffers in ascending frame order. Frames whose extraction
            failed or produced no output are left out.

        Raises:
            NotInitializedError: If initialize() has not completed.
            ValueError: Unless exactly one selector is given, with a
                non-negative count or a positive rate.
        """
        indices = self.select_indices(total_frames=total_frames, fps=fps)
        if not indices:
            return []
        logger.info(
            "Extracting %d frames from %s",
            len(indices),
            self.video_path,
            extra={"video_path": str(self.video_path)},
        )

        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        )

        async def bounded(index: int) -> bytes | None:
            if semaphore is None:
                return await self._extract_frame(index)
            async with semaphore:
                return await self._extract_frame(index)

        results = await asyncio.gather(*(bounded(i) for i in indices))
        frames = [r for r in results if r is not None]

        if len(frames) < len(indices):
            logger.warning(
                "Extracted %d of %d frames from %s",
                len(frames),
                len(indices),
                self.video_path,
            )
        else:
            logger.info("Extracted %d frames from %s", len(frames), self.video_path)
        return frames

    def build_frame_command(self, command: FFmpegCommand, frame_index: int) -> None:
        """Configure ``command`` to write one frame as an image to stdout."""
        plan = plan_seek(frame_index / self.fps, self.keyframe_interval_seconds)
        command.seek_input(_format_seconds(plan.coarse_seconds))
        command.set_input(self.video_path)
        command.seek(_format_seconds(plan.offset_seconds))
        command.frames(1)
        command.quality(self.quality)
        command.output_format(IMAGE_PIPE_FORMAT)

    async def _extract_frame(self, frame_index: int) -> bytes | None:
        with frame_context(frame_index, self.video_path):
            try:
                result = await execute_ffmpeg(
                    lambda cmd, _runner: self.build_frame_command(cmd, frame_index),
                    runner=self._runner_factory(),
                )
            except FFmpegXError as e:
                logger.warning(
                    "Frame %d extraction failed: %s",
                    frame_index,
                    e,
                )
                return None
            except Exception:
                logger.warning(
                    "Frame %d extraction failed unexpectedly",
                    frame_index,
                    exc_info=True,
                )
                return None

            if not result.output:
                logger.warning(
                    "Frame %d extraction produced no output",
                    frame_index,
                )
                return None
            return result.output
