"""CLI frames command: sample frames from a video into image files."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from ffmpegx.cli.exit_codes import ExitCode, exit_code_for
from ffmpegx.exceptions import FFmpegXError, ProbeError
from ffmpegx.frames import VideoFrameExtractor

logger = logging.getLogger(__name__)

FRAME_FILENAME = "frame-{:04d}.jpg"


async def _extract(
    extractor: VideoFrameExtractor,
    count: int | None,
    fps: float | None,
) -> list[bytes]:
    await extractor.initialize()
    return await extractor.extract(total_frames=count, fps=fps)


def write_frames(frames: list[bytes], output_dir: Path) -> list[Path]:
    """Write image buffers as frame-0001.jpg, frame-0002.jpg, ...

    Returns:
        Paths written, in frame order.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for number, image in enumerate(frames, start=1):
        path = output_dir / FRAME_FILENAME.format(number)
        path.write_bytes(image)
        paths.append(path)
    return paths


@click.command("frames")
@click.argument("video", type=click.Path(exists=False))
@click.option(
    "--count",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Number of frames spread uniformly over the video.",
)
@click.option(
    "--fps",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Sampling rate in frames per second.",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for the extracted images.",
)
@click.option(
    "--quality",
    "-q",
    type=click.IntRange(1, 31),
    default=None,
    help="JPEG quality, 1 (best) to 31 (worst). Default from config (2).",
)
@click.option(
    "--max-concurrency",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum ffmpeg processes at once (default: one per frame).",
)
def frames_command(
    video: str,
    count: int | None,
    fps: float | None,
    output_dir: Path,
    quality: int | None,
    max_concurrency: int | None,
) -> None:
    """Extract frames from VIDEO as JPEG images.

    Exactly one of --count or --fps selects the frames.
    """
    if (count is None) == (fps is None):
        click.echo("Error: Specify exactly one of --count or --fps.", err=True)
        sys.exit(ExitCode.INVALID_ARGUMENTS)

    video_path = Path(video)
    if not video_path.exists():
        click.echo(f"Error: File not found: {video_path}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    extractor = VideoFrameExtractor(
        video_path,
        max_concurrency=max_concurrency,
        quality=quality,
    )
    try:
        frames = asyncio.run(_extract(extractor, count, fps))
    except ProbeError as e:
        click.echo(f"Error: Could not probe file: {video_path}", err=True)
        click.echo(f"Reason: {e}", err=True)
        sys.exit(exit_code_for(e))
    except FFmpegXError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(exit_code_for(e))
    except KeyboardInterrupt as e:
        click.echo("Interrupted.", err=True)
        sys.exit(exit_code_for(e))

    if not frames:
        click.echo("Error: No frames could be extracted.", err=True)
        sys.exit(ExitCode.NO_FRAMES_EXTRACTED)

    paths = write_frames(frames, output_dir)
    click.echo(f"Wrote {len(paths)} frames to {output_dir}")
