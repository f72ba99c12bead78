"""CLI cover command: grab a single frame as a cover image."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from ffmpegx.cli.exit_codes import ExitCode, exit_code_for
from ffmpegx.command import FFmpegCommand
from ffmpegx.exceptions import FFmpegXError
from ffmpegx.executor import FFmpegRunner, execute_ffmpeg

logger = logging.getLogger(__name__)


async def extract_cover(
    video_path: Path,
    at: str = "00:00:00",
    quality: int = 2,
    runner: FFmpegRunner | None = None,
) -> bytes | None:
    """Return one encoded frame taken with a fast input-side seek."""

    def configure(cmd: FFmpegCommand, _runner: FFmpegRunner) -> None:
        cmd.seek_input(at)
        cmd.set_input(video_path)
        cmd.frames(1)
        cmd.quality(quality)
        cmd.output_format("image2pipe")

    result = await execute_ffmpeg(configure, runner=runner)
    return result.output


@click.command("cover")
@click.argument("video", type=click.Path(exists=False))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--at",
    default="00:00:00",
    show_default=True,
    help="Timestamp of the frame (seconds or HH:MM:SS[.ms]).",
)
def cover_command(video: str, output: Path, at: str) -> None:
    """Save the frame of VIDEO at a timestamp to OUTPUT."""
    video_path = Path(video)
    if not video_path.exists():
        click.echo(f"Error: File not found: {video_path}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    try:
        image = asyncio.run(extract_cover(video_path, at))
    except FFmpegXError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(exit_code_for(e))

    if not image:
        click.echo(f"Error: No frame at {at} in {video_path}", err=True)
        sys.exit(ExitCode.NO_FRAMES_EXTRACTED)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(image)
    click.echo(f"Cover written to {output}")
