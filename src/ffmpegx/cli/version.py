"""CLI version command: report the ffmpeg build in use."""

import asyncio
import logging
import sys

import click

from ffmpegx.cli.exit_codes import exit_code_for
from ffmpegx.exceptions import FFmpegXError
from ffmpegx.executor import FFmpegRunner

logger = logging.getLogger(__name__)


async def _read_version(ffmpeg_path: str | None) -> str:
    runner = FFmpegRunner(ffmpeg_path)
    result = await runner.execute(["-version"])
    output = (result.output or b"").decode("utf-8", errors="replace")
    lines = output.splitlines()
    return lines[0] if lines else ""


@click.command("version")
@click.option(
    "--ffmpeg",
    "ffmpeg_path",
    default=None,
    help="ffmpeg executable to query (default: configured or discovered).",
)
def version_command(ffmpeg_path: str | None) -> None:
    """Print the first line of `ffmpeg -version`."""
    try:
        line = asyncio.run(_read_version(ffmpeg_path))
    except FFmpegXError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(exit_code_for(e))

    click.echo(line)
