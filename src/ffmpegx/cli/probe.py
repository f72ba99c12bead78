"""CLI probe command for ffmpegx."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from ffmpegx.cli.exit_codes import ExitCode, exit_code_for
from ffmpegx.exceptions import ProbeError, SpawnError
from ffmpegx.introspector import FFprobeIntrospector, format_human, format_json

logger = logging.getLogger(__name__)


@click.command("probe")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.option(
    "--ffprobe",
    "ffprobe_path",
    default=None,
    help="ffprobe executable to use (default: configured or discovered).",
)
def probe_command(file: str, output_format: str, ffprobe_path: str | None) -> None:
    """Probe a media file and display its streams.

    FILE is the path to the media file to probe.
    """
    file_path = Path(file)

    if not file_path.exists():
        click.echo(f"Error: File not found: {file_path}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    try:
        introspector = FFprobeIntrospector(ffprobe_path)
        data = asyncio.run(introspector.get_file_info(file_path))
    except SpawnError as e:
        click.echo(
            f"Error: {e}\nInstall ffmpeg to use media probing features.",
            err=True,
        )
        sys.exit(exit_code_for(e))
    except ProbeError as e:
        click.echo(f"Error: Could not parse file: {file_path}", err=True)
        click.echo(f"Reason: {e}", err=True)
        sys.exit(exit_code_for(e))

    if output_format == "json":
        click.echo(format_json(data))
    else:
        click.echo(format_human(data))
