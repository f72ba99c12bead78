"""CLI module for ffmpegx."""

import logging
from pathlib import Path

import click

from ffmpegx.cli.exit_codes import ExitCode

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options layered over the configuration.

    Args:
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    from ffmpegx.config import get_config
    from ffmpegx.logging import configure_logging

    config = get_config(
        log_level=log_level,
        log_file=log_file,
        log_format="json" if log_json else None,
    )
    configure_logging(config.logging)
    _logging_configured = True


@click.group()
@click.version_option(package_name="ffmpegx")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """ffmpegx - build and run ffmpeg commands, probe media, sample frames."""
    ctx.ensure_object(dict)
    try:
        _configure_logging(log_level, log_file, log_json)
    except ValueError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)


# Defer import to avoid circular dependency
def _register_commands():
    from ffmpegx.cli.cover import cover_command
    from ffmpegx.cli.frames import frames_command
    from ffmpegx.cli.probe import probe_command
    from ffmpegx.cli.version import version_command

    main.add_command(cover_command)
    main.add_command(frames_command)
    main.add_command(probe_command)
    main.add_command(version_command)


_register_commands()
