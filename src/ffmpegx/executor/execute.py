"""Configure-then-run helper for one-off ffmpeg invocations."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager

from ffmpegx.command.builder import FFmpegCommand
from ffmpegx.executor.events import Listener
from ffmpegx.executor.runner import ExecutionResult, FFmpegRunner

logger = logging.getLogger(__name__)

Configure = Callable[[FFmpegCommand, FFmpegRunner], Awaitable[object] | object]


@contextmanager
def listener_scope(runner: FFmpegRunner) -> Iterator[FFmpegRunner]:
    """Remove every listener registered on the runner when the block exits."""
    try:
        yield runner
    finally:
        runner.events.remove_all_listeners()


def _register(
    runner: FFmpegRunner,
    listeners: Mapping[str, Listener | Iterable[Listener]],
) -> None:
    for event, value in listeners.items():
        if callable(value):
            runner.events.on(event, value)
        else:
            for listener in value:
                runner.events.on(event, listener)


async def execute_ffmpeg(
    configure: Configure,
    *,
    runner: FFmpegRunner | None = None,
    listeners: Mapping[str, Listener | Iterable[Listener]] | None = None,
) -> ExecutionResult:
    """Build a command with ``configure`` and run it.

    A fresh FFmpegCommand is handed to ``configure(command, runner)``,
    which may be a plain function or a coroutine function and may attach
    listeners to ``runner.events``. If it raises, nothing is spawned.
    All listeners on the runner are removed once the run settles, whether
    it succeeded or not. That includes listeners a caller attached to a
    shared ``runner`` before the call, so register per-call listeners
    through ``listeners`` or ``configure`` instead.

    Args:
        configure: Callback that fills in the command.
        runner: Runner to use. A new FFmpegRunner is created when omitted.
        listeners: Optional mapping of event name to listener(s).

    Returns:
        ExecutionResult of the run.

    Raises:
        ConfigurationError: If the configured command cannot be rendered.
        SpawnError: If ffmpeg cannot be launched.
        ExecutionError: If ffmpeg exits with a non-zero status.
    """
    runner = runner or FFmpegRunner()
    command = FFmpegCommand()

    with listener_scope(runner):
        if listeners:
            _register(runner, listeners)

        outcome = configure(command, runner)
        if inspect.isawaitable(outcome):
            await outcome

        args = command.render()
        logger.debug("Executing ffmpeg command: %s", command)
        return await runner.execute(args)
