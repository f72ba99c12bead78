"""Lifecycle notifications for FFmpegRunner.

A RunnerEvents registry maps event names to listener callables. Listeners
receive a single payload:

- ``start``: the rendered command line (str)
- ``stderr``: one completed stderr line (str)
- ``progress``: a ProgressSample parsed from a stderr line
- ``end``: the ExecutionResult of a successful run
- ``error``: the exception that ended the run

Listener exceptions are logged and never propagate into the runner.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

START = "start"
STDERR = "stderr"
PROGRESS = "progress"
END = "end"
ERROR = "error"

VALID_EVENTS = frozenset((START, STDERR, PROGRESS, END, ERROR))

Listener = Callable[[Any], object]


def _check_event(event: str) -> None:
    if event not in VALID_EVENTS:
        raise ValueError(
            f"Unknown event '{event}'. Valid events: {', '.join(sorted(VALID_EVENTS))}"
        )


class RunnerEvents:
    """Registry of lifecycle listeners, invoked in registration order."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> Listener:
        """Register a listener for an event.

        Returns:
            The listener, so this can be used as a decorator factory target.

        Raises:
            ValueError: If the event name is unknown.
        """
        _check_event(event)
        self._listeners.setdefault(event, []).append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> bool:
        """Remove one registration of a listener.

        Returns:
            True if the listener was registered and has been removed.
        """
        _check_event(event)
        listeners = self._listeners.get(event, [])
        try:
            listeners.remove(listener)
        except ValueError:
            return False
        return True

    def remove_all_listeners(self, event: str | None = None) -> None:
        """Remove every listener for one event, or for all events."""
        if event is None:
            self._listeners.clear()
            return
        _check_event(event)
        self._listeners.pop(event, None)

    def listener_count(self, event: str | None = None) -> int:
        if event is None:
            return sum(len(v) for v in self._listeners.values())
        return len(self._listeners.get(event, []))

    def emit(self, event: str, payload: Any = None) -> None:
        """Invoke each listener registered for an event with the payload."""
        _check_event(event)
        # Copy so listeners may unregister themselves while being called
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener for '%s' event raised", event)
