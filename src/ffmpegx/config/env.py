"""Reader for FFMPEGX_* environment variables.

A variable that is set but unusable is logged and ignored, so the value
falls back to the config file or the defaults instead of failing startup.
An empty variable counts as unset.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "FFMPEGX_"


class EnvReader:
    """Reads ffmpegx settings from the environment.

    Names are passed without the prefix. Tests inject a mapping instead of
    patching os.environ.

    Example:
        reader = EnvReader(env={"FFMPEGX_FRAMES_QUALITY": "4"})
        reader.get_int("FRAMES_QUALITY")  # Returns 4
    """

    def __init__(
        self, env: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX
    ) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ
        self.prefix = prefix

    def _raw(self, name: str) -> str | None:
        value = self._env.get(self.prefix + name)
        if value is None:
            return None
        return value.strip() or None

    def _ignore(self, name: str, value: str, reason: str) -> None:
        logger.warning("Ignoring %s%s=%r: %s", self.prefix, name, value, reason)

    def get_str(self, name: str) -> str | None:
        return self._raw(name)

    def get_choice(self, name: str, choices: Collection[str]) -> str | None:
        """Get a case-insensitive value that must be one of ``choices``."""
        value = self._raw(name)
        if value is None:
            return None
        if value.lower() not in choices:
            self._ignore(name, value, f"expected one of {', '.join(sorted(choices))}")
            return None
        return value.lower()

    def get_int(self, name: str, minimum: int | None = None) -> int | None:
        """Get an integer, ignoring non-numbers and values below ``minimum``."""
        value = self._raw(name)
        if value is None:
            return None
        try:
            number = int(value)
        except ValueError:
            self._ignore(name, value, "not an integer")
            return None
        if minimum is not None and number < minimum:
            self._ignore(name, value, f"must be at least {minimum}")
            return None
        return number

    def get_path(self, name: str) -> Path | None:
        """Get a path with ``~`` expanded. Existence is not checked here."""
        value = self._raw(name)
        return Path(value).expanduser() if value is not None else None
