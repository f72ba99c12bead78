"""Fixtures for CLI tests."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep CLI invocations from replacing the test run's log handlers."""
    with patch("ffmpegx.cli._configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
