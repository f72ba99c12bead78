"""Shared test fixtures for ffmpegx."""

import json
import os
import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from ffmpegx.config import clear_config_cache


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def ffprobe_fixtures_dir() -> Path:
    """Return the path to the ffprobe fixtures directory."""
    return Path(__file__).parent / "fixtures" / "ffprobe"


def load_ffprobe_fixture(name: str) -> dict:
    """Load an ffprobe JSON fixture by name.

    Args:
        name: Name of the fixture file (without .json extension).

    Returns:
        Parsed JSON data from the fixture.
    """
    fixture_path = Path(__file__).parent / "fixtures" / "ffprobe" / f"{name}.json"
    return json.loads(fixture_path.read_text())


@pytest.fixture
def h264_aac_fixture() -> dict:
    """Load the 10s 25fps H.264 + AAC ffprobe fixture."""
    return load_ffprobe_fixture("h264_aac_mp4")


@pytest.fixture
def mkv_without_frame_count_fixture() -> dict:
    """Load the HEVC Matroska fixture that has no nb_frames."""
    return load_ffprobe_fixture("mkv_without_frame_count")


@pytest.fixture
def audio_only_fixture() -> dict:
    """Load the audio-only ffprobe fixture."""
    return load_ffprobe_fixture("audio_only")


@pytest.fixture
def python_tool() -> str:
    """Return the running interpreter, used as a stand-in for ffmpeg.

    Tests pass ``-c <script>`` as arguments so the runner spawns a real
    process without requiring ffmpeg to be installed.
    """
    return sys.executable


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path):
    """Point configuration at an empty temp directory for every test.

    Keeps a developer's ~/.ffmpegx/config.toml and FFMPEGX_* variables out
    of the test run.
    """
    env = {k: v for k, v in os.environ.items() if not k.startswith("FFMPEGX_")}
    env["FFMPEGX_CONFIG_PATH"] = str(temp_dir / "config.toml")
    clear_config_cache()
    with patch.dict(os.environ, env, clear=True):
        yield temp_dir
    clear_config_cache()
