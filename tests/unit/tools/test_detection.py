"""Tests for executable discovery."""

import os
import stat
from pathlib import Path

import pytest

from ffmpegx.tools import detection
from ffmpegx.tools.detection import find_executable, resolve_tool_path


def _make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


@pytest.fixture
def no_path_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make the PATH lookup find nothing."""
    monkeypatch.setattr(detection.shutil, "which", lambda name: None)


class TestFindExecutable:
    """Tests for find_executable()."""

    def test_prefers_path(
        self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        """Should return the PATH match first."""
        on_path = _make_executable(temp_dir / "path" / "ffmpeg")
        monkeypatch.setattr(detection.shutil, "which", lambda name: str(on_path))
        assert find_executable("ffmpeg") == on_path.resolve()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executable bits")
    def test_local_bin_directory(
        self, no_path_lookup, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        """Should search ./bin after PATH."""
        local = _make_executable(temp_dir / "bin" / "ffmpeg")
        _make_executable(temp_dir / "ffmpeg")
        monkeypatch.chdir(temp_dir)
        assert find_executable("ffmpeg") == local.resolve()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executable bits")
    def test_working_directory(
        self, no_path_lookup, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        """Should search the working directory last."""
        local = _make_executable(temp_dir / "ffprobe")
        monkeypatch.chdir(temp_dir)
        assert find_executable("ffprobe") == local.resolve()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executable bits")
    def test_ignores_non_executable(
        self, no_path_lookup, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        """Should skip files without the executable bit."""
        (temp_dir / "ffmpeg").write_text("not a program")
        monkeypatch.chdir(temp_dir)
        assert find_executable("ffmpeg") is None


class TestResolveToolPath:
    """Tests for resolve_tool_path()."""

    def test_configured_path_wins(self, temp_dir: Path) -> None:
        """Should return an existing configured path as-is."""
        configured = _make_executable(temp_dir / "custom-ffmpeg")
        assert resolve_tool_path("ffmpeg", configured) == str(configured)

    def test_missing_configured_path_falls_back(
        self, no_path_lookup, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        """Should fall back to discovery when the configured path is missing."""
        monkeypatch.chdir(temp_dir)
        assert resolve_tool_path("ffmpeg", temp_dir / "missing") == "ffmpeg"

    def test_bare_name_when_not_found(
        self, no_path_lookup, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        """Should return the bare name so the OS reports the spawn error."""
        monkeypatch.chdir(temp_dir)
        assert resolve_tool_path("ffprobe") == "ffprobe"
