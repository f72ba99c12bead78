"""Tests for configuration dataclasses."""

import pytest

from ffmpegx.config.models import FFmpegXConfig, FramesConfig, LoggingConfig


class TestLoggingConfig:
    """Tests for LoggingConfig validation."""

    def test_defaults(self) -> None:
        """Should default to info level text logging on stderr."""
        config = LoggingConfig()
        assert config.level == "info"
        assert config.format == "text"
        assert config.file is None

    def test_level_is_case_insensitive(self) -> None:
        """Should accept upper-case level names."""
        assert LoggingConfig(level="DEBUG").level == "DEBUG"

    def test_invalid_level(self) -> None:
        """Should reject unknown levels."""
        with pytest.raises(ValueError, match="level"):
            LoggingConfig(level="verbose")

    def test_invalid_format(self) -> None:
        """Should reject formats other than text and json."""
        with pytest.raises(ValueError, match="format"):
            LoggingConfig(format="xml")


class TestFramesConfig:
    """Tests for FramesConfig validation."""

    def test_defaults(self) -> None:
        """Should default to quality 2 and unbounded concurrency."""
        config = FramesConfig()
        assert config.quality == 2
        assert config.max_concurrency is None

    @pytest.mark.parametrize("quality", [0, 32])
    def test_quality_range(self, quality: int) -> None:
        """Should reject quality outside 1..31."""
        with pytest.raises(ValueError, match="quality"):
            FramesConfig(quality=quality)

    def test_max_concurrency_must_be_positive(self) -> None:
        """Should reject a concurrency bound below 1."""
        with pytest.raises(ValueError, match="max_concurrency"):
            FramesConfig(max_concurrency=0)


def test_root_config_defaults() -> None:
    """Should build nested defaults."""
    config = FFmpegXConfig()
    assert config.tools.ffmpeg is None
    assert config.tools.ffprobe is None
    assert config.frames.quality == 2
