"""Configuration management for ffmpegx.

Configuration is layered with precedence handling:
1. Keyword overrides (highest priority)
2. Environment variables (FFMPEGX_*)
3. Config file (~/.ffmpegx/config.toml)
4. Default values (lowest priority)
"""

from ffmpegx.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from ffmpegx.config.env import EnvReader
from ffmpegx.config.loader import (
    ConfigFileError,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
    load_toml_file,
)
from ffmpegx.config.models import (
    FFmpegXConfig,
    FramesConfig,
    LoggingConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "FFmpegXConfig",
    "FramesConfig",
    "LoggingConfig",
    "ToolPathsConfig",
    # Loader
    "ConfigFileError",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "load_toml_file",
    # Layering
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "source_from_env",
    "source_from_file",
]
