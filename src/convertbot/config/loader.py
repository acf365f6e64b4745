"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (CONVERTBOT_*)
3. Config file (~/.convertbot/config.toml)
4. Default values

Environment variables:
- CONVERTBOT_FFMPEG_PATH: Path to ffmpeg executable
- CONVERTBOT_FFPROBE_PATH: Path to ffprobe executable
- CONVERTBOT_PROGRESS_INTERVAL_MS: Progress sampling interval
- CONVERTBOT_PROBE_TIMEOUT: ffprobe timeout in seconds
- CONVERTBOT_LOG_LEVEL: Log level
- CONVERTBOT_CONFIG_PATH: Path to config file (overrides default location)
- CONVERTBOT_DATA_DIR: Path to data directory (overrides ~/.convertbot/)
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from convertbot.config.env import EnvReader
from convertbot.config.models import (
    ConversionConfig,
    ConvertBotConfig,
    LoggingConfig,
    NotificationConfig,
    ToolPathsConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".convertbot"
CONFIG_FILE_NAME = "config.toml"


def get_data_dir(env: EnvReader | None = None) -> Path:
    """Get the ConvertBot data directory.

    Can be overridden by the CONVERTBOT_DATA_DIR environment variable.

    Returns:
        Path to the data directory (~/.convertbot/ by default).
    """
    env = env or EnvReader()
    override = env.get_path("DATA_DIR", must_exist=False)
    return override if override is not None else DEFAULT_CONFIG_DIR


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the config file path.

    CONVERTBOT_CONFIG_PATH wins over the data directory.
    """
    env = env or EnvReader()
    override = env.get_path("CONFIG_PATH", must_exist=False)
    if override is not None:
        return override
    return get_data_dir(env) / CONFIG_FILE_NAME


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses the default location.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist or
        cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def _section(file_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = file_config.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table")
    return section


def _file_path(section: dict[str, Any], key: str) -> Path | None:
    value = section.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a path string, got {value!r}")
    return Path(value).expanduser()


def _file_int(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    # bool is an int subclass; "true" is never a valid count
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key} must be an integer, got {value!r}") from e


def _file_bool(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _file_str(section: dict[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {value!r}")
    return value


def get_config(
    config_path: Path | None = None,
    *,
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    env: EnvReader | None = None,
) -> ConvertBotConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides CONVERTBOT_CONFIG_PATH).
        ffmpeg_path: ``--ffmpeg-path`` override.
        ffprobe_path: ``--ffprobe-path`` override.
        env: Environment reader (defaults to os.environ).

    Returns:
        ConvertBotConfig with merged configuration.

    Raises:
        ValueError: If a file value has the wrong type or a merged value
            fails validation.
    """
    env = env or EnvReader()
    file_config = load_config_file(config_path or get_default_config_path(env))

    tools_file = _section(file_config, "tools")
    tools = ToolPathsConfig(
        ffmpeg=(
            ffmpeg_path
            or env.get_path("FFMPEG_PATH")
            or _file_path(tools_file, "ffmpeg")
        ),
        ffprobe=(
            ffprobe_path
            or env.get_path("FFPROBE_PATH")
            or _file_path(tools_file, "ffprobe")
        ),
    )

    conversion_file = _section(file_config, "conversion")
    conversion = ConversionConfig(
        progress_interval_ms=env.get_int(
            "PROGRESS_INTERVAL_MS",
            _file_int(conversion_file, "progress_interval_ms", 100),
        ),
        probe_timeout=env.get_int(
            "PROBE_TIMEOUT", _file_int(conversion_file, "probe_timeout", 60)
        ),
    )

    notifications_file = _section(file_config, "notifications")
    notifications = NotificationConfig(
        reveal_file=_file_bool(notifications_file, "reveal_file", True),
        play_sound=_file_bool(notifications_file, "play_sound", True),
        post_notification=_file_bool(notifications_file, "post_notification", True),
    )

    logging_file = _section(file_config, "logging")
    logging_config = LoggingConfig(
        level=env.get_str("LOG_LEVEL", _file_str(logging_file, "level", "info")),
        file=_file_path(logging_file, "file"),
        format=_file_str(logging_file, "format", "text"),
        include_stderr=_file_bool(logging_file, "include_stderr", False),
        max_bytes=_file_int(logging_file, "max_bytes", 10_485_760),
        backup_count=_file_int(logging_file, "backup_count", 5),
    )

    return ConvertBotConfig(
        tools=tools,
        conversion=conversion,
        notifications=notifications,
        logging=logging_config,
    )
