"""Configuration management for ConvertBot.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (CONVERTBOT_*)
3. Config file (~/.convertbot/config.toml)
4. Default values (lowest priority)
"""

from convertbot.config.env import EnvReader
from convertbot.config.loader import (
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from convertbot.config.logging_factory import (
    configure_logging_from_cli,
    with_cli_overrides,
)
from convertbot.config.models import (
    ConversionConfig,
    ConvertBotConfig,
    LoggingConfig,
    NotificationConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "ConversionConfig",
    "ConvertBotConfig",
    "LoggingConfig",
    "NotificationConfig",
    "ToolPathsConfig",
    # Loader
    "EnvReader",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Logging
    "configure_logging_from_cli",
    "with_cli_overrides",
]
