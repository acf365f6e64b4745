"""Configuration data models.

This module defines dataclasses for ConvertBot configuration options.
Conversion options (target, compression, quality) are not configuration;
they travel with each request.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class ConversionConfig:
    """Runtime settings for the conversion backends."""

    # Interval between progress samples of a native export (milliseconds)
    progress_interval_ms: int = 100

    # Timeout for probing the source asset with ffprobe (seconds)
    probe_timeout: int = 60

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.progress_interval_ms <= 0:
            raise ValueError(
                f"progress_interval_ms must be positive, got {self.progress_interval_ms}"
            )
        if self.probe_timeout <= 0:
            raise ValueError(
                f"probe_timeout must be positive, got {self.probe_timeout}"
            )

    @property
    def progress_interval(self) -> float:
        """Progress sampling interval in seconds."""
        return self.progress_interval_ms / 1000


@dataclass
class NotificationConfig:
    """Which completion side effects run after a successful conversion."""

    reveal_file: bool = True
    play_sound: bool = True
    post_notification: bool = True


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class ConvertBotConfig:
    """Top-level configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
