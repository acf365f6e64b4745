"""Apply the group's --log-* options on top of the loaded logging config."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from convertbot.config.models import LoggingConfig


def with_cli_overrides(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    json_output: bool = False,
) -> LoggingConfig:
    """Return a copy of base with the given CLI options applied.

    Unset options keep the file/env value. The copy is validated again, so
    a bad override raises ValueError.
    """
    overrides: dict[str, object] = {}
    if level is not None:
        overrides["level"] = level
    if file is not None:
        overrides["file"] = file
    if json_output:
        overrides["format"] = "json"
    return dataclasses.replace(base, **overrides)


def configure_logging_from_cli(
    *,
    config_path: Path | None = None,
    level: str | None = None,
    file: Path | None = None,
    json_output: bool = False,
) -> LoggingConfig:
    """Load config, apply CLI overrides and install logging.

    Returns:
        The installed logging configuration.

    Raises:
        ValueError: If the merged configuration is invalid.
    """
    from convertbot.config.loader import get_config
    from convertbot.logging import configure_logging

    logging_config = with_cli_overrides(
        get_config(config_path).logging,
        level=level,
        file=file,
        json_output=json_output,
    )
    configure_logging(logging_config)
    return logging_config
