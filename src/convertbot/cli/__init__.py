"""CLI module for ConvertBot."""

import logging
from pathlib import Path

import click

from convertbot.cli.exit_codes import ExitCode
from convertbot.config.models import ConvertBotConfig

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options.

    Args:
        config_path: Config file override.
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    from convertbot.config.logging_factory import configure_logging_from_cli

    configure_logging_from_cli(
        config_path=config_path,
        level=log_level,
        file=log_file,
        json_output=log_json,
    )
    _logging_configured = True


def load_cli_config(ctx: click.Context) -> ConvertBotConfig:
    """Load configuration with the group's overrides applied.

    Exits with CONFIG_ERROR when a merged value is invalid.
    """
    from convertbot.config.loader import get_config

    options = ctx.obj or {}
    try:
        return get_config(
            options.get("config_path"),
            ffmpeg_path=options.get("ffmpeg_path"),
            ffprobe_path=options.get("ffprobe_path"),
        )
    except ValueError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from e


@click.group()
@click.version_option(package_name="convertbot")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.convertbot/config.toml).",
)
@click.option(
    "--ffmpeg-path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="ffmpeg executable (overrides config and CONVERTBOT_FFMPEG_PATH).",
)
@click.option(
    "--ffprobe-path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="ffprobe executable (overrides config and CONVERTBOT_FFPROBE_PATH).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    ffmpeg_path: Path | None,
    ffprobe_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """ConvertBot - Convert a video or audio file to another format."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["ffmpeg_path"] = ffmpeg_path
    ctx.obj["ffprobe_path"] = ffprobe_path

    try:
        _configure_logging(config_path, log_level, log_file, log_json)
    except ValueError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)


# Defer import to avoid circular dependency
def _register_commands():
    from convertbot.cli.convert import convert_command
    from convertbot.cli.doctor import doctor_command
    from convertbot.cli.formats import formats_command

    main.add_command(convert_command)
    main.add_command(doctor_command)
    main.add_command(formats_command)


_register_commands()
