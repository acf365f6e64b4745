"""ConvertBot doctor command for checking external tool health.

ffmpeg and ffprobe are both required by the native backend; the external
tool backend needs ffmpeg only.
"""

import json
import sys

import click

from convertbot.cli import load_cli_config
from convertbot.cli.exit_codes import ExitCode
from convertbot.tools import INSTALL_HINTS, ToolInfo, get_tool_registry


def _format_status(available: bool) -> str:
    """Format status for display."""
    return "✓" if available else "✗"


def _format_version(version: str | None) -> str:
    """Format version for display."""
    return version if version else "not found"


def _tool_json(tool: ToolInfo) -> dict:
    return {
        "name": tool.name,
        "status": tool.status.value,
        "path": str(tool.path) if tool.path else None,
        "version": tool.version,
        "message": tool.status_message,
    }


@click.command("doctor")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show tool paths and configuration",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON",
)
@click.pass_context
def doctor_command(ctx: click.Context, verbose: bool, json_output: bool) -> None:
    """Check ffmpeg and ffprobe availability.

    Exit codes:
      0 - All tools available
      61 - Required tools missing or broken
    """
    config = load_cli_config(ctx)
    registry = get_tool_registry(
        ffmpeg_path=config.tools.ffmpeg,
        ffprobe_path=config.tools.ffprobe,
    )
    missing = registry.get_missing_tools()

    if json_output:
        data = {
            "tools": [_tool_json(registry.ffmpeg), _tool_json(registry.ffprobe)],
            "missing": missing,
        }
        click.echo(json.dumps(data, indent=2))
        sys.exit(ExitCode.CRITICAL if missing else ExitCode.SUCCESS)

    click.echo("ConvertBot External Tool Health Check")
    click.echo("=" * 40)
    click.echo()

    for tool in (registry.ffmpeg, registry.ffprobe):
        status = _format_status(tool.is_available())
        version = _format_version(tool.version)
        path_info = f" ({tool.path})" if tool.path and verbose else ""
        click.echo(f"  {status} {tool.name + ':':<9}{version}{path_info}")
        if not tool.is_available():
            if tool.status_message:
                click.echo(f"    ├─ {tool.status_message}")
            click.echo(f"    └─ {INSTALL_HINTS[tool.name]}")

    if verbose:
        click.echo()
        click.echo("Configuration:")
        click.echo("-" * 20)
        if config.tools.ffmpeg:
            click.echo(f"  ffmpeg path: {config.tools.ffmpeg}")
        if config.tools.ffprobe:
            click.echo(f"  ffprobe path: {config.tools.ffprobe}")
        if not (config.tools.ffmpeg or config.tools.ffprobe):
            click.echo("  (using system PATH)")
        click.echo(
            f"  progress interval: {config.conversion.progress_interval_ms} ms"
        )

    click.echo()
    if missing:
        click.echo(f"⚠ Missing: {', '.join(missing)}. Conversions will fail.")
        sys.exit(ExitCode.CRITICAL)
    click.echo("✓ All tools available and ready.")
    sys.exit(ExitCode.SUCCESS)
