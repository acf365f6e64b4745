"""External tool detection.

Locates ffmpeg and ffprobe (configured path first, then PATH) and reads
the version from their banners for the doctor command.
"""

import logging
import os
import re
import shutil
import subprocess  # nosec B404 - subprocess is required for tool detection
from pathlib import Path

from convertbot.core.subprocess_utils import run_command
from convertbot.tools.models import ToolInfo, ToolRegistry, ToolStatus

logger = logging.getLogger(__name__)

# Timeout for version detection commands (seconds)
DETECTION_TIMEOUT = 10

_VERSION_PATTERN = re.compile(r"version\s+(\S+)")

INSTALL_HINTS = {
    "ffmpeg": (
        "Install ffmpeg (https://ffmpeg.org/download.html) or set "
        "CONVERTBOT_FFMPEG_PATH / [tools] ffmpeg in config.toml."
    ),
    "ffprobe": (
        "ffprobe ships with ffmpeg (https://ffmpeg.org/download.html); set "
        "CONVERTBOT_FFPROBE_PATH / [tools] ffprobe in config.toml to override."
    ),
}


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to an executable file, or None if not found.
    """
    if configured_path:
        if configured_path.is_file() and os.access(configured_path, os.X_OK):
            return configured_path
        logger.warning(
            "Configured path for %s is not an executable file: %s",
            name,
            configured_path,
        )

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def detect_tool(name: str, configured_path: Path | None = None) -> ToolInfo:
    """Detect a tool and its version.

    Args:
        name: Tool name.
        configured_path: Optional configured path to the tool.

    Returns:
        ToolInfo with detection results.
    """
    info = ToolInfo(name=name)

    path = find_tool(name, configured_path)
    if path is None:
        info.status = ToolStatus.MISSING
        info.status_message = f"{name} not found in PATH"
        return info

    info.path = path

    try:
        stdout, stderr, rc = run_command(
            [path, "-version"], timeout=DETECTION_TIMEOUT
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        info.status = ToolStatus.ERROR
        info.status_message = f"Failed to run {name}: {e}"
        return info

    if rc != 0:
        info.status = ToolStatus.ERROR
        info.status_message = f"Failed to get {name} version: {stderr.strip()}"
        return info

    version_match = _VERSION_PATTERN.search(stdout)
    if version_match:
        info.version = version_match.group(1)

    info.status = ToolStatus.AVAILABLE
    return info


def get_tool_registry(
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
) -> ToolRegistry:
    """Detect ffmpeg and ffprobe.

    Args:
        ffmpeg_path: Configured ffmpeg path.
        ffprobe_path: Configured ffprobe path.

    Returns:
        ToolRegistry with detection results for both tools.
    """
    return ToolRegistry(
        ffmpeg=detect_tool("ffmpeg", ffmpeg_path),
        ffprobe=detect_tool("ffprobe", ffprobe_path),
    )
