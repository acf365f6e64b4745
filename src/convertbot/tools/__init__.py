"""External tool detection for ConvertBot.

Provides:
- detection: locating ffmpeg/ffprobe and reading their versions
- ffmpeg_progress: parsing ffmpeg -progress output
- models: ToolInfo, ToolRegistry, ToolStatus
"""

from convertbot.tools.detection import (
    INSTALL_HINTS,
    detect_tool,
    find_tool,
    get_tool_registry,
)
from convertbot.tools.ffmpeg_progress import FFmpegProgress, ProgressBlockReader
from convertbot.tools.models import ToolInfo, ToolRegistry, ToolStatus

__all__ = [
    "INSTALL_HINTS",
    "FFmpegProgress",
    "ProgressBlockReader",
    "ToolInfo",
    "ToolRegistry",
    "ToolStatus",
    "detect_tool",
    "find_tool",
    "get_tool_registry",
]
