"""Data models for external tool detection."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ToolStatus(Enum):
    """Outcome of probing ffmpeg or ffprobe."""

    AVAILABLE = "available"
    MISSING = "missing"
    # Found, but "-version" failed or timed out
    ERROR = "error"


@dataclass
class ToolInfo:
    """What the doctor command knows about ffmpeg or ffprobe."""

    name: str
    path: Path | None = None
    version: str | None = None
    status: ToolStatus = ToolStatus.MISSING
    status_message: str | None = None

    def is_available(self) -> bool:
        return self.status == ToolStatus.AVAILABLE


@dataclass
class ToolRegistry:
    """Detection results for the two tools the native backend needs."""

    ffmpeg: ToolInfo = field(default_factory=lambda: ToolInfo(name="ffmpeg"))
    ffprobe: ToolInfo = field(default_factory=lambda: ToolInfo(name="ffprobe"))

    def get_missing_tools(self) -> list[str]:
        """Names of tools that are not available."""
        return [
            tool.name for tool in (self.ffmpeg, self.ffprobe) if not tool.is_available()
        ]
