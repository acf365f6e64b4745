"""Export sessions used by the native backend.

Provides:
- interface: ExportSession and ExportSessionFactory protocols
- presets: preset output types and codec arguments
- probe: ffprobe asset probing
- ffmpeg_session: ffmpeg implementation of the protocols
"""

from convertbot.export.ffmpeg_session import (
    FFmpegExportSession,
    FFmpegExportSessionFactory,
)
from convertbot.export.interface import (
    ExportSession,
    ExportSessionFactory,
    ExportStatus,
)
from convertbot.export.probe import AssetInfo, AssetProbeError, probe_asset

__all__ = [
    "AssetInfo",
    "AssetProbeError",
    "ExportSession",
    "ExportSessionFactory",
    "ExportStatus",
    "FFmpegExportSession",
    "FFmpegExportSessionFactory",
    "probe_asset",
]
