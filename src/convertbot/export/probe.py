"""Source asset probing with ffprobe."""

import json
import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from dataclasses import dataclass
from pathlib import Path

from convertbot.core.subprocess_utils import run_command

logger = logging.getLogger(__name__)


class AssetProbeError(Exception):
    """Raised when a source asset cannot be probed."""


@dataclass(frozen=True)
class AssetInfo:
    """Stream layout of a source asset."""

    path: Path
    duration: float | None
    video_codecs: tuple[str, ...] = ()
    audio_codecs: tuple[str, ...] = ()

    @property
    def has_video(self) -> bool:
        """True if the asset has at least one real video stream."""
        return bool(self.video_codecs)

    @property
    def has_audio(self) -> bool:
        """True if the asset has at least one audio stream."""
        return bool(self.audio_codecs)


def parse_ffprobe_output(path: Path, data: dict) -> AssetInfo:
    """Build AssetInfo from ffprobe JSON output.

    Embedded cover art (attached_pic video streams) is not counted as video.

    Args:
        path: Probed file.
        data: Parsed ``-show_streams -show_format`` JSON.

    Returns:
        AssetInfo for the file.
    """
    video: list[str] = []
    audio: list[str] = []
    for stream in data.get("streams", []):
        codec = (stream.get("codec_name") or "unknown").casefold()
        codec_type = stream.get("codec_type")
        if codec_type == "video":
            if stream.get("disposition", {}).get("attached_pic"):
                continue
            video.append(codec)
        elif codec_type == "audio":
            audio.append(codec)

    duration: float | None = None
    raw_duration = data.get("format", {}).get("duration")
    if raw_duration not in (None, "N/A"):
        try:
            duration = float(raw_duration)
        except (TypeError, ValueError):
            logger.debug("Unparseable duration %r for %s", raw_duration, path)

    return AssetInfo(
        path=path,
        duration=duration,
        video_codecs=tuple(video),
        audio_codecs=tuple(audio),
    )


def probe_asset(ffprobe_path: Path, path: Path, timeout: int = 60) -> AssetInfo:
    """Probe a source file.

    Args:
        ffprobe_path: ffprobe executable.
        path: Source file.
        timeout: Seconds before the probe is abandoned.

    Returns:
        AssetInfo for the file.

    Raises:
        AssetProbeError: If ffprobe fails or prints unusable output.
    """
    try:
        stdout, stderr, rc = run_command(
            [
                ffprobe_path,
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                path,
            ],
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise AssetProbeError(
            f"ffprobe timed out for {path.name} after {e.timeout}s"
        ) from e
    except OSError as e:
        raise AssetProbeError(f"Could not run ffprobe: {e}") from e

    if rc != 0:
        raise AssetProbeError(
            f"Could not read {path.name}: {stderr.strip() or f'ffprobe exit {rc}'}"
        )

    try:
        data = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise AssetProbeError(f"Invalid ffprobe output for {path.name}: {e}") from e

    if "streams" not in data:
        raise AssetProbeError(
            f"Missing 'streams' in ffprobe output for {path.name}. "
            "File may be corrupted or not a valid media file."
        )

    return parse_ffprobe_output(path, data)
