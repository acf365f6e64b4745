"""Integration test fixtures.

Provides tool availability checks and small media files generated with
ffmpeg's lavfi test sources. Tests that need real tools skip when they
are not installed.
"""

from __future__ import annotations

import shutil
import subprocess  # nosec B404 - subprocess is required for ffmpeg execution
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.config import Config

# Encoders built into every ffmpeg, so generation never needs libx264
_MEDIA_SPECS: dict[str, list[str]] = {
    "mov": [
        "-f", "lavfi", "-i", "testsrc=duration=1:size=160x120:rate=10",
        "-f", "lavfi", "-i", "sine=frequency=440:duration=1",
        "-c:v", "mpeg4", "-c:a", "aac", "-shortest",
    ],
    "avi": [
        "-f", "lavfi", "-i", "testsrc=duration=1:size=160x120:rate=10",
        "-f", "lavfi", "-i", "sine=frequency=440:duration=1",
        "-c:v", "mpeg4", "-c:a", "pcm_s16le", "-shortest",
    ],
    "wav": [
        "-f", "lavfi", "-i", "sine=frequency=440:duration=1",
        "-c:a", "pcm_s16le",
    ],
}  # fmt: skip


def _tool_available(name: str) -> bool:
    """Check if an external tool is available in PATH."""
    return shutil.which(name) is not None


@pytest.fixture(scope="session")
def ffmpeg_available() -> bool:
    """Check if ffmpeg is available."""
    return _tool_available("ffmpeg")


@pytest.fixture(scope="session")
def ffprobe_available() -> bool:
    """Check if ffprobe is available."""
    return _tool_available("ffprobe")


def pytest_configure(config: Config) -> None:
    """Register custom markers for tool requirements."""
    config.addinivalue_line(
        "markers",
        "requires_ffmpeg: mark test as requiring ffmpeg and ffprobe",
    )


@pytest.fixture
def generate_media(
    ffmpeg_available: bool, ffprobe_available: bool, tmp_path: Path
) -> Callable[[str], Path]:
    """Return a function generating a one-second sample file.

    Skips the test when ffmpeg or ffprobe is missing.
    """
    if not (ffmpeg_available and ffprobe_available):
        pytest.skip("ffmpeg and ffprobe are required")

    def _generate(name: str) -> Path:
        output = tmp_path / name
        spec = _MEDIA_SPECS[output.suffix.lstrip(".")]
        result = subprocess.run(  # nosec B603 - fixed arguments
            ["ffmpeg", "-hide_banner", "-y", *spec, str(output)],
            capture_output=True,
            text=True,
            timeout=60,
            check=False,
        )
        if result.returncode != 0:
            pytest.skip(f"ffmpeg could not generate {name}: {result.stderr[-200:]}")
        return output

    return _generate


@pytest.fixture(autouse=True)
def skip_cli_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI invocations from replacing the root logger handlers."""
    monkeypatch.setattr("convertbot.cli._logging_configured", True)
