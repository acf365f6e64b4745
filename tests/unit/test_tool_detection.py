"""Unit tests for tool detection."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from convertbot.tools.detection import (
    detect_tool,
    find_tool,
    get_tool_registry,
)
from convertbot.tools.models import ToolInfo, ToolRegistry, ToolStatus

FFMPEG_BANNER = (
    "ffmpeg version 6.1.1-3ubuntu5 Copyright (c) 2000-2023 the FFmpeg developers\n"
    "built with gcc 13 (Ubuntu 13.2.0-23ubuntu3)\n"
)


class TestFindTool:
    """Tests for find_tool()."""

    def test_configured_executable_wins(self, tmp_path: Path):
        tool = tmp_path / "ffmpeg"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)
        with patch("convertbot.tools.detection.shutil.which") as mock_which:
            assert find_tool("ffmpeg", tool) == tool
        mock_which.assert_not_called()

    def test_bad_configured_path_falls_back_to_path(self, tmp_path: Path):
        with patch(
            "convertbot.tools.detection.shutil.which", return_value="/usr/bin/ffmpeg"
        ):
            assert find_tool("ffmpeg", tmp_path / "missing") == Path("/usr/bin/ffmpeg")

    def test_not_found(self):
        with patch("convertbot.tools.detection.shutil.which", return_value=None):
            assert find_tool("ffmpeg") is None


class TestDetectTool:
    """Tests for detect_tool()."""

    def test_available(self):
        with (
            patch(
                "convertbot.tools.detection.find_tool",
                return_value=Path("/usr/bin/ffmpeg"),
            ),
            patch(
                "convertbot.tools.detection.run_command",
                return_value=(FFMPEG_BANNER, "", 0),
            ) as mock_run,
        ):
            info = detect_tool("ffmpeg")

        assert info.status is ToolStatus.AVAILABLE
        assert info.path == Path("/usr/bin/ffmpeg")
        assert info.version == "6.1.1-3ubuntu5"
        assert mock_run.call_args[0][0] == [Path("/usr/bin/ffmpeg"), "-version"]

    def test_missing(self):
        with patch("convertbot.tools.detection.find_tool", return_value=None):
            info = detect_tool("ffprobe")

        assert info.status is ToolStatus.MISSING
        assert "not found" in info.status_message
        assert not info.is_available()

    def test_nonzero_exit_is_error(self):
        with (
            patch(
                "convertbot.tools.detection.find_tool",
                return_value=Path("/usr/bin/ffmpeg"),
            ),
            patch(
                "convertbot.tools.detection.run_command",
                return_value=("", "library not loaded", 1),
            ),
        ):
            info = detect_tool("ffmpeg")

        assert info.status is ToolStatus.ERROR
        assert "library not loaded" in info.status_message

    @pytest.mark.parametrize(
        "error",
        [
            PermissionError("Permission denied"),
            subprocess.TimeoutExpired(cmd="ffmpeg", timeout=10),
        ],
    )
    def test_run_failure_is_error(self, error):
        with (
            patch(
                "convertbot.tools.detection.find_tool",
                return_value=Path("/usr/bin/ffmpeg"),
            ),
            patch("convertbot.tools.detection.run_command", side_effect=error),
        ):
            info = detect_tool("ffmpeg")

        assert info.status is ToolStatus.ERROR
        assert info.status_message.startswith("Failed to run ffmpeg")

    def test_banner_without_version(self):
        with (
            patch(
                "convertbot.tools.detection.find_tool",
                return_value=Path("/usr/bin/ffmpeg"),
            ),
            patch(
                "convertbot.tools.detection.run_command",
                return_value=("custom build\n", "", 0),
            ),
        ):
            info = detect_tool("ffmpeg")

        assert info.status is ToolStatus.AVAILABLE
        assert info.version is None


class TestToolRegistry:
    """Tests for ToolRegistry helpers."""

    def test_get_tool_registry_uses_configured_paths(self):
        with patch("convertbot.tools.detection.detect_tool") as mock_detect:
            mock_detect.side_effect = lambda name, path: ToolInfo(name=name, path=path)
            registry = get_tool_registry(ffmpeg_path=Path("/opt/ffmpeg"))

        assert registry.ffmpeg.path == Path("/opt/ffmpeg")
        assert registry.ffprobe.path is None

    def test_missing_tools(self):
        registry = ToolRegistry(
            ffmpeg=ToolInfo(name="ffmpeg", status=ToolStatus.AVAILABLE)
        )
        assert registry.ffmpeg.is_available()
        assert not registry.ffprobe.is_available()
        assert registry.get_missing_tools() == ["ffprobe"]
