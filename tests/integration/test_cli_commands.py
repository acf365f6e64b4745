"""Integration tests for the convertbot CLI commands."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from convertbot.backends.external import ExternalToolBackend
from convertbot.backends.native import NativeTranscodeBackend
from convertbot.cli import main
from convertbot.cli.exit_codes import ExitCode
from convertbot.domain.enums import OutputFileType, PresetName
from convertbot.orchestrator import ConversionOrchestrator
from convertbot.tools.models import ToolInfo, ToolRegistry, ToolStatus


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_orchestrator(make_factory, make_session):
    """Patch the CLI orchestrator to use in-memory export sessions."""
    factory = make_factory(
        {
            PresetName.PASSTHROUGH: make_session(
                PresetName.PASSTHROUGH, {OutputFileType.MPEG4}
            )
        }
    )

    def build(config, event_context=None):
        return ConversionOrchestrator(
            NativeTranscodeBackend(factory, progress_interval=0.01),
            ExternalToolBackend(),
            event_context=event_context,
        )

    with patch(
        "convertbot.cli.convert.ConversionOrchestrator.from_config",
        side_effect=build,
    ):
        yield factory


class TestMainGroup:
    """Tests for the top-level command group."""

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("convert", "doctor", "formats"):
            assert command in result.output

    def test_unknown_command(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["transcode"])
        assert result.exit_code != 0
        assert "No such command" in result.output


class TestFormatsCommand:
    """Tests for convertbot formats."""

    def test_video_source(self, runner: CliRunner, media_dir: Path) -> None:
        result = runner.invoke(main, ["formats", str(media_dir / "clip.mov")])
        assert result.exit_code == 0
        assert "Kind: video" in result.output
        assert "Targets: M4V, MOV, MP4" in result.output

    def test_legacy_source_note(self, runner: CliRunner, media_dir: Path) -> None:
        result = runner.invoke(main, ["formats", str(media_dir / "clip.avi")])
        assert result.exit_code == 0
        assert "external ffmpeg tool" in result.output

    def test_json_output(self, runner: CliRunner, media_dir: Path) -> None:
        result = runner.invoke(
            main, ["formats", "--json", str(media_dir / "song.wav")]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["kind"] == "audio"
        assert data["backend"] == "native"
        assert data["targets"] == ["aac", "aiff", "caf", "m4a", "wav"]

    def test_declared_content_type(self, runner: CliRunner, media_dir: Path) -> None:
        result = runner.invoke(
            main,
            [
                "formats",
                "--content-type",
                "audio/mpeg",
                str(media_dir / "notes.txt"),
            ],
        )
        assert result.exit_code == 0
        assert "Kind: audio" in result.output

    def test_unknown_source(self, runner: CliRunner, media_dir: Path) -> None:
        result = runner.invoke(main, ["formats", str(media_dir / "notes.txt")])
        assert result.exit_code == ExitCode.INVALID_REQUEST
        assert "Not a recognized video or audio file." in result.output


class TestConvertCommand:
    """Tests for convertbot convert."""

    def test_success(
        self, runner: CliRunner, media_dir: Path, fake_orchestrator
    ) -> None:
        result = runner.invoke(
            main, ["convert", str(media_dir / "clip.mov"), "--to", "mp4"]
        )
        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert f"Saved to {media_dir / 'clip.mp4'}" in result.output
        assert fake_orchestrator.created == [PresetName.PASSTHROUGH]

    def test_target_is_case_insensitive(
        self, runner: CliRunner, media_dir: Path, fake_orchestrator
    ) -> None:
        result = runner.invoke(
            main, ["convert", str(media_dir / "clip.mov"), "--to", "MP4"]
        )
        assert result.exit_code == ExitCode.SUCCESS, result.output

    def test_invalid_target_choice(self, runner: CliRunner, media_dir: Path) -> None:
        result = runner.invoke(
            main, ["convert", str(media_dir / "clip.mov"), "--to", "mkv"]
        )
        assert result.exit_code == 2
        assert "Invalid value" in result.output

    def test_unknown_source(
        self, runner: CliRunner, media_dir: Path, fake_orchestrator
    ) -> None:
        result = runner.invoke(
            main, ["convert", str(media_dir / "notes.txt"), "--to", "mp4"]
        )
        assert result.exit_code == ExitCode.INVALID_REQUEST
        assert "is not a recognized video or audio file" in result.output
        assert fake_orchestrator.created == []

    def test_audio_to_video_rejected(
        self, runner: CliRunner, media_dir: Path, fake_orchestrator
    ) -> None:
        result = runner.invoke(
            main, ["convert", str(media_dir / "song.wav"), "--to", "mov"]
        )
        assert result.exit_code == ExitCode.INVALID_REQUEST
        assert "Cannot convert audio file" in result.output

    def test_no_compatible_preset(
        self, runner: CliRunner, media_dir: Path, fake_orchestrator
    ) -> None:
        """The fake passthrough session cannot write MOV."""
        result = runner.invoke(
            main, ["convert", str(media_dir / "clip.mov"), "--to", "mov"]
        )
        assert result.exit_code == ExitCode.NO_COMPATIBLE_PRESET
        assert "No compatible export preset available" in result.output

    def test_avi_without_ffmpeg(
        self, runner: CliRunner, media_dir: Path, fake_orchestrator
    ) -> None:
        with patch("convertbot.backends.external.find_tool", return_value=None):
            result = runner.invoke(
                main, ["convert", str(media_dir / "clip.avi"), "--to", "mp4"]
            )
        assert result.exit_code == ExitCode.TOOL_NOT_AVAILABLE
        assert "Required tool not available: ffmpeg." in result.output

    def test_invalid_config(
        self, runner: CliRunner, media_dir: Path, tmp_path: Path
    ) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text("[conversion]\nprogress_interval_ms = 0\n")
        result = runner.invoke(
            main,
            [
                "--config",
                str(config_file),
                "convert",
                str(media_dir / "clip.mov"),
                "--to",
                "mp4",
            ],
        )
        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "Invalid configuration" in result.output

    def test_wrongly_typed_config_value(
        self, runner: CliRunner, media_dir: Path, tmp_path: Path
    ) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text('[conversion]\nprogress_interval_ms = "fast"\n')
        result = runner.invoke(
            main,
            [
                "--config",
                str(config_file),
                "convert",
                str(media_dir / "clip.mov"),
                "--to",
                "mp4",
            ],
        )
        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "progress_interval_ms must be an integer" in result.output


def _registry(ffmpeg: ToolStatus, ffprobe: ToolStatus) -> ToolRegistry:
    return ToolRegistry(
        ffmpeg=ToolInfo(
            name="ffmpeg",
            path=Path("/usr/bin/ffmpeg") if ffmpeg is ToolStatus.AVAILABLE else None,
            version="6.1.1" if ffmpeg is ToolStatus.AVAILABLE else None,
            status=ffmpeg,
        ),
        ffprobe=ToolInfo(
            name="ffprobe",
            version="6.1.1" if ffprobe is ToolStatus.AVAILABLE else None,
            status=ffprobe,
            status_message=(
                None if ffprobe is ToolStatus.AVAILABLE else "ffprobe not found in PATH"
            ),
        ),
    )


class TestDoctorCommand:
    """Tests for convertbot doctor."""

    def test_all_available(self, runner: CliRunner) -> None:
        with patch(
            "convertbot.cli.doctor.get_tool_registry",
            return_value=_registry(ToolStatus.AVAILABLE, ToolStatus.AVAILABLE),
        ):
            result = runner.invoke(main, ["doctor"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "✓ ffmpeg:  6.1.1" in result.output
        assert "All tools available" in result.output

    def test_missing_tool(self, runner: CliRunner) -> None:
        with patch(
            "convertbot.cli.doctor.get_tool_registry",
            return_value=_registry(ToolStatus.AVAILABLE, ToolStatus.MISSING),
        ):
            result = runner.invoke(main, ["doctor"])

        assert result.exit_code == ExitCode.CRITICAL
        assert "✗ ffprobe: not found" in result.output
        assert "ffprobe not found in PATH" in result.output
        assert "Missing: ffprobe" in result.output

    def test_verbose_shows_paths(self, runner: CliRunner) -> None:
        with patch(
            "convertbot.cli.doctor.get_tool_registry",
            return_value=_registry(ToolStatus.AVAILABLE, ToolStatus.AVAILABLE),
        ):
            result = runner.invoke(main, ["doctor", "-v"])

        assert "(/usr/bin/ffmpeg)" in result.output
        assert "(using system PATH)" in result.output
        assert "progress interval: 100 ms" in result.output

    def test_json(self, runner: CliRunner) -> None:
        with patch(
            "convertbot.cli.doctor.get_tool_registry",
            return_value=_registry(ToolStatus.MISSING, ToolStatus.MISSING),
        ):
            result = runner.invoke(main, ["doctor", "--json"])

        assert result.exit_code == ExitCode.CRITICAL
        data = json.loads(result.output)
        assert data["missing"] == ["ffmpeg", "ffprobe"]
        assert data["tools"][0]["status"] == "missing"

    def test_tool_path_options(self, runner: CliRunner) -> None:
        with patch(
            "convertbot.cli.doctor.get_tool_registry",
            return_value=_registry(ToolStatus.AVAILABLE, ToolStatus.AVAILABLE),
        ) as mock_registry:
            result = runner.invoke(
                main, ["--ffmpeg-path", "/opt/ffmpeg/bin/ffmpeg", "doctor"]
            )

        assert result.exit_code == ExitCode.SUCCESS
        assert mock_registry.call_args.kwargs["ffmpeg_path"] == Path(
            "/opt/ffmpeg/bin/ffmpeg"
        )
