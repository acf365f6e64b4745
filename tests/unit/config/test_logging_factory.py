"""Tests for applying --log-* options to the logging config."""

from pathlib import Path
from unittest.mock import patch

import pytest

from convertbot.config.logging_factory import (
    configure_logging_from_cli,
    with_cli_overrides,
)
from convertbot.config.models import LoggingConfig


class TestWithCliOverrides:
    def test_no_overrides_keeps_base(self) -> None:
        base = LoggingConfig(level="warning", format="json", max_bytes=1024)
        result = with_cli_overrides(base)

        assert result == base
        assert result is not base

    def test_overrides_win(self, tmp_path: Path) -> None:
        base = LoggingConfig(level="warning", backup_count=2)
        result = with_cli_overrides(
            base,
            level="debug",
            file=tmp_path / "convertbot.log",
            json_output=True,
        )

        assert result.level == "debug"
        assert result.file == tmp_path / "convertbot.log"
        assert result.format == "json"
        assert result.backup_count == 2

    def test_json_flag_off_keeps_file_format(self) -> None:
        """Without --log-json a json format from the file stays."""
        base = LoggingConfig(format="json")
        assert with_cli_overrides(base, json_output=False).format == "json"

    def test_invalid_override_raises(self) -> None:
        with pytest.raises(ValueError, match="level must be one of"):
            with_cli_overrides(LoggingConfig(), level="loud")


class TestConfigureLoggingFromCli:
    def test_installs_merged_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text('[logging]\nlevel = "error"\nformat = "json"\n')

        with patch("convertbot.logging.configure_logging") as mock_configure:
            result = configure_logging_from_cli(config_path=config_file, level="debug")

        installed = mock_configure.call_args[0][0]
        assert installed is result
        assert installed.level == "debug"
        assert installed.format == "json"
