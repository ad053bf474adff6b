"""Unit tests for CLI commands.

This module tests the command-line interface for sip-test-util including
the configuration commands, reason phrase lookup and option handling.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from sip_test_util.cli.main import cli
from sip_test_util.config import get_polling_defaults


@pytest.fixture(autouse=True)
def mock_configure_logging(monkeypatch):
    """Keep CLI invocations from replacing the root logger's handlers."""
    for name in ("SIP_TEST_POLL_INTERVAL", "SIP_TEST_AWAIT_TIMEOUT", "SIP_TEST_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    with patch("sip_test_util.cli.main.configure_logging") as mock_config:
        yield mock_config


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "polling": {"poll_interval": 0.05, "timeout": 3},
        "logging": {"level": "WARNING", "log_file": str(tmp_path / "sip.log")},
    }))
    return path


class TestMainCLI:
    """Test cases for main CLI entry point."""

    def test_cli_help(self):
        """Test main CLI help output."""
        # Arrange
        runner = CliRunner()

        # Act
        result = runner.invoke(cli, ["--help"])

        # Assert
        assert result.exit_code == 0
        assert "SIP Test Utility" in result.output
        assert "--verbose" in result.output
        assert "--version" in result.output

    def test_cli_version(self):
        runner = CliRunner()

        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "sip-test-util" in result.output
        assert "version" in result.output.lower()

    def test_cli_version_command(self):
        runner = CliRunner()

        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert "sip-test-util version 0.1.0" in result.output

    def test_verbose_flag_configures_logging(self, mock_configure_logging):
        """Test --verbose flag enables DEBUG logging."""
        # Arrange
        runner = CliRunner()

        # Act
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["--verbose", "version"])

        # Assert
        assert result.exit_code == 0
        mock_configure_logging.assert_called_once()
        assert mock_configure_logging.call_args[1]["level"] == "DEBUG"

    def test_no_verbose_flag_uses_config_level(self, mock_configure_logging, config_file):
        runner = CliRunner()

        result = runner.invoke(cli, ["--config", str(config_file), "version"])

        assert result.exit_code == 0
        assert mock_configure_logging.call_args[1]["level"] == "WARNING"

    def test_log_file_option_overrides_config(
        self, mock_configure_logging, config_file, tmp_path
    ):
        runner = CliRunner()
        log_file = tmp_path / "cli.log"

        result = runner.invoke(
            cli, ["--config", str(config_file), "--log-file", str(log_file), "version"]
        )

        assert result.exit_code == 0
        assert mock_configure_logging.call_args[1]["log_file"] == log_file

    def test_config_installs_polling_defaults(self, config_file):
        """Test the loaded polling section becomes the process default."""
        runner = CliRunner()

        result = runner.invoke(cli, ["--config", str(config_file), "version"])

        assert result.exit_code == 0
        assert get_polling_defaults().poll_interval == 0.05
        assert get_polling_defaults().timeout == 3

    def test_invalid_config_exits_with_error(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{oops")
        runner = CliRunner()

        result = runner.invoke(cli, ["--config", str(bad), "version"])

        assert result.exit_code == 1
        assert "Error loading configuration" in result.output


class TestConfigCommands:
    """Test cases for config command group."""

    def test_validate_valid_file(self, config_file):
        # Arrange
        runner = CliRunner()

        # Act
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "validate", str(config_file)])

        # Assert
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Poll interval: 0.05s" in result.output
        assert "Level:         WARNING" in result.output

    def test_validate_invalid_file(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"polling": {"poll_interval": 2, "timeout": 1}}))
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "validate", str(bad)])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output

    def test_validate_missing_file(self, tmp_path):
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "validate", str(tmp_path / "nope.json")])

        assert result.exit_code != 0

    def test_show_defaults(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "Poll interval: 0.1s" in result.output
        assert "Timeout:       10.0s" in result.output
        assert "Redact creds:  True" in result.output


class TestReasonCommand:
    """Test cases for the reason phrase lookup."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("180", "180 Ringing (RINGING)"),
            ("486", "486 Busy Here (BUSY_HERE)"),
            ("200", "200 OK (OK)"),
        ],
    )
    def test_known_code(self, code, expected):
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["reason", code])

        assert result.exit_code == 0
        assert expected in result.output

    def test_unknown_code(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["reason", "299"])

        assert result.exit_code == 1
        assert "unknown status code" in result.output

    def test_non_numeric_code(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["reason", "ringing"])

        assert result.exit_code == 2
