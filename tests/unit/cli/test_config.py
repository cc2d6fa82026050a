"""Unit tests for config CLI commands.

Tests for the saferm config show and saferm config init commands.
"""

from pathlib import Path

import pytest
from saferm.cli.main import app
from saferm.core.config import load_config
from typer.testing import CliRunner

runner = CliRunner()

pytestmark = pytest.mark.usefixtures("wide_console")


class TestConfigShow:
    """Tests for saferm config show."""

    def test_defaults(self) -> None:
        """Without a file, the defaults are shown."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "retention_days" in result.output
        assert "30" in result.output
        assert "defaults (no config file)" in result.output

    def test_from_file(self, isolated_config_home: Path) -> None:
        """Values from the config file are shown with their source."""
        config_file = isolated_config_home / "saferm" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("retention_days = 9\nsafe_mode = true\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "9" in result.output
        assert "true" in result.output
        assert str(config_file) in result.output

    def test_invalid_file(self, isolated_config_home: Path) -> None:
        """An invalid config file is an error."""
        config_file = isolated_config_home / "saferm" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("bogus = 1\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
        assert "Invalid config content" in result.output


class TestConfigInit:
    """Tests for saferm config init."""

    def test_writes_defaults(self, isolated_config_home: Path) -> None:
        """init writes a loadable config file."""
        result = runner.invoke(app, ["config", "init"])

        config_file = isolated_config_home / "saferm" / "config.toml"
        assert result.exit_code == 0
        assert "Config written" in result.output
        assert load_config(config_file).retention_days == 30

    def test_refuses_to_overwrite(self, isolated_config_home: Path) -> None:
        """An existing file is kept without --force."""
        config_file = isolated_config_home / "saferm" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("retention_days = 9\n")

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert config_file.read_text() == "retention_days = 9\n"

    def test_force_overwrites(self, isolated_config_home: Path) -> None:
        """--force replaces an existing file."""
        config_file = isolated_config_home / "saferm" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("retention_days = 9\n")

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert load_config(config_file).retention_days == 30
