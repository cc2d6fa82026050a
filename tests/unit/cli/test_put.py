"""Unit tests for the put and purge commands."""

import time
from pathlib import Path

import pytest
from saferm.cli.main import app
from saferm.recycle.models import SECONDS_PER_DAY
from saferm.recycle.store import DATABASE_NAME
from typer.testing import CliRunner

runner = CliRunner()

pytestmark = pytest.mark.usefixtures("wide_console")


def _seed(root: Path, name: str, age_days: int) -> None:
    """Place an item in the recycle bin that arrived age_days ago."""
    root.mkdir(exist_ok=True)
    (root / name).write_text("old")
    arrival = int(time.time()) - age_days * SECONDS_PER_DAY
    with open(root / DATABASE_NAME, "a") as f:
        f.write(f"{name}/{arrival}/\n")


class TestPut:
    """Tests for saferm put."""

    def test_put_file(self, tmp_path: Path) -> None:
        """A file is moved into the recycle bin."""
        root = tmp_path / "recycle"
        source = tmp_path / "notes.txt"
        source.write_text("hello")

        result = runner.invoke(app, ["put", "--dir", str(root), str(source)])

        assert result.exit_code == 0, result.output
        assert not source.exists()
        assert (root / "notes.txt").read_text() == "hello"
        assert "recycled:" in result.output
        assert "notes.txt/" in (root / DATABASE_NAME).read_text()

    def test_put_reports_new_bin(self, tmp_path: Path) -> None:
        """The first run announces the recycle bin creation."""
        root = tmp_path / "recycle"

        result = runner.invoke(app, ["put", "--dir", str(root)])

        assert result.exit_code == 0
        assert "creating" in result.output
        assert root.is_dir()

    def test_put_collision(self, tmp_path: Path) -> None:
        """A second file with the same name gets a counter."""
        root = tmp_path / "recycle"
        source = tmp_path / "report.txt"

        for _ in range(2):
            source.write_text("x")
            result = runner.invoke(app, ["put", "-d", str(root), str(source)])
            assert result.exit_code == 0, result.output

        assert (root / "report.txt").exists()
        assert (root / "report(1).txt").exists()

    def test_put_missing_path(self, tmp_path: Path) -> None:
        """A missing path is a warning and exits 1."""
        root = tmp_path / "recycle"
        missing = tmp_path / "missing.txt"

        result = runner.invoke(app, ["put", "--dir", str(root), str(missing)])

        assert result.exit_code == 1
        assert "file path is invalid" in result.output

    def test_put_continues_after_failure(self, tmp_path: Path) -> None:
        """Remaining paths are staged after a failed one."""
        root = tmp_path / "recycle"
        good = tmp_path / "good.txt"
        good.write_text("x")

        result = runner.invoke(
            app, ["put", "--dir", str(root), str(tmp_path / "missing"), str(good)]
        )

        assert result.exit_code == 1
        assert (root / "good.txt").exists()

    def test_put_quiet(self, tmp_path: Path) -> None:
        """Quiet mode hides info events."""
        root = tmp_path / "recycle"
        source = tmp_path / "notes.txt"
        source.write_text("x")

        result = runner.invoke(app, ["--quiet", "put", "--dir", str(root), str(source)])

        assert result.exit_code == 0
        assert "recycled:" not in result.output
        assert (root / "notes.txt").exists()

    def test_no_op_only_purges(self, tmp_path: Path) -> None:
        """--no-op purges expired items and stages nothing."""
        root = tmp_path / "recycle"
        _seed(root, "old.txt", age_days=40)
        source = tmp_path / "notes.txt"
        source.write_text("x")

        result = runner.invoke(app, ["put", "--no-op", "--dir", str(root), str(source)])

        assert result.exit_code == 0, result.output
        assert source.exists()
        assert not (root / "old.txt").exists()
        assert "purged expired item: old.txt" in result.output

    def test_days_override(self, tmp_path: Path) -> None:
        """--days shortens the retention window."""
        root = tmp_path / "recycle"
        _seed(root, "week.txt", age_days=7)

        result = runner.invoke(app, ["put", "-n", "--days", "5", "--dir", str(root)])

        assert result.exit_code == 0
        assert not (root / "week.txt").exists()

    def test_negative_days_rejected(self, tmp_path: Path) -> None:
        """A negative window is a usage error."""
        result = runner.invoke(app, ["put", "--days", "-1", "--dir", str(tmp_path)])

        assert result.exit_code == 2

    def test_recycle_dir_is_file(self, tmp_path: Path) -> None:
        """A file in place of the recycle bin is fatal."""
        blocker = tmp_path / "recycle"
        blocker.write_text("x")

        result = runner.invoke(app, ["put", "--dir", str(blocker)])

        assert result.exit_code == 1
        assert "not a directory" in result.output
        assert "error:" in result.output

    def test_invalid_config(self, tmp_path: Path, isolated_config_home: Path) -> None:
        """A broken config file is reported and exits 1."""
        config_file = isolated_config_home / "saferm" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("retention_days = [")

        result = runner.invoke(app, ["put", "--dir", str(tmp_path / "recycle")])

        assert result.exit_code == 1
        assert "Invalid TOML" in result.output

    def test_config_file_settings_used(
        self, tmp_path: Path, isolated_config_home: Path
    ) -> None:
        """The recycle bin location comes from the config file."""
        root = tmp_path / "from-config"
        config_file = isolated_config_home / "saferm" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text(f'recycle_dir = "{root}"\n')
        source = tmp_path / "notes.txt"
        source.write_text("x")

        result = runner.invoke(app, ["put", str(source)])

        assert result.exit_code == 0, result.output
        assert (root / "notes.txt").exists()


class TestSafeMode:
    """Tests for the purge confirmation in safe mode."""

    def test_declined(self, tmp_path: Path) -> None:
        """Answering no keeps the expired items."""
        root = tmp_path / "recycle"
        _seed(root, "old.txt", age_days=40)

        result = runner.invoke(app, ["purge", "--safe", "--dir", str(root)], input="n\n")

        assert result.exit_code == 0
        assert (root / "old.txt").exists()
        assert "file scheduled for deletion" in result.output
        assert "purge was canceled by user." in result.output

    def test_accepted(self, tmp_path: Path) -> None:
        """Answering yes deletes the whole batch."""
        root = tmp_path / "recycle"
        _seed(root, "a.txt", age_days=40)
        _seed(root, "b.txt", age_days=50)

        result = runner.invoke(app, ["purge", "--safe", "--dir", str(root)], input="y\n")

        assert result.exit_code == 0, result.output
        assert result.output.count("Purge all 2") == 1
        assert not (root / "a.txt").exists()
        assert not (root / "b.txt").exists()

    def test_yes_skips_prompt(self, tmp_path: Path) -> None:
        """--yes approves without prompting."""
        root = tmp_path / "recycle"
        _seed(root, "old.txt", age_days=40)

        result = runner.invoke(app, ["purge", "--safe", "--yes", "--dir", str(root)])

        assert result.exit_code == 0
        assert "Purge all" not in result.output
        assert not (root / "old.txt").exists()

    def test_unsafe_overrides_config(
        self, tmp_path: Path, isolated_config_home: Path
    ) -> None:
        """--unsafe disables a configured confirmation."""
        config_file = isolated_config_home / "saferm" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("safe_mode = true\n")
        root = tmp_path / "recycle"
        _seed(root, "old.txt", age_days=40)

        result = runner.invoke(app, ["purge", "--unsafe", "--dir", str(root)])

        assert result.exit_code == 0
        assert "Purge all" not in result.output
        assert not (root / "old.txt").exists()


class TestPurge:
    """Tests for saferm purge."""

    def test_keeps_fresh_items(self, tmp_path: Path) -> None:
        """Items inside the window are kept."""
        root = tmp_path / "recycle"
        _seed(root, "fresh.txt", age_days=1)
        _seed(root, "old.txt", age_days=31)

        result = runner.invoke(app, ["purge", "--dir", str(root)])

        assert result.exit_code == 0
        assert (root / "fresh.txt").exists()
        assert not (root / "old.txt").exists()
        assert "old.txt" not in (root / DATABASE_NAME).read_text()

    def test_empty_bin(self, tmp_path: Path) -> None:
        """Purging an empty recycle bin succeeds quietly."""
        root = tmp_path / "recycle"
        root.mkdir()

        result = runner.invoke(app, ["purge", "--dir", str(root)])

        assert result.exit_code == 0
        assert result.output == ""
