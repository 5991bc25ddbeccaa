"""Tests for the command line and output formatters."""

import json
import pytest
from unittest.mock import Mock, patch

from rich.console import Console
from typer.testing import CliRunner

from yarnlock.cli.main import app
from yarnlock.core.detector import YarnLockDetector
from yarnlock.output.formatters import ConsoleFormatter, JSONFormatter


LOCK_CONTENT = '''# yarn lockfile v1


make-dir@^3.0.0:
  version "3.1.0"
  resolved "https://registry.yarnpkg.com/make-dir/-/make-dir-3.1.0.tgz#415e967046b3a7f1d185277d84aa58203726a13f"
  dependencies:
    semver "^6.0.0"

semver@^6.0.0:
  version "6.3.0"
  resolved "https://registry.yarnpkg.com/semver/-/semver-6.3.0.tgz#ee0a64c8af5e8ceea67687b133761e1becbd1d3d"
'''


runner = CliRunner()


@pytest.fixture
def lock_file(tmp_path):
    """Write a small classic lock file."""
    path = tmp_path / "yarn.lock"
    path.write_text(LOCK_CONTENT)
    return path


class TestJSONFormatter:
    """Test JSON output."""

    def test_format_scan_results(self, lock_file):
        """Test the summary and per file sections."""
        results = YarnLockDetector(logger=Mock()).scan_directory(lock_file.parent)
        data = JSONFormatter().format_scan_results(results, scan_time=0.5)

        assert data["scan_summary"]["lock_files"] == 1
        assert data["scan_summary"]["parsed_lock_files"] == 1
        assert data["scan_summary"]["total_entries"] == 2
        assert data["scan_summary"]["failed_packages"] == 0

        lock_data = data["lock_files"][0]["lockFile"]
        assert lock_data["lockVersion"] == "v1"
        assert lock_data["entries"][0]["name"] == "make-dir"
        assert lock_data["entries"][0]["dependencies"] == [{"name": "semver", "version": "npm:^6.0.0"}]

    def test_save_results(self, tmp_path):
        """Test results are written as JSON."""
        output = tmp_path / "out.json"
        JSONFormatter(output).save_results({"ok": True})
        assert json.loads(output.read_text()) == {"ok": True}

    def test_save_without_file(self):
        """Test saving needs a target file."""
        with pytest.raises(ValueError, match="No output file specified"):
            JSONFormatter().save_results({})


class TestConsoleFormatter:
    """Test rich console output."""

    def test_format_lock_file(self, lock_file):
        """Test the entries table is printed."""
        console = Console(record=True, width=200)
        result = YarnLockDetector(logger=Mock()).scan_file(lock_file)

        ConsoleFormatter(console).format_lock_file(result)
        text = console.export_text()

        assert "make-dir" in text
        assert "npm:^6.0.0" in text

    def test_format_failed_result(self, tmp_path):
        """Test unreadable files print an error panel."""
        console = Console(record=True, width=200)
        result = YarnLockDetector(logger=Mock()).scan_file(tmp_path / "yarn.lock")

        ConsoleFormatter(console).format_lock_file(result)
        assert "Could not parse" in console.export_text()


class TestCLI:
    """Test the yarnlock command line."""

    def test_show_json(self, lock_file):
        """Test printing one lock file as JSON."""
        result = runner.invoke(app, ["show", str(lock_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [entry["name"] for entry in data["lockFile"]["entries"]] == ["make-dir", "semver"]
        assert data["failedPackages"] == []

    def test_show_table(self, lock_file):
        """Test printing one lock file as a table."""
        result = runner.invoke(app, ["show", str(lock_file)])

        assert result.exit_code == 0
        assert "make-dir" in result.stdout

    def test_show_missing_file(self, tmp_path):
        """Test a missing lock file exits with an error."""
        result = runner.invoke(app, ["show", str(tmp_path / "yarn.lock")])
        assert result.exit_code == 1

    def test_scan_with_output(self, lock_file, tmp_path):
        """Test scanning a directory and saving JSON results."""
        output = tmp_path / "results.json"
        result = runner.invoke(app, ["scan", str(lock_file.parent), "--output", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data["scan_summary"]["total_entries"] == 2

    def test_scan_missing_path(self, tmp_path):
        """Test a missing scan root exits with an error."""
        result = runner.invoke(app, ["scan", str(tmp_path / "nope")])

        assert result.exit_code == 1
        assert "Path does not exist" in result.stdout

    def test_scan_without_lock_files(self, tmp_path):
        """Test scanning a tree with no lock files."""
        (tmp_path / "package.json").write_text("{}")
        result = runner.invoke(app, ["scan", str(tmp_path)])

        assert result.exit_code == 0
        assert "No yarn.lock files found" in result.stdout

    def test_scan_log_directory(self, lock_file, tmp_path):
        """Test a log directory gets a timestamped log file."""
        log_dir = tmp_path / "logs"
        log_dir.mkdir()
        result = runner.invoke(app, ["scan", str(lock_file), "--log-file", str(log_dir)])

        assert result.exit_code == 0
        assert len(list(log_dir.glob("yarnlock_*.log"))) == 1

    def test_scan_unwritable_output(self, lock_file, tmp_path):
        """Test an output file in a missing directory exits with an error."""
        output = tmp_path / "missing" / "results.json"
        result = runner.invoke(app, ["scan", str(lock_file), "--output", str(output)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error:" in result.stdout

    def test_scan_log_file_in_missing_directory(self, lock_file, tmp_path):
        """Test a log file that cannot be opened exits with an error."""
        log_file = tmp_path / "missing" / "yarnlock.log"
        result = runner.invoke(app, ["scan", str(lock_file), "--log-file", str(log_file)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_show_unexpected_error(self, lock_file):
        """Test errors while showing a lock file exit with an error."""
        with patch("yarnlock.cli.main._build_detector", side_effect=OSError("disk gone")):
            result = runner.invoke(app, ["show", str(lock_file)])

        assert result.exit_code == 1
        assert "disk gone" in result.stdout
