"""Tests for the command-line interface."""

import asyncio
import json
import logging

import pytest
from typer.testing import CliRunner

from dep_diff import __version__
from dep_diff.cli.main import app, run_diff
from dep_diff.core.diff import PackageChangeType, VersionChangeType
from dep_diff.core.exceptions import ResolverNotFoundError
from dep_diff.utils.logging import ROOT_LOGGER_NAME

runner = CliRunner()


@pytest.fixture
def npm_snapshots(write_lockfile, npm_lockfile):
    """Write two npm v1 lockfiles describing a typical upgrade."""
    source = write_lockfile(
        "package-lock.json",
        npm_lockfile({"express": "4.17.0", "axios": "0.21.0"}, dev={"lodash": "4.17.20"}),
        subdir="old",
    )
    target = write_lockfile(
        "package-lock.json",
        npm_lockfile(
            {"express": "4.18.0", "axios": "1.0.0", "react": "18.2.0"},
            dev={"lodash": "4.17.21"},
        ),
        subdir="new",
    )
    return source, target


class TestRunDiff:
    """Test the end-to-end diff pipeline."""

    def test_npm_upgrade_scenario(self, npm_snapshots):
        """Test resolving and diffing two npm v1 lockfiles."""
        source, target = npm_snapshots

        result = asyncio.run(run_diff(source, target))

        assert len(result.dependencies) == 3
        by_name = {c.name: c for c in result.dependencies}
        assert by_name["express"].type == PackageChangeType.UPGRADED
        assert by_name["express"].version_change == VersionChangeType.MINOR
        assert by_name["axios"].type == PackageChangeType.UPGRADED
        assert by_name["axios"].version_change == VersionChangeType.MAJOR
        assert by_name["react"].type == PackageChangeType.ADDED

        assert len(result.dev_dependencies) == 1
        assert result.dev_dependencies[0].name == "lodash"
        assert result.dev_dependencies[0].type == PackageChangeType.UPGRADED
        assert result.dev_dependencies[0].version_change == VersionChangeType.PATCH

    def test_explicit_resolver_ignores_file_names(self, write_lockfile, npm_lockfile):
        """Test that a named resolver reads files with any name."""
        source = write_lockfile("before.json", npm_lockfile({"a": "1.0.0"}))
        target = write_lockfile("after.json", npm_lockfile({"a": "1.0.1"}))

        result = asyncio.run(run_diff(source, target, resolver_name="npm"))

        assert [c.name for c in result.dependencies] == ["a"]

    def test_no_resolver_found(self, tmp_path):
        """Test that unmatched file names fail before reading."""
        with pytest.raises(ResolverNotFoundError):
            asyncio.run(run_diff(tmp_path / "a.txt", tmp_path / "b.txt"))


class TestDiffCommand:
    """Test the diff command."""

    def test_text_report(self, npm_snapshots):
        """Test the default text output."""
        source, target = npm_snapshots

        result = runner.invoke(app, ["diff", str(source), str(target)])

        assert result.exit_code == 0
        assert "DEPENDENCIES" in result.stdout
        assert "express: 4.17.0 → 4.18.0" in result.stdout
        assert "+ react@18.2.0" in result.stdout

    def test_json_report(self, npm_snapshots):
        """Test JSON output."""
        source, target = npm_snapshots

        result = runner.invoke(app, ["diff", str(source), str(target), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["dependencies"]) == 3
        assert data["devDependencies"][0]["versionChange"] == "patch"

    def test_output_file(self, npm_snapshots, tmp_path):
        """Test writing the report to a file."""
        source, target = npm_snapshots
        report = tmp_path / "report.md"

        result = runner.invoke(app, ["diff", str(source), str(target), "-f", "markdown", "-o", str(report)])

        assert result.exit_code == 0
        assert "## Dependencies" in report.read_text(encoding="utf-8")
        assert "## Dependencies" not in result.stdout

    def test_no_changes(self, npm_snapshots):
        """Test diffing a file against itself."""
        source, _ = npm_snapshots

        result = runner.invoke(app, ["diff", str(source), str(source)])

        assert result.exit_code == 0
        assert "No dependency changes" in result.stdout

    def test_unknown_resolver(self, npm_snapshots):
        """Test that an unknown resolver name exits with an error."""
        source, target = npm_snapshots

        result = runner.invoke(app, ["diff", str(source), str(target), "-r", "cargo"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Unknown resolver" in result.output

    def test_unknown_format(self, npm_snapshots):
        """Test that an unknown output format exits with an error."""
        source, target = npm_snapshots

        result = runner.invoke(app, ["diff", str(source), str(target), "-f", "xml"])

        assert result.exit_code == 1
        assert "Unknown output format" in result.output

    def test_missing_file(self, tmp_path):
        """Test that I/O errors exit with an error."""
        source = tmp_path / "old" / "package-lock.json"
        target = tmp_path / "new" / "package-lock.json"

        result = runner.invoke(app, ["diff", str(source), str(target)])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_parse_error(self, write_lockfile, npm_lockfile):
        """Test that malformed lockfiles exit with an error."""
        source = write_lockfile("package-lock.json", "{not json", subdir="old")
        target = write_lockfile("package-lock.json", npm_lockfile({}), subdir="new")

        result = runner.invoke(app, ["diff", str(source), str(target)])

        assert result.exit_code == 1
        assert "Failed to parse" in result.output

    def test_log_file(self, npm_snapshots, tmp_path):
        """Test that verbose log records also go to the log file."""
        source, target = npm_snapshots
        log_file = tmp_path / "depdiff.log"

        result = runner.invoke(app, ["diff", str(source), str(target), "-v", "--log-file", str(log_file)])

        assert result.exit_code == 0
        assert "Using npm resolver" in log_file.read_text(encoding="utf-8")

        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.close()


class TestOtherCommands:
    """Test info and version output."""

    def test_version(self):
        """Test the --version flag."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"depdiff {__version__}" in result.stdout

    def test_info(self):
        """Test the info command."""
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "Supported Resolvers" in result.stdout
        assert "composer.lock" in result.stdout
        assert "markdown" in result.stdout
