"""Tests for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from ksd.cli import _setup_logging, app


runner = CliRunner()


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestSetupLogging:
    """Tests for _setup_logging helper."""

    def test_setup_logging_verbose(self) -> None:
        """Verbose mode sets DEBUG level."""
        with patch("ksd.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=True)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.DEBUG

    def test_setup_logging_normal(self) -> None:
        """Normal mode sets INFO level."""
        with patch("ksd.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=False)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.INFO


class TestBuildCommand:
    """Tests for the build command."""

    def test_build_success(self, tmp_path: Path) -> None:
        """Builds sources into the output directory."""
        _write(tmp_path, "math/foo.kql", "// Doc.\nlet Foo = (x: long) { x }\n")

        result = runner.invoke(app, ["build", str(tmp_path)])

        assert result.exit_code == 0
        assert "Built: 1, failed: 0" in result.stdout
        assert (tmp_path / ".out" / "math" / "foo.kql").exists()

    def test_build_verbose(self, tmp_path: Path) -> None:
        """Verbose flag is accepted."""
        _write(tmp_path, "foo.kql", "let Foo = (x: long) { x }\n")

        result = runner.invoke(app, ["build", str(tmp_path), "-v"])

        assert result.exit_code == 0

    def test_build_defaults_to_cwd(self, tmp_path: Path, monkeypatch) -> None:
        _write(tmp_path, "foo.kql", "let Foo = (x: long) { x }\n")
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["build"])

        assert result.exit_code == 0
        assert (tmp_path / ".out" / "foo.kql").exists()

    def test_build_directory_not_found(self, tmp_path: Path) -> None:
        """Rejects a directory that does not exist."""
        result = runner.invoke(app, ["build", str(tmp_path / "missing")])

        assert result.exit_code != 0
        assert not (tmp_path / "missing").exists()

    def test_build_failure_exits_non_zero(self, tmp_path: Path) -> None:
        """An extraction error stops the run and is reported."""
        _write(tmp_path, "bad.kql", "// nothing\n")

        result = runner.invoke(app, ["build", str(tmp_path)])

        assert result.exit_code == 1
        assert "MissingDeclaration" in result.stdout
        assert "bad.kql" in result.stdout

    def test_build_keep_going(self, tmp_path: Path) -> None:
        """All files are attempted and the run still fails."""
        _write(tmp_path, "a.kql", "// nothing\n")
        _write(tmp_path, "b.kql", "let B = () { 1 }\n")

        result = runner.invoke(app, ["build", str(tmp_path), "--keep-going"])

        assert result.exit_code == 1
        assert "Built: 1, failed: 1" in result.stdout
        assert (tmp_path / ".out" / "b.kql").exists()

    def test_build_custom_out(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.kql", "let A = () { 1 }\n")

        result = runner.invoke(app, ["build", str(tmp_path), "--out", "gen"])

        assert result.exit_code == 0
        assert (tmp_path / "gen" / "a.kql").exists()

    def test_build_strict_docstring(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.kql", "// Doc.\nset x;\nlet A = () { 1 }\n")

        result = runner.invoke(app, ["build", str(tmp_path), "--strict-docstring"])

        assert result.exit_code == 0
        assert 'docstring=""' in (tmp_path / ".out" / "a.kql").read_text()


class TestSyncCommand:
    """Tests for the sync command."""

    def test_sync_requires_database(self, tmp_path: Path) -> None:
        """Cluster endpoints without a database are rejected."""
        result = runner.invoke(app, ["sync", str(tmp_path), "--cluster", "https://c.kusto.windows.net"])

        assert result.exit_code == 2

    def test_sync_builds_then_reports_not_implemented(self, tmp_path: Path) -> None:
        _write(tmp_path, "fn/a.kql", "let A = () { 1 }\n")

        result = runner.invoke(
            app, ["sync", str(tmp_path), "--cluster", "https://c.kusto.windows.net/Db"]
        )

        assert result.exit_code == 1
        assert (tmp_path / ".out" / "fn" / "a.kql").exists()
        assert "a.kql" in result.stdout
        assert "not implemented" in result.stdout

    def test_sync_from_out_skips_build(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.kql", "// nothing\n")
        _write(tmp_path, "prebuilt/a.kql", ".create-or-alter function ...")

        result = runner.invoke(
            app,
            ["sync", str(tmp_path), "-c", "https://c.kusto.windows.net/Db", "--from-out", "prebuilt"],
        )

        assert result.exit_code == 1
        assert "not implemented" in result.stdout
        assert not (tmp_path / ".out").exists()

    def test_sync_from_out_missing(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            ["sync", str(tmp_path), "-c", "https://c.kusto.windows.net/Db", "--from-out", "nope"],
        )

        assert result.exit_code == 2

    def test_sync_nothing_to_push(self, tmp_path: Path) -> None:
        (tmp_path / "empty").mkdir()

        result = runner.invoke(
            app,
            ["sync", str(tmp_path), "-c", "https://c.kusto.windows.net/Db", "--from-out", "empty"],
        )

        assert result.exit_code == 0
        assert "No scripts to sync" in result.stdout
