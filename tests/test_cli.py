"""Tests for the levelsink CLI.

Uses typer.testing.CliRunner for isolated CLI testing.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from levelsink.cli import app

runner = CliRunner()


@pytest.fixture()
def paths_file(tmp_path):
    path = tmp_path / "paths.yaml"
    path.write_text(
        f"info: {tmp_path / 'a.log'}\n"
        f"error: {tmp_path / 'a.log'}\n"
        f"warn: {tmp_path / 'b.log'}\n"
    )
    return path


class TestAppStructure:
    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "routes" in result.output
        assert "emit" in result.output


class TestRoutes:
    def test_lists_table_in_level_order(self, tmp_path, paths_file):
        result = runner.invoke(app, ["routes", "--paths-file", str(paths_file)])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert [line.split()[0] for line in lines] == ["info", "warning", "error"]
        assert str(tmp_path / "b.log") in lines[1]

    def test_env_routes(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEVELSINK_PATH_DEBUG", str(tmp_path / "d.log"))
        result = runner.invoke(app, ["routes", "-p", str(tmp_path / "none.yaml")])
        assert result.exit_code == 0
        assert "debug" in result.output

    def test_empty_table_errors(self, tmp_path):
        result = runner.invoke(app, ["routes", "-p", str(tmp_path / "none.yaml")])
        assert result.exit_code == 1
        assert "No level files configured" in result.output

    def test_bad_level_in_file(self, tmp_path):
        path = tmp_path / "paths.yaml"
        path.write_text("chatty: /tmp/x.log\n")
        result = runner.invoke(app, ["routes", "-p", str(path)])
        assert result.exit_code == 1
        assert "Unknown log level" in result.output


class TestEmit:
    def test_scenario(self, tmp_path, paths_file):
        a = tmp_path / "a.log"
        b = tmp_path / "b.log"

        result = runner.invoke(app, ["emit", "info", "started", "-p", str(paths_file)])
        assert result.exit_code == 0, result.output
        assert "started" in a.read_text()

        result = runner.invoke(app, ["emit", "warn", "slow", "-p", str(paths_file)])
        assert result.exit_code == 0, result.output
        assert "slow" in b.read_text()

        before = (a.read_text(), b.read_text())
        result = runner.invoke(app, ["emit", "debug", "noise", "-p", str(paths_file)])
        assert result.exit_code == 1
        assert "no file provided for loglevel" in result.output
        assert (a.read_text(), b.read_text()) == before

    def test_fields_and_json(self, tmp_path, paths_file):
        result = runner.invoke(app, [
            "emit", "error", "db down",
            "-f", "host=db1", "--field", "retries=3",
            "--format", "json",
            "-p", str(paths_file),
        ])
        assert result.exit_code == 0, result.output
        record = json.loads((tmp_path / "a.log").read_text())
        assert record["event"] == "db down"
        assert record["host"] == "db1"
        assert record["retries"] == "3"

    def test_console_output_has_no_colors(self, tmp_path, paths_file):
        result = runner.invoke(app, ["emit", "info", "plain", "-p", str(paths_file)])
        assert result.exit_code == 0
        assert "\x1b[" not in (tmp_path / "a.log").read_text()

    def test_bad_field(self, paths_file):
        result = runner.invoke(app, ["emit", "info", "x", "-f", "novalue", "-p", str(paths_file)])
        assert result.exit_code == 1
        assert "expected key=value" in result.output

    def test_unknown_level(self, paths_file):
        result = runner.invoke(app, ["emit", "shout", "x", "-p", str(paths_file)])
        assert result.exit_code == 1
        assert "Unknown log level" in result.output

    def test_unknown_format(self, paths_file):
        result = runner.invoke(app, ["emit", "info", "x", "--format", "xml", "-p", str(paths_file)])
        assert result.exit_code == 1
        assert "Unknown log format" in result.output

    def test_open_failure(self, tmp_path):
        path = tmp_path / "paths.yaml"
        path.write_text(f"info: {tmp_path}\n")
        result = runner.invoke(app, ["emit", "info", "x", "-p", str(path)])
        assert result.exit_code == 1
        assert "failed to open logfile" in result.output
