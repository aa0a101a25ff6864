"""Tests for SinkConfig and the YAML + env routing table loader."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from levelsink import Level
from levelsink.config import SinkConfig, load_path_map


class TestSinkConfig:
    def test_default_values(self):
        cfg = SinkConfig()
        assert cfg.log_formatter == "structlog"
        assert cfg.log_destination == "stderr"
        assert cfg.log_level == "INFO"
        assert cfg.log_format == "json"
        assert cfg.paths_file == Path("~/.levelsink/paths.yaml").expanduser()

    def test_env_values(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEVELSINK_LOG_DESTINATION", "levelfile")
        monkeypatch.setenv("LEVELSINK_LOG_FORMAT", "console")
        monkeypatch.setenv("LEVELSINK_PATHS_FILE", str(tmp_path / "p.yaml"))
        cfg = SinkConfig()
        assert cfg.log_destination == "levelfile"
        assert cfg.log_format == "console"
        assert cfg.paths_file == tmp_path / "p.yaml"

    def test_explicit_values(self):
        cfg = SinkConfig(log_formatter="stdlib", log_level="DEBUG")
        assert cfg.log_formatter == "stdlib"
        assert cfg.log_level == "DEBUG"


class TestLoadPathMap:
    def test_load_from_yaml(self, tmp_path):
        paths = tmp_path / "paths.yaml"
        paths.write_text(yaml.dump({
            "info": "/tmp/a.log",
            "error": "/tmp/a.log",
            "warn": "/tmp/b.log",
        }))

        assert load_path_map(paths) == {
            Level.INFO: "/tmp/a.log",
            Level.ERROR: "/tmp/a.log",
            Level.WARN: "/tmp/b.log",
        }

    def test_missing_file_is_empty(self, tmp_path):
        assert load_path_map(tmp_path / "nonexistent.yaml") == {}

    def test_empty_yaml(self, tmp_path):
        paths = tmp_path / "paths.yaml"
        paths.write_text("")
        assert load_path_map(paths) == {}

    def test_non_dict_yaml(self, tmp_path):
        paths = tmp_path / "paths.yaml"
        paths.write_text("just a string")
        assert load_path_map(paths) == {}

    def test_null_entries_skipped(self, tmp_path):
        paths = tmp_path / "paths.yaml"
        paths.write_text("info: /tmp/a.log\ndebug:\n")
        assert load_path_map(paths) == {Level.INFO: "/tmp/a.log"}

    def test_home_expanded(self, tmp_path):
        paths = tmp_path / "paths.yaml"
        paths.write_text("info: ~/logs/app.log\n")
        assert load_path_map(paths)[Level.INFO] == str(Path("~/logs/app.log").expanduser())

    def test_unknown_level_raises(self, tmp_path):
        paths = tmp_path / "paths.yaml"
        paths.write_text("verbose: /tmp/a.log\n")
        with pytest.raises(ValueError, match="Unknown log level"):
            load_path_map(paths)

    def test_alias_keys_for_same_level_rejected(self, tmp_path):
        paths = tmp_path / "paths.yaml"
        paths.write_text("warn: /tmp/a.log\nwarning: /tmp/b.log\n")
        with pytest.raises(ValueError, match="WARN is mapped more than once"):
            load_path_map(paths)

    def test_alias_env_vars_for_same_level_rejected(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEVELSINK_PATH_WARN", "/tmp/a.log")
        monkeypatch.setenv("LEVELSINK_PATH_WARNING", "/tmp/b.log")
        with pytest.raises(ValueError, match="mapped more than once in environment"):
            load_path_map(tmp_path / "none.yaml")

    def test_env_adds_level(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEVELSINK_PATH_ERROR", "/tmp/err.log")
        assert load_path_map(tmp_path / "none.yaml") == {Level.ERROR: "/tmp/err.log"}

    def test_env_overrides_yaml(self, monkeypatch, tmp_path):
        paths = tmp_path / "paths.yaml"
        paths.write_text("info: /tmp/a.log\nwarning: /tmp/b.log\n")
        monkeypatch.setenv("LEVELSINK_PATH_WARN", "/tmp/override.log")

        routes = load_path_map(paths)
        assert routes[Level.WARN] == "/tmp/override.log"
        assert routes[Level.INFO] == "/tmp/a.log"

    def test_empty_env_value_ignored(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEVELSINK_PATH_INFO", "")
        assert load_path_map(tmp_path / "none.yaml") == {}

    def test_default_file_from_env(self, monkeypatch, tmp_path):
        paths = tmp_path / "custom.yaml"
        paths.write_text("debug: /tmp/d.log\n")
        monkeypatch.setenv("LEVELSINK_PATHS_FILE", str(paths))
        assert load_path_map() == {Level.DEBUG: "/tmp/d.log"}
