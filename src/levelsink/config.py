"""Configuration, env-var driven.

All settings have safe defaults. Zero config gives structured logging to
stderr; set LEVELSINK_LOG_DESTINATION=levelfile to route by level.

Routing table:
    YAML file (LEVELSINK_PATHS_FILE, default ~/.levelsink/paths.yaml):

        info: /var/log/app/info.log
        warning: /var/log/app/info.log
        error: /var/log/app/error.log

    Env overrides per level: LEVELSINK_PATH_ERROR=/tmp/err.log
    Priority: env var > YAML file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from levelsink.levels import Level

_DEFAULT_PATHS_FILE = "~/.levelsink/paths.yaml"
_ENV_PREFIX = "LEVELSINK_PATH_"


@dataclass
class SinkConfig:
    """Logging + routing configuration."""

    log_formatter: str = field(
        default_factory=lambda: os.environ.get("LEVELSINK_LOG_FORMATTER", "structlog")
    )  # "structlog" | "stdlib"

    log_destination: str = field(
        default_factory=lambda: os.environ.get("LEVELSINK_LOG_DESTINATION", "stderr")
    )  # "stderr" | "levelfile"

    log_level: str = field(
        default_factory=lambda: os.environ.get("LEVELSINK_LOG_LEVEL", "INFO")
    )

    log_format: str = field(
        default_factory=lambda: os.environ.get("LEVELSINK_LOG_FORMAT", "json")
    )  # "json" | "console"

    paths_file: Path = field(
        default_factory=lambda: Path(
            os.environ.get("LEVELSINK_PATHS_FILE", _DEFAULT_PATHS_FILE)
        ).expanduser()
    )


def load_path_map(path: Path | None = None) -> dict[Level, str]:
    """Load the level -> file routing table from YAML, then env overrides.

    A missing file or a document that is not a mapping contributes nothing.
    Unknown level names raise ValueError.
    """
    file_path = Path(path) if path is not None else SinkConfig().paths_file
    routes: dict[Level, str] = {}

    if file_path.exists():
        raw = yaml.safe_load(file_path.read_text()) or {}
        if isinstance(raw, dict):
            for key, value in raw.items():
                if value is None:
                    continue
                _route(routes, Level.parse(key), value, source=str(file_path))

    from_env: dict[Level, str] = {}
    for env_key, value in os.environ.items():
        if not env_key.startswith(_ENV_PREFIX) or not value:
            continue
        _route(from_env, Level.parse(env_key[len(_ENV_PREFIX):]), value, source="environment")

    routes.update(from_env)
    return routes


def _route(routes: dict[Level, str], level: Level, value: object, source: str) -> None:
    if level in routes:
        raise ValueError(f"Level {level.name} is mapped more than once in {source}")
    routes[level] = str(Path(str(value)).expanduser())
