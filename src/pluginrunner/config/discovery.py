"""Locating and parsing ``pluginrunner.toml``.

A file named explicitly (argument or ``PLUGINRUNNER_CONFIG``) must exist.
Otherwise the nearest ``pluginrunner.toml`` walking up from the start
directory is used, and having none at all is fine.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pluginrunner.domain.errors import ConfigError

CONFIG_FILENAME = "pluginrunner.toml"
CONFIG_ENV_VAR = "PLUGINRUNNER_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``pluginrunner.toml`` at or above *start* (default: cwd)."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_config(
    config_path: str | Path | None = None,
    start: Path | None = None,
) -> Path | None:
    """Pick the config file a :class:`RunnerSettings` load should read.

    Precedence: *config_path*, then ``PLUGINRUNNER_CONFIG``, then the walk-up
    from *start*. A relative explicit path resolves against *start*.

    Raises:
        ConfigError: An explicitly named file does not exist.
    """
    explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
    if not explicit:
        return find_config(start)

    path = Path(explicit)
    if not path.is_absolute() and start is not None:
        path = start / path
    if not path.is_file():
        msg = f"Config file not found: {path}"
        raise ConfigError(msg)
    return path


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML, raising :class:`ConfigError` on bad syntax."""
    raw = path.read_text(encoding="utf-8")
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
