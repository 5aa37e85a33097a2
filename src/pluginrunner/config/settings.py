"""Unified settings — init kwargs, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — overrides passed by the embedding application
  2. Env vars     — ``PLUGINRUNNER_*`` prefix, ``__`` for nesting
                    (e.g. ``PLUGINRUNNER_RUNNER__PATH=/opt/plugins``)
  3. TOML file    — ``pluginrunner.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``locate_config`` lookup from
:mod:`pluginrunner.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pluginrunner.config.discovery import locate_config, read_toml
from pluginrunner.config.models import LoggingConfig, RunnerConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``pluginrunner.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class RunnerSettings(BaseSettings):
    """Unified, frozen settings for a :class:`~pluginrunner.PluginRunner`.

    Attributes:
        base_dir: Directory relative plugin paths resolve against (parent of
            ``pluginrunner.toml``, or CWD if no config found).
        config_path: The TOML file in use, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PLUGINRUNNER_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (not in TOML — derived from config location) ---
    base_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- TOML sections ---
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        base_dir: Path | None = None,
        **overrides: Any,
    ) -> RunnerSettings:
        """Construct settings for an embedding application.

        Discovers ``pluginrunner.toml`` via walk-up from *base_dir* (or uses
        an explicit *config_path*), resolves *base_dir* from the config
        file's parent directory, and applies *overrides* last.

        Raises:
            ConfigError: The TOML file is not valid TOML, or an explicitly
                named config file does not exist.
        """
        toml_path = locate_config(config_path, base_dir)

        resolved_base = base_dir
        if resolved_base is None:
            resolved_base = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                base_dir=resolved_base,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
