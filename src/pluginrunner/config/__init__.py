"""Configuration layer — TOML discovery, settings, and logging setup."""

from pluginrunner.config.logging import configure_from_settings, configure_logging
from pluginrunner.config.settings import RunnerSettings

__all__ = ["RunnerSettings", "configure_from_settings", "configure_logging"]
