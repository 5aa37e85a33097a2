"""pluginrunner — discover, load, and instantiate plugins from a directory."""

from pluginrunner.config import RunnerSettings, configure_from_settings, configure_logging
from pluginrunner.domain.base import PluginArgs, PluginObject, qualified_name
from pluginrunner.domain.errors import (
    ConfigError,
    DirectoryUnavailableError,
    PluginInstantiationError,
    PluginLoadError,
    PluginRunnerError,
)
from pluginrunner.domain.events import PluginEvent
from pluginrunner.domain.lifecycle import PluginState
from pluginrunner.domain.plugin import Plugin
from pluginrunner.domain.policy import BasePolicy, PolicyMode
from pluginrunner.hooks import NotificationBus, hookimpl
from pluginrunner.services.runner import PluginRunner

__version__ = "0.1.0"

__all__ = [
    "BasePolicy",
    "ConfigError",
    "DirectoryUnavailableError",
    "NotificationBus",
    "Plugin",
    "PluginArgs",
    "PluginEvent",
    "PluginInstantiationError",
    "PluginLoadError",
    "PluginObject",
    "PluginRunner",
    "PluginRunnerError",
    "PluginState",
    "PolicyMode",
    "RunnerSettings",
    "configure_from_settings",
    "configure_logging",
    "hookimpl",
    "qualified_name",
]
