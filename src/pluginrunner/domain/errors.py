"""Exception taxonomy for plugin discovery and loading.

Only :class:`DirectoryUnavailableError` and :class:`ConfigError` are ever
raised to callers. Load and instantiation failures are delivered through the
``plugin_error`` hook as the ``event.error`` value, with the underlying
exception chained as ``__cause__``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pluginrunner.domain.plugin import Plugin


class PluginRunnerError(Exception):
    """Base class for all pluginrunner errors."""


class DirectoryUnavailableError(PluginRunnerError, OSError):
    """The plugin root could not be created or accessed."""


class ConfigError(PluginRunnerError):
    """A configuration file could not be parsed."""


class PluginLoadError(PluginRunnerError):
    """A plugin's code could not be executed or its classes enumerated."""

    def __init__(self, plugin: Plugin, cause: BaseException) -> None:
        super().__init__(f"Failed to load plugin {plugin.name!r} from {plugin.path}: {cause}")
        self.plugin = plugin
        self.__cause__ = cause


class PluginInstantiationError(PluginRunnerError):
    """An eligible plugin class could not be constructed."""

    def __init__(self, plugin: Plugin, plugin_class: type, cause: BaseException) -> None:
        super().__init__(
            f"Failed to instantiate {plugin_class.__qualname__} from plugin {plugin.name!r}: {cause}"
        )
        self.plugin = plugin
        self.plugin_class = plugin_class
        self.__cause__ = cause
