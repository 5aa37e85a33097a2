"""Pluggy hook specifications for the plugin runner lifecycle.

Six hooks, all dispatched synchronously on the calling thread in
subscriber registration order:

- ``init_plugins``      once, after discovery; may replace the plugin list
- ``no_plugins``        on load, when the plugin list is empty
- ``before_run_plugin`` before each plugin's classes are processed; may veto
- ``load_class``        after each successful class instantiation
- ``load_plugin``       after a plugin whose classes all instantiated
- ``plugin_error``      on a plugin-level or class-level failure
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pluginrunner.domain.events import PluginEvent
    from pluginrunner.domain.plugin import Plugin
    from pluginrunner.services.runner import PluginRunner

PROJECT_NAME = "pluginrunner"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class PluginRunnerHookSpec:
    """Hook specifications for the pluginrunner lifecycle."""

    @hookspec
    def init_plugins(self, runner: PluginRunner, plugins: list[Plugin]) -> list[Plugin] | None:
        """Post-process the discovered plugin list.

        Return a replacement list, or None to keep *plugins* (which may have
        been edited in place). Subscribers run in registration order, each
        one receiving the list the previous one left behind.
        """

    @hookspec
    def no_plugins(self, runner: PluginRunner, event: PluginEvent) -> None:
        """Called when load runs against an empty plugin list."""

    @hookspec
    def before_run_plugin(self, runner: PluginRunner, event: PluginEvent) -> bool | None:
        """Called before a plugin's classes are processed.

        Returning True skips the plugin for this run.
        """

    @hookspec
    def load_class(self, runner: PluginRunner, event: PluginEvent) -> None:
        """Called after a plugin class was instantiated."""

    @hookspec
    def load_plugin(self, runner: PluginRunner, event: PluginEvent) -> None:
        """Called after every eligible class of a plugin was instantiated."""

    @hookspec
    def plugin_error(self, runner: PluginRunner, event: PluginEvent) -> None:
        """Called when a plugin fails to load or one of its classes fails to instantiate."""


HOOK_NAMES: tuple[str, ...] = (
    "init_plugins",
    "no_plugins",
    "before_run_plugin",
    "load_class",
    "load_plugin",
    "plugin_error",
)
