"""PluginRunner — discover plugins once, then load and instantiate them on demand.

Construction resolves the plugin root, scans it, and lets ``init_plugins``
subscribers rewrite the list. Each :meth:`PluginRunner.load` call then walks
that fixed list from scratch: plugin code is re-executed, eligible classes
are constructed with the caller's argument bundle, and hooks report what
happened.

INVARIANT: A failing plugin or class never stops the run. Failures are
reported through ``plugin_error`` and the loop moves on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from pluginrunner.domain.errors import PluginInstantiationError, PluginLoadError
from pluginrunner.domain.events import PluginEvent
from pluginrunner.domain.lifecycle import PluginState
from pluginrunner.domain.plugin import Plugin
from pluginrunner.domain.policy import BasePolicy
from pluginrunner.hooks.bus import NotificationBus
from pluginrunner.infrastructure.filesystem import (
    DEFAULT_EXTENSIONS,
    DEFAULT_PATH,
    discover_plugins,
    normalize_extensions,
    resolve_root,
)
from pluginrunner.infrastructure.loader import public_classes
from pluginrunner.services.result import StageResult

if TYPE_CHECKING:
    from pluginrunner.config.settings import RunnerSettings

logger = logging.getLogger(__name__)


class PluginRunner:
    """Runs every plugin found under a root directory.

    Parameters:
        path: Plugin root. Relative paths resolve against the working
            directory; the directory is created when missing.
        parents: Accepted direct base classes as dotted ``module.qualname``
            names. ``None`` accepts subclasses of
            :class:`~pluginrunner.domain.base.PluginObject`; an empty
            sequence accepts every public class.
        extensions: Artifact extensions recognised during discovery.
        subscribers: Hook implementations registered before discovery, so
            they see ``init_plugins``.
        bus: Existing :class:`NotificationBus` to dispatch through.

    Raises:
        DirectoryUnavailableError: The plugin root cannot be created or listed.

    Usage::

        runner = PluginRunner("plugins", subscribers=[Reporter()])
        runner.load(PluginArgs(app=app))
    """

    def __init__(
        self,
        path: str | Path = DEFAULT_PATH,
        parents: Sequence[str] | None = None,
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        subscribers: Iterable[object] = (),
        bus: NotificationBus | None = None,
    ) -> None:
        self._path = resolve_root(path)
        self._policy = BasePolicy.from_parents(parents)
        self._extensions = normalize_extensions(extensions)
        self._bus = bus if bus is not None else NotificationBus()
        for subscriber in subscribers:
            self._bus.register(subscriber)
        # Empty until init_plugins subscribers have seen the discovered list.
        self._plugins: tuple[Plugin, ...] = ()
        self._plugins = self._init_plugins()

    @classmethod
    def from_settings(
        cls,
        settings: RunnerSettings,
        *,
        subscribers: Iterable[object] = (),
        bus: NotificationBus | None = None,
    ) -> PluginRunner:
        """Build a runner from :class:`RunnerSettings`.

        A relative ``runner.path`` resolves against ``settings.base_dir``.
        """
        bus = bus if bus is not None else NotificationBus()
        if settings.runner.load_entrypoints:
            bus.load_entrypoints()
        return cls(
            resolve_root(settings.runner.path, base=settings.base_dir),
            settings.runner.parents,
            extensions=settings.runner.extensions,
            subscribers=subscribers,
            bus=bus,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        """Absolute plugin root."""
        return self._path

    @property
    def plugins(self) -> tuple[Plugin, ...]:
        """Plugins in run order, fixed once discovery completes."""
        return self._plugins

    @property
    def policy(self) -> BasePolicy:
        return self._policy

    @property
    def parents(self) -> tuple[str, ...]:
        """Accepted base names; empty when every public class is accepted."""
        return tuple(sorted(self._policy.names))

    @property
    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    @property
    def bus(self) -> NotificationBus:
        return self._bus

    def parent_exists(self, name: str) -> bool:
        """Whether *name* is one of the accepted base names."""
        return self._policy.contains(name)

    def load(self, args: Any = None) -> None:
        """Load every plugin and instantiate its eligible classes.

        *args* is passed verbatim as the single constructor argument of
        each eligible class. Failures are reported through ``plugin_error``
        and never raised.
        """
        if not self._plugins:
            logger.debug("No plugins under %s", self._path)
            self._bus.notify("no_plugins", runner=self, event=PluginEvent())
            return

        for plugin in self._plugins:
            with structlog.contextvars.bound_contextvars(plugin=plugin.name):
                state = self._run_plugin(plugin, args)
                logger.debug("Finished as %s", state)

    run = load

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def _init_plugins(self) -> tuple[Plugin, ...]:
        discovered = discover_plugins(self._path, self._extensions)
        logger.debug("Discovered %d plugin(s) under %s", len(discovered), self._path)
        plugins = self._bus.init_plugins(self, discovered)
        return tuple(plugins)

    # ------------------------------------------------------------------
    # Per-plugin pipeline
    # ------------------------------------------------------------------

    def _run_plugin(self, plugin: Plugin, args: Any) -> PluginState:
        logger.debug("%s -> %s", PluginState.PENDING, PluginState.LOADING)
        loaded = self._load_code(plugin)
        if not loaded.ok:
            self._report_error(loaded, PluginEvent(plugin=plugin, error=loaded.error))
            return PluginState.FAILED

        if self._bus.is_vetoed(runner=self, event=PluginEvent(plugin=plugin)):
            logger.debug("Vetoed by before_run_plugin")
            return PluginState.SKIPPED

        complete = True
        for plugin_class in loaded.value:
            if not self._policy.accepts(plugin_class):
                continue
            built = self._instantiate(plugin, plugin_class, args)
            if not built.ok:
                self._report_error(
                    built,
                    PluginEvent(plugin=plugin, plugin_class=plugin_class, error=built.error),
                )
                complete = False
                continue
            self._bus.notify(
                "load_class",
                runner=self,
                event=PluginEvent(plugin=plugin, plugin_class=plugin_class),
            )

        if not complete:
            return PluginState.PARTIAL
        self._bus.notify("load_plugin", runner=self, event=PluginEvent(plugin=plugin))
        return PluginState.LOADED

    @staticmethod
    def _load_code(plugin: Plugin) -> StageResult:
        """Execute the plugin and enumerate its public classes."""
        try:
            module = plugin.load()
            classes = public_classes(module)
        # A plugin calling sys.exit() fails alone; KeyboardInterrupt still ends the run.
        except (Exception, SystemExit) as exc:
            return StageResult.failure("load", PluginLoadError(plugin, exc))
        return StageResult.success("load", classes)

    @staticmethod
    def _instantiate(plugin: Plugin, plugin_class: type, args: Any) -> StageResult:
        """Construct one instance. The instance itself is not retained."""
        try:
            plugin_class(args)
        except (Exception, SystemExit) as exc:
            error = PluginInstantiationError(plugin, plugin_class, exc)
            return StageResult.failure("instantiate", error)
        return StageResult.success("instantiate")

    def _report_error(self, result: StageResult, event: PluginEvent) -> None:
        assert result.error is not None
        logger.warning(
            "%s",
            result.error,
            exc_info=result.error.__cause__,
            extra={"stage": result.stage, "plugin_class": event.class_name},
        )
        self._bus.notify("plugin_error", runner=self, event=event)
