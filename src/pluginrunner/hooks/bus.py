"""Notification bus — subscriber registration and hook dispatch via pluggy.

Subscribers are either objects carrying ``@hookimpl`` methods or plain
callables attached to a single hook with :meth:`NotificationBus.subscribe`.
Installed distributions can also publish subscribers under the
``pluginrunner.subscribers`` entry-point group.

Dispatch walks the hook implementations itself instead of calling the
pluggy hook relay: subscribers run in the order they were registered
(``tryfirst`` ones ahead, ``trylast`` ones behind), and each call is
isolated so one failing subscriber never hides the event from the rest.

INVARIANT: Subscriber failures are warnings, never errors.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pluggy

from pluginrunner.domain.plugin import Plugin
from pluginrunner.hooks.hookspecs import HOOK_NAMES, PROJECT_NAME, PluginRunnerHookSpec, hookimpl

if TYPE_CHECKING:
    from pluggy import HookImpl

ENTRYPOINT_GROUP = "pluginrunner.subscribers"

logger = logging.getLogger(__name__)


class _CallbackSubscriber:
    """Adapts one plain callable to one hook."""

    def __init__(self, hook_name: str, callback: Callable[..., Any]) -> None:
        self.hook_name = hook_name
        self.callback = callback
        setattr(self, hook_name, _make_relay(hook_name, callback))

    def __repr__(self) -> str:
        return f"<subscriber {self.hook_name}: {self.callback!r}>"


def _make_relay(hook_name: str, callback: Callable[..., Any]) -> Callable[..., Any]:
    # Pluggy passes arguments by name, so the relay must spell them out.
    if hook_name == "init_plugins":

        def relay_plugins(runner, plugins):
            return callback(runner, plugins)

        return hookimpl(specname=hook_name)(relay_plugins)

    def relay_event(runner, event):
        return callback(runner, event)

    return hookimpl(specname=hook_name)(relay_event)


class NotificationBus:
    """Owns the pluggy manager that carries every lifecycle hook."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PluginRunnerHookSpec)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, subscriber: object, name: str | None = None) -> str:
        """Register a subscriber instance carrying ``@hookimpl`` methods.

        Returns the name it was registered under.
        """
        if inspect.isclass(subscriber):
            msg = f"Register an instance of {subscriber.__name__}, not the class itself"
            raise TypeError(msg)
        if not isinstance(subscriber, _CallbackSubscriber) and not self._has_hook_impls(
            type(subscriber)
        ):
            logger.warning("Subscriber %r implements no pluginrunner hooks", subscriber)
        registered = self._pm.register(subscriber, name=name)
        assert registered is not None
        logger.debug("Registered subscriber: %s", registered)
        return registered

    def subscribe(self, hook_name: str, callback: Callable[..., Any]) -> object:
        """Attach *callback* to a single hook.

        The callback receives ``(runner, plugins)`` for ``init_plugins`` and
        ``(runner, event)`` for every other hook. Returns a handle accepted
        by :meth:`unregister`.
        """
        if hook_name not in HOOK_NAMES:
            msg = f"Unknown hook {hook_name!r}; expected one of {', '.join(HOOK_NAMES)}"
            raise ValueError(msg)
        handle = _CallbackSubscriber(hook_name, callback)
        self.register(handle)
        return handle

    def unregister(self, subscriber: object) -> None:
        """Remove a previously registered subscriber or subscription handle."""
        self._pm.unregister(subscriber)

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> int:
        """Register subscribers published by installed distributions.

        Entry points may name a subscriber class; such classes are
        instantiated before registration. Returns the number loaded.
        """
        count = self._pm.load_setuptools_entrypoints(group)
        self._normalize_subscriber_classes()
        return count

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for direct dispatch."""
        return self._pm.hook

    def get_subscribers(self) -> list[object]:
        """Return all registered subscribers."""
        return list(self._pm.get_plugins())

    def list_subscriber_names(self) -> list[str]:
        """Return names of all registered subscribers."""
        return [self._pm.get_name(p) or repr(p) for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def notify(self, hook_name: str, **kwargs: Any) -> list[Any]:
        """Call every *hook_name* subscriber with *kwargs*, in registration order.

        Returns the non-None results of the subscribers that completed.
        A subscriber that raises is logged and contributes no result.
        """
        results = []
        for impl in self._ordered_impls(hook_name):
            result = self._call(hook_name, impl, kwargs)
            if result is not None:
                results.append(result)
        return results

    def is_vetoed(self, **kwargs: Any) -> bool:
        """Dispatch ``before_run_plugin``; True if any subscriber vetoed."""
        return any(self.notify("before_run_plugin", **kwargs))

    def init_plugins(self, runner: Any, plugins: list[Plugin]) -> list[Plugin]:
        """Pass *plugins* through every ``init_plugins`` subscriber in turn.

        Each subscriber receives the list left by the one before it. A
        returned list replaces it; None keeps it, in-place edits included.
        Results that are not a list of :class:`Plugin` are logged and
        ignored.
        """
        current = plugins
        for impl in self._ordered_impls("init_plugins"):
            result = self._call("init_plugins", impl, {"runner": runner, "plugins": current})
            if result is None:
                continue
            replacement = self._as_plugin_list(impl, result)
            if replacement is not None:
                current = replacement
        return current

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _ordered_impls(self, hook_name: str) -> list[HookImpl]:
        # pluggy keeps trylast, plain, then tryfirst impls, each group in
        # registration order, and calls them back to front.
        impls = getattr(self._pm.hook, hook_name).get_hookimpls()
        plain = [i for i in impls if not (i.tryfirst or i.trylast)]
        first = [i for i in impls if i.tryfirst]
        last = [i for i in impls if i.trylast]
        ordered = []
        for impl in [*first, *plain, *last]:
            if impl.hookwrapper or impl.wrapper:
                logger.debug("Ignoring wrapper %s on %s", impl.plugin_name, hook_name)
                continue
            ordered.append(impl)
        return ordered

    @staticmethod
    def _call(hook_name: str, impl: HookImpl, kwargs: dict[str, Any]) -> Any:
        try:
            return impl.function(*(kwargs[name] for name in impl.argnames))
        except Exception:
            logger.warning(
                "Subscriber %s failed during %s", impl.plugin_name, hook_name, exc_info=True
            )
            return None

    @staticmethod
    def _as_plugin_list(impl: HookImpl, result: Any) -> list[Plugin] | None:
        try:
            plugins = list(result)
        except TypeError:
            logger.warning(
                "Subscriber %s returned %s from init_plugins instead of a plugin list; ignored",
                impl.plugin_name,
                type(result).__name__,
            )
            return None
        invalid = [p for p in plugins if not isinstance(p, Plugin)]
        if invalid:
            logger.warning(
                "Subscriber %s returned %d non-Plugin item(s) from init_plugins; ignored",
                impl.plugin_name,
                len(invalid),
            )
            return None
        return plugins

    def _normalize_subscriber_classes(self) -> None:
        """Replace registered subscriber classes with instantiated objects.

        Entry-point loading may register a class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for subscriber in list(self._pm.get_plugins()):
            if not inspect.isclass(subscriber):
                continue
            if not self._has_hook_impls(subscriber):
                continue

            name = self._pm.get_name(subscriber) or subscriber.__name__
            self._pm.unregister(subscriber)

            try:
                instance = subscriber()
            except Exception:
                logger.warning("Failed to instantiate entry-point subscriber %s", name, exc_info=True)
                continue

            self._pm.register(instance, name=name)
            logger.debug("Instantiated entry-point subscriber: %s", name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("pluginrunner")`` sets a
        ``pluginrunner_impl`` attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, f"{PROJECT_NAME}_impl", None):
                return True
        return False
