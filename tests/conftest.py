"""Shared pytest fixtures and test helpers for pluginrunner tests."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from pluginrunner import PluginArgs, hookimpl


class Recorder:
    """Subscriber that records every hook call as ``(hook, plugin, class)``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str | None, str | None]] = []
        self.errors: list[BaseException] = []

    def _record(self, hook: str, event: Any) -> None:
        plugin_name = event.plugin.name if event.plugin is not None else None
        self.calls.append((hook, plugin_name, event.class_name))

    @hookimpl
    def no_plugins(self, runner, event) -> None:
        self._record("no_plugins", event)

    @hookimpl
    def before_run_plugin(self, runner, event) -> None:
        self._record("before_run_plugin", event)

    @hookimpl
    def load_class(self, runner, event) -> None:
        self._record("load_class", event)

    @hookimpl
    def load_plugin(self, runner, event) -> None:
        self._record("load_plugin", event)

    @hookimpl
    def plugin_error(self, runner, event) -> None:
        self._record("plugin_error", event)
        self.errors.append(event.error)

    def of(self, hook: str) -> list[tuple[str, str | None, str | None]]:
        """Calls recorded for a single hook."""
        return [call for call in self.calls if call[0] == hook]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def plugin_root(tmp_path: Path) -> Path:
    """Plugin directory path. Not created; tests decide whether it exists."""
    return tmp_path / "plugins"


@pytest.fixture
def write_plugin(plugin_root: Path) -> Callable[..., Path]:
    """Write plugin source under *plugin_root* and return the artifact path.

    ``folder=True`` uses the ``<root>/<name>/<name><ext>`` layout.
    """

    def _write(name: str, source: str, *, folder: bool = False, ext: str = ".py") -> Path:
        target_dir = plugin_root / name if folder else plugin_root
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"{name}{ext}"
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def args() -> PluginArgs:
    """Argument bundle whose ``created`` list plugin constructors append to."""
    return PluginArgs(created=[])


# ---------------------------------------------------------------------------
# Plugin sources shared across test modules
# ---------------------------------------------------------------------------

MARKER_PLUGIN = """\
from pluginrunner import PluginObject


class Greeter(PluginObject):
    def __init__(self, args):
        super().__init__(args)
        args.created.append("Greeter")


class Helper:
    def __init__(self, args):
        args.created.append("Helper")
"""

SHAPES_PLUGIN = """\
class Root:
    def __init__(self, args):
        args.created.append(type(self).__name__)


class Base(Root):
    pass


class Other(Root):
    pass


class A(Base):
    pass


class B(Other):
    pass


class C(Base):
    pass
"""

FAILING_CLASS_PLUGIN = """\
from pluginrunner import PluginObject


class First(PluginObject):
    def __init__(self, args):
        super().__init__(args)
        args.created.append("First")


class Broken(PluginObject):
    def __init__(self, args):
        raise RuntimeError("boom")


class Last(PluginObject):
    def __init__(self, args):
        super().__init__(args)
        args.created.append("Last")
"""

SYNTAX_ERROR_PLUGIN = """\
def broken(
    # missing closing paren and colon
"""
