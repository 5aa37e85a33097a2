"""Event payload passed to lifecycle hooks."""

from __future__ import annotations

from pydantic import BaseModel

from pluginrunner.domain.plugin import Plugin


class PluginEvent(BaseModel):
    """What a hook is being told about.

    ``no_plugins`` receives an empty event. ``before_run_plugin`` and
    ``load_plugin`` carry ``plugin``; ``load_class`` adds ``plugin_class``.
    ``plugin_error`` always carries ``error`` and, when known, the plugin
    and class that failed.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    plugin: Plugin | None = None
    plugin_class: type | None = None
    error: BaseException | None = None

    @property
    def class_name(self) -> str | None:
        if self.plugin_class is None:
            return None
        return self.plugin_class.__qualname__
