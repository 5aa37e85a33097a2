"""Default marker base class and the argument bundle handed to constructors."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class PluginArgs(BaseModel):
    """Open argument bundle forwarded to every plugin constructor.

    Any keyword is accepted and exposed as an attribute::

        args = PluginArgs(app=app, registry=[])
        args.registry.append(...)

    The runner never inspects the bundle. Callers may pass any other object
    instead of a ``PluginArgs``.
    """

    model_config = {"extra": "allow", "arbitrary_types_allowed": True}


class PluginObject:
    """Marker base for plugin classes instantiated under the default policy."""

    def __init__(self, args: Any = None) -> None:
        self.args = args


def qualified_name(cls: type) -> str:
    """Return the dotted ``module.qualname`` identity used by base-type policies."""
    return f"{cls.__module__}.{cls.__qualname__}"
