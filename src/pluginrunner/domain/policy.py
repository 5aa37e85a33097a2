"""Accepted-base-type policy for plugin class eligibility.

Three modes, resolved once from the ``parents`` option:

- ``None``           -> :attr:`PolicyMode.DEFAULT_MARKER` (only :class:`PluginObject`)
- empty sequence     -> :attr:`PolicyMode.ACCEPT_ALL`
- non-empty sequence -> :attr:`PolicyMode.EXPLICIT` (dotted base-class names)

INVARIANT: Only direct bases are checked. A class deriving from an accepted
base through an intermediate class is not eligible.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, Field

from pluginrunner.domain.base import PluginObject, qualified_name

DEFAULT_PARENT = qualified_name(PluginObject)


class PolicyMode(StrEnum):
    """How a :class:`BasePolicy` decides eligibility."""

    ACCEPT_ALL = "accept_all"
    DEFAULT_MARKER = "default_marker"
    EXPLICIT = "explicit"


class BasePolicy(BaseModel):
    """Immutable set of accepted direct-base names."""

    model_config = {"frozen": True}

    mode: PolicyMode
    names: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def from_parents(cls, parents: Iterable[str] | None) -> BasePolicy:
        """Resolve the ``parents`` construction option into a policy."""
        if parents is None:
            return cls(mode=PolicyMode.DEFAULT_MARKER, names=frozenset({DEFAULT_PARENT}))
        names = frozenset(parents)
        if not names:
            return cls(mode=PolicyMode.ACCEPT_ALL)
        return cls(mode=PolicyMode.EXPLICIT, names=names)

    @property
    def accepts_all(self) -> bool:
        return self.mode is PolicyMode.ACCEPT_ALL

    def contains(self, name: str) -> bool:
        """Whether *name* is one of the accepted base names."""
        return name in self.names

    def accepts(self, cls: type) -> bool:
        """Whether *cls* is eligible for instantiation."""
        if self.accepts_all:
            return True
        return any(self.contains(qualified_name(base)) for base in cls.__bases__)
