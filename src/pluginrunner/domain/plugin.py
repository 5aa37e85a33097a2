"""Plugin descriptor — a discovered, independently loadable unit of code."""

from __future__ import annotations

import re
from pathlib import Path
from types import ModuleType

from pydantic import BaseModel

from pluginrunner.infrastructure.loader import load_module

MODULE_PREFIX = "pluginrunner_plugin_"


class Plugin(BaseModel):
    """Name and location of one plugin artifact.

    The path is not checked at construction; a missing artifact surfaces
    as a load failure when the plugin is run. Descriptors with the same
    name are legal and are loaded independently.

    Attributes:
        name: Folder name or file stem the plugin was discovered under.
        path: Filesystem path of the loadable artifact.
    """

    model_config = {"frozen": True}

    name: str
    path: Path

    @property
    def module_name(self) -> str:
        """``sys.modules`` key the plugin code executes under."""
        return MODULE_PREFIX + re.sub(r"\W", "_", self.name)

    def load(self) -> ModuleType:
        """Read and execute the artifact, returning a fresh module.

        Nothing is cached: every call re-reads the file from disk.
        """
        return load_module(self.module_name, self.path)
