"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pluginrunner.toml only contains
overrides. An empty file (or none at all) gives a runner scanning
``./Plugins`` for ``.py`` files under the default marker policy.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RunnerConfig(BaseModel):
    """[runner] section.

    ``parents`` keeps the three-way meaning of the runner option: omitted
    (None) for the default marker, ``[]`` for every public class, or a list
    of dotted base-class names.
    """

    model_config = {"frozen": True}

    path: str = "Plugins"
    parents: list[str] | None = None
    extensions: list[str] = Field(default_factory=lambda: [".py"])
    load_entrypoints: bool = False


class LoggingConfig(BaseModel):
    """[logging] section."""

    model_config = {"frozen": True}

    verbose: bool = False
    log_json: bool = False

