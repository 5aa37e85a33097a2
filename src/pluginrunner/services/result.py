"""StageResult — outcome of one pipeline stage for one plugin.

INVARIANT: Stages return StageResult instead of raising.
The run loop inspects each result and decides which hook to fire;
an inner failure never aborts the outer loop.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from pluginrunner.domain.errors import PluginRunnerError


class StageResult(BaseModel):
    """Return type of the runner's per-plugin stages.

    Attributes:
        ok: Whether the stage succeeded.
        stage: Name of the stage (``"load"`` or ``"instantiate"``).
        value: Stage payload on success (the public classes for ``load``).
        error: Wrapped failure if ``ok`` is False.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    ok: bool
    stage: str
    value: Any = None
    error: PluginRunnerError | None = None

    @classmethod
    def success(cls, stage: str, value: Any = None) -> StageResult:
        return cls(ok=True, stage=stage, value=value)

    @classmethod
    def failure(cls, stage: str, error: PluginRunnerError) -> StageResult:
        return cls(ok=False, stage=stage, error=error)
