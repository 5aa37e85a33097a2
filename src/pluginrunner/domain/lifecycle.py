"""Per-run plugin lifecycle.

Every run restarts every plugin from ``PENDING``::

    PENDING -> LOADING -> FAILED
                       -> SKIPPED            (vetoed by before_run_plugin)
                       -> PARTIAL | LOADED   (after per-class processing)

Nothing is carried from one run into the next.
"""

from __future__ import annotations

from enum import StrEnum


class PluginState(StrEnum):
    """Where a plugin ended up (or currently is) within a single run."""

    PENDING = "pending"
    LOADING = "loading"
    FAILED = "failed"
    SKIPPED = "skipped"
    PARTIAL = "partial"
    LOADED = "loaded"
