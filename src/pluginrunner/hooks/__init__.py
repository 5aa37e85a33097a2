"""Extension layer — lifecycle hooks via pluggy.

INVARIANT: Subscriber failures are warnings, never errors.
"""

from pluginrunner.hooks.bus import NotificationBus
from pluginrunner.hooks.hookspecs import HOOK_NAMES, hookimpl

__all__ = ["HOOK_NAMES", "NotificationBus", "hookimpl"]
