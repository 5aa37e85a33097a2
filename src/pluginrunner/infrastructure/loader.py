"""Uncached execution of plugin artifacts and public class enumeration.

Every call to :func:`load_module` re-reads the artifact from disk and
executes it into a brand-new module object. Python sources are compiled
straight from the file, bypassing ``__pycache__``, so an edit made between
two runs is always observed by the second one.
"""

from __future__ import annotations

import importlib.machinery
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType

logger = logging.getLogger(__name__)

# Suffixes that need the interpreter's own loaders (bytecode, C extensions).
_NATIVE_SUFFIXES = frozenset(
    s.lower()
    for s in (*importlib.machinery.BYTECODE_SUFFIXES, *importlib.machinery.EXTENSION_SUFFIXES)
)


class FreshSourceFileLoader(importlib.machinery.SourceFileLoader):
    """Source loader that never reads or writes cached bytecode."""

    def get_code(self, fullname: str):  # type: ignore[override]
        source_path = self.get_filename(fullname)
        return self.source_to_code(self.get_data(source_path), source_path)


def _is_native(path: Path) -> bool:
    name = path.name.lower()
    return any(name.endswith(suffix) for suffix in _NATIVE_SUFFIXES)


def load_module(module_name: str, path: Path) -> ModuleType:
    """Execute the artifact at *path* as a new module named *module_name*.

    The module is published in ``sys.modules`` while (and after) it executes,
    replacing whatever an earlier load left there. On failure the partial
    module is removed and the original exception propagates.
    """
    loader = None if _is_native(path) else FreshSourceFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    if spec is None or spec.loader is None:
        msg = f"Could not create module spec for {path}"
        raise ImportError(msg, name=module_name, path=str(path))

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    logger.debug("Executed %s as %s", path, module_name)
    return module


def public_classes(module: ModuleType) -> list[type]:
    """Return the classes *module* defines and exposes, in definition order.

    Classes imported from elsewhere are excluded. ``__all__`` narrows the
    public surface when present; otherwise ``_``-prefixed names are private.
    """
    exported = getattr(module, "__all__", None)
    public_names = set(exported) if exported is not None else None

    found: list[type] = []
    for attr_name, obj in vars(module).items():
        if not inspect.isclass(obj) or obj.__module__ != module.__name__:
            continue
        if public_names is not None:
            if attr_name not in public_names:
                continue
        elif attr_name.startswith("_"):
            continue
        if obj not in found:
            found.append(obj)
    return found
