"""Plugin root resolution and directory discovery.

Two layouts are recognised directly under the root:

- folder style: ``<root>/<Name>/<Name><ext>``
- single file:  ``<root>/<Name><ext>``

Discovery is one level deep. Folder-style plugins always precede
single-file plugins; each group is ordered by name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pluginrunner.domain.errors import DirectoryUnavailableError
from pluginrunner.domain.plugin import Plugin

DEFAULT_PATH = "Plugins"
DEFAULT_EXTENSIONS: tuple[str, ...] = (".py",)

logger = logging.getLogger(__name__)


def resolve_root(path: str | Path = DEFAULT_PATH, *, base: Path | None = None) -> Path:
    """Absolute plugin root. Relative paths hang off *base* (default: cwd)."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (base or Path.cwd()) / p


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    """Lower-case, dot-prefixed, de-duplicated extensions in their given order."""
    result: list[str] = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        if ext not in result:
            result.append(ext)
    if not result:
        msg = "At least one plugin extension is required"
        raise ValueError(msg)
    return tuple(result)


def ensure_directory(root: Path) -> Path:
    """Create *root* (and parents) if it does not exist yet."""
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryUnavailableError(
            exc.errno, f"Cannot create plugin directory: {exc.strerror or exc}", str(root)
        ) from exc
    return root


def discover_plugins(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> list[Plugin]:
    """Scan *root* for plugins, creating it when missing.

    Raises:
        DirectoryUnavailableError: *root* cannot be created or listed.
    """
    exts = normalize_extensions(extensions)
    ensure_directory(root)
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise DirectoryUnavailableError(
            exc.errno, f"Cannot list plugin directory: {exc.strerror or exc}", str(root)
        ) from exc

    folder_plugins: list[Plugin] = []
    file_plugins: list[Plugin] = []
    for entry in entries:
        if entry.is_dir():
            artifact = _folder_artifact(entry, exts)
            if artifact is None:
                logger.debug("No plugin artifact in folder %s", entry)
                continue
            folder_plugins.append(Plugin(name=entry.name, path=artifact))
        elif entry.is_file() and entry.name.lower().endswith(exts):
            file_plugins.append(Plugin(name=_strip_extension(entry.name, exts), path=entry))

    plugins = folder_plugins + file_plugins
    logger.debug(
        "Discovered %d plugin(s) in %s (%d folder, %d file)",
        len(plugins),
        root,
        len(folder_plugins),
        len(file_plugins),
    )
    return plugins


def _folder_artifact(folder: Path, extensions: tuple[str, ...]) -> Path | None:
    """First ``<folder>/<folder name><ext>`` that exists, in extension order."""
    for ext in extensions:
        candidate = folder / f"{folder.name}{ext}"
        if candidate.is_file():
            return candidate
    return None


def _strip_extension(filename: str, extensions: tuple[str, ...]) -> str:
    lowered = filename.lower()
    for ext in sorted(extensions, key=len, reverse=True):
        if lowered.endswith(ext):
            return filename[: -len(ext)]
    return filename
