"""Tests for plugin root resolution and directory discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from pluginrunner import DirectoryUnavailableError
from pluginrunner.infrastructure.filesystem import (
    discover_plugins,
    ensure_directory,
    normalize_extensions,
    resolve_root,
)


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


class TestResolveRoot:
    def test_relative_uses_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert resolve_root("Plugins") == tmp_path / "Plugins"

    def test_relative_uses_base(self, tmp_path: Path) -> None:
        assert resolve_root("ext", base=tmp_path) == tmp_path / "ext"

    def test_absolute_is_kept(self, tmp_path: Path) -> None:
        assert resolve_root(tmp_path / "abs", base=Path("/elsewhere")) == tmp_path / "abs"


class TestNormalizeExtensions:
    def test_adds_dot_and_lowercases(self) -> None:
        assert normalize_extensions(["PY", ".Plug"]) == (".py", ".plug")

    def test_dedupes_preserving_order(self) -> None:
        assert normalize_extensions([".pyc", ".py", "pyc"]) == (".pyc", ".py")

    def test_empty_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            normalize_extensions(["", "  "])


class TestEnsureDirectory:
    def test_creates_nested(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b"
        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_existing_is_fine(self, tmp_path: Path) -> None:
        assert ensure_directory(tmp_path) == tmp_path

    def test_file_in_the_way(self, tmp_path: Path) -> None:
        blocker = _touch(tmp_path / "blocker")
        with pytest.raises(DirectoryUnavailableError) as exc_info:
            ensure_directory(blocker)
        assert exc_info.value.filename == str(blocker)
        assert isinstance(exc_info.value.__cause__, FileExistsError)


class TestDiscoverPlugins:
    def test_counts_and_order(self, tmp_path: Path) -> None:
        for name in ("b_file", "a_file", "c_file"):
            _touch(tmp_path / f"{name}.py")
        for name in ("y_dir", "x_dir"):
            _touch(tmp_path / name / f"{name}.py")

        plugins = discover_plugins(tmp_path)

        assert [p.name for p in plugins] == ["x_dir", "y_dir", "a_file", "b_file", "c_file"]

    def test_creates_missing_root(self, tmp_path: Path) -> None:
        root = tmp_path / "missing"
        assert discover_plugins(root) == []
        assert root.is_dir()
        assert discover_plugins(root) == []

    def test_is_one_level_deep(self, tmp_path: Path) -> None:
        _touch(tmp_path / "outer" / "inner" / "inner.py")
        _touch(tmp_path / "outer" / "nested.py")
        assert discover_plugins(tmp_path) == []

    def test_folder_artifact_follows_extension_order(self, tmp_path: Path) -> None:
        _touch(tmp_path / "dual" / "dual.py")
        _touch(tmp_path / "dual" / "dual.plug")

        (plugin,) = discover_plugins(tmp_path, [".plug", ".py"])

        assert plugin.path == tmp_path / "dual" / "dual.plug"

    def test_file_extension_match_is_case_insensitive(self, tmp_path: Path) -> None:
        _touch(tmp_path / "Upper.PY")
        (plugin,) = discover_plugins(tmp_path)
        assert plugin.name == "Upper"
        assert plugin.path == tmp_path / "Upper.PY"

    def test_dotted_file_name_keeps_inner_dots(self, tmp_path: Path) -> None:
        _touch(tmp_path / "my.plugin.py")
        (plugin,) = discover_plugins(tmp_path)
        assert plugin.name == "my.plugin"

    def test_non_matching_files_ignored(self, tmp_path: Path) -> None:
        _touch(tmp_path / "readme.md")
        _touch(tmp_path / "data.pyx")
        assert discover_plugins(tmp_path) == []
