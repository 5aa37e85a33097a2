"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from pluginrunner import PluginRunner, RunnerSettings
from pluginrunner.config.logging import configure_from_settings, configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    runner_logger = logging.getLogger("pluginrunner")
    runner_level = runner_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    runner_logger.setLevel(runner_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("pluginrunner").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("pluginrunner").level == logging.WARNING

    def test_human_mode_output(self) -> None:
        configure_logging(verbose=True, log_json=False)
        log = structlog.get_logger("pluginrunner.test")
        log.warning("hello world", key="val")
        # Smoke test — verify no exception; format depends on terminal

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("pluginrunner.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "pluginrunner.test"
        assert "timestamp" in parsed

    def test_stdlib_runner_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("pluginrunner.hooks.bus").debug("Registered subscriber: probe")

        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "Registered subscriber: probe"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "pluginrunner.hooks.bus"

    def test_plugin_failure_is_rendered_with_traceback(
        self, tmp_path: Path, capfd: pytest.CaptureFixture[str]
    ) -> None:
        root = tmp_path / "plugins"
        root.mkdir()
        (root / "broken.py").write_text("raise RuntimeError('at import')\n", encoding="utf-8")
        configure_logging(verbose=False, log_json=True)

        PluginRunner(root).load()

        lines = [json.loads(line) for line in capfd.readouterr().err.splitlines() if line]
        (record,) = lines
        assert record["level"] == "warning"
        assert record["logger"] == "pluginrunner.services.runner"
        assert "Failed to load plugin 'broken'" in record["event"]
        assert "RuntimeError: at import" in record["exception"]
        assert record["plugin"] == "broken"
        assert record["stage"] == "load"
        assert "plugin_class" not in record

    def test_class_failure_names_the_class(
        self, tmp_path: Path, capfd: pytest.CaptureFixture[str]
    ) -> None:
        root = tmp_path / "plugins"
        root.mkdir()
        (root / "shaky.py").write_text(
            "from pluginrunner import PluginObject\n\n\n"
            "class Shaky(PluginObject):\n"
            "    def __init__(self, args):\n"
            "        raise ValueError('nope')\n",
            encoding="utf-8",
        )
        configure_logging(verbose=False, log_json=True)

        PluginRunner(root).load()

        (record,) = [json.loads(line) for line in capfd.readouterr().err.splitlines() if line]
        assert record["plugin"] == "shaky"
        assert record["stage"] == "instantiate"
        assert record["plugin_class"] == "Shaky"

    def test_plugin_context_is_bound_only_during_processing(
        self, tmp_path: Path, capfd: pytest.CaptureFixture[str]
    ) -> None:
        root = tmp_path / "plugins"
        root.mkdir()
        (root / "quiet.py").write_text("class Quiet:\n    pass\n", encoding="utf-8")
        configure_logging(verbose=True, log_json=True)

        PluginRunner(root).load()
        logging.getLogger("pluginrunner.test").debug("after run")

        records = [json.loads(line) for line in capfd.readouterr().err.splitlines() if line]
        finished = [r for r in records if r["event"].startswith("Finished as")]
        assert finished and finished[0]["plugin"] == "quiet"
        assert "plugin" not in records[-1]

    def test_configure_from_settings(self, tmp_path: Path) -> None:
        (tmp_path / "pluginrunner.toml").write_text(
            "[logging]\nverbose = true\n", encoding="utf-8"
        )
        configure_from_settings(RunnerSettings.load(base_dir=tmp_path))
        assert logging.getLogger("pluginrunner").level == logging.DEBUG

    def test_debug_is_hidden_when_not_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)

        logging.getLogger("pluginrunner.services.runner").debug("noise")

        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        root = logging.getLogger()
        assert len(root.handlers) == 1
