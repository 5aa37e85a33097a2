"""structlog rendering for pluginrunner's stdlib loggers.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. An embedding application that wants
structured output calls :func:`configure_logging` (or
:func:`configure_from_settings`) once.

Every record emitted while a plugin is being processed carries a
``plugin`` field, bound by the runner through structlog contextvars.
Failure warnings also carry ``stage`` and ``plugin_class`` extras.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pluginrunner.config.settings import RunnerSettings

LOGGER_NAME = "pluginrunner"


def _drop_empty_extras(
    _logger: object, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    # plugin_class is None for module-level failures.
    return {key: value for key, value in event_dict.items() if value is not None}


def _pre_chain(log_json: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(allow=("stage", "plugin_class")),
        _drop_empty_extras,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_json:
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all records through one structlog-formatted stderr handler.

    Args:
        verbose: DEBUG for the ``pluginrunner`` logger (discovery, state
            transitions); otherwise WARNING, which still shows every
            contained plugin and subscriber failure.
        log_json: One JSON object per line instead of console output.
    """
    pre_chain = _pre_chain(log_json)
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)


def configure_from_settings(settings: RunnerSettings) -> None:
    """Apply the ``[logging]`` section of *settings*."""
    configure_logging(verbose=settings.logging.verbose, log_json=settings.logging.log_json)
