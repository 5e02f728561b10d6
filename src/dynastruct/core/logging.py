# src/dynastruct/core/logging.py
"""Logging for dynastruct.

The core modules log generation events as structlog key/value events:

    dependency_graph_built      struct=, fields=, edges=
    dependency_graph_invalid    struct=, unknown= or cycle=
    dependency_graph_validated  struct=, fields=, edges=
    name_collisions_detected    struct=, names=
    functions_emitted           struct=, functions=, mode=, fingerprint=

get_logger() emits them through the stdlib logger of the same name, with
the key/value pairs carried as LogRecord extras. A program that imports
dynastruct (typically through @dynamic_struct) therefore sees nothing until
it configures logging itself, and whatever it configures applies.

configure_logging() is what the CLI uses: one stderr handler whose
ProcessorFormatter lifts the extras back into the event dict and renders
console or JSON lines. stdout is left to the generated source.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter
from structlog.typing import EventDict, WrappedLogger

# Chatty at DEBUG; held at WARNING unless the root level is stricter
_QUIET_LOGGERS: tuple[str, ...] = (
    "dynaconf",
    "markdown_it",
)


def _drop_formatter_keys(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """ProcessorFormatter bookkeeping, not part of the event."""
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)
    return event_dict


def _record_chain() -> list[Any]:
    return [
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_keys,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        _drop_formatter_keys,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def configure_logging(*, json_output: bool = False, level: str = "INFO") -> None:
    """Send every log record to stderr as one console or JSON line.

    Replaces the root logger's handlers.

    Args:
        json_output: Render JSON objects instead of console lines
        level: Root log level name (DEBUG shows every generation event)
    """
    log_level = getattr(logging, level.upper())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            foreign_pre_chain=_record_chain(),
            processors=_render_chain(json_output),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structured logger that emits through the stdlib logger ``name``.

    Event keys must not shadow LogRecord attributes (``name``, ``msg``,
    ``args``, ``module`` and so on).
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger
