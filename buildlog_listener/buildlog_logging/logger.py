"""
Diagnostics for the listener itself, written to stderr through structlog.

Build records never pass through here; they go to the sinks. This logger
reports what the listener does around them: the build id latch, sink delivery
failures, skipped property sets, host lifecycle. Every line is keyed by
event_type (JSON) so a Seq or log shipper can filter listener noise apart
from build output, and lines logged for a build carry build_id and
root_project once the root project is known.

LOG_LEVEL (default INFO) and LOG_FORMAT (json | console) are read from the
environment on import. No buildlog_listener imports here: every other module
imports this one.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

LISTENER_LOGGER = "buildlog_listener"


def _level_value(name: str) -> int:
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def build_processors(log_format: str) -> list[Any]:
    """Processor chain shared by the configured logger and the tests."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.EventRenamer("event_type"))
        processors.append(structlog.processors.JSONRenderer(default=str))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure(log_format: str = LOG_FORMAT, level: str = LOG_LEVEL) -> None:
    structlog.configure(
        processors=build_processors(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(_level_value(level)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure()


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for a listener module; the module name is bound as `logger`."""
    return structlog.get_logger(name).bind(logger=name)


def bind_build(build_id: str, root_project: str | None = None) -> structlog.BoundLogger:
    """
    Logger for one build, used by the router once the root project has started:

        log = bind_build("build_3f2a9c01d4e7", root_project="src/app.proj")
        log.info("router_build_id_assigned", pending=2)

    {"logger": "buildlog_listener", "build_id": "build_3f2a9c01d4e7",
     "root_project": "src/app.proj", "pending": 2, "level": "info",
     "timestamp": "...", "event_type": "router_build_id_assigned"}
    """
    log = get_logger(LISTENER_LOGGER).bind(build_id=build_id)
    if root_project is not None:
        log = log.bind(root_project=root_project)
    return log
