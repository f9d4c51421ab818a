"""
Console sink: renders build records through structlog.

The message template is rendered to text and logged as the record's message;
contextual tags become key/values on the structlog event.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import structlog

from buildlog_listener.buildlog_logging import get_logger
from buildlog_listener.sinks.base import LogLevel
from buildlog_listener.sinks.template import render_template

_METHOD_FOR_LEVEL = {
    LogLevel.VERBOSE: "debug",
    LogLevel.DEBUG: "debug",
    LogLevel.INFORMATION: "info",
    LogLevel.WARNING: "warning",
    LogLevel.ERROR: "error",
    LogLevel.FATAL: "critical",
}


class ConsoleSink:
    def __init__(self, log: structlog.BoundLogger | None = None) -> None:
        self._log = log or get_logger("build")

    def emit(
        self,
        level: LogLevel,
        template: str,
        args: Sequence[Any],
        tags: Mapping[str, Any],
    ) -> None:
        method = getattr(self._log, _METHOD_FOR_LEVEL[level])
        method("build_record", message=render_template(template, args), build_level=level.value, **dict(tags))
