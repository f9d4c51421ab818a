"""
Log emitter interface and composition helpers.

An emitter accepts a level, a message template, positional arguments for the
template's holes, and a mapping of contextual tags. The router makes exactly
one emit() call per log-worthy build event; what happens afterwards
(filtering, batching, network delivery) belongs to the emitter.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Protocol, Sequence


class LogLevel(str, Enum):
    VERBOSE = "Verbose"
    DEBUG = "Debug"
    INFORMATION = "Information"
    WARNING = "Warning"
    ERROR = "Error"
    FATAL = "Fatal"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)


_LEVEL_ORDER = (
    LogLevel.VERBOSE,
    LogLevel.DEBUG,
    LogLevel.INFORMATION,
    LogLevel.WARNING,
    LogLevel.ERROR,
    LogLevel.FATAL,
)


class LogEmitter(Protocol):
    """Destination for tagged log records."""

    def emit(
        self,
        level: LogLevel,
        template: str,
        args: Sequence[Any],
        tags: Mapping[str, Any],
    ) -> None:
        """Accept one record. Delivery problems are the emitter's own concern."""


class LevelFilter:
    """Forwards records at or above a minimum level."""

    def __init__(self, inner: LogEmitter, min_level: LogLevel) -> None:
        self._inner = inner
        self._min_level = min_level

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    def emit(
        self,
        level: LogLevel,
        template: str,
        args: Sequence[Any],
        tags: Mapping[str, Any],
    ) -> None:
        if level.rank < self._min_level.rank:
            return
        self._inner.emit(level, template, args, tags)

    def flush(self) -> None:
        flush_emitter(self._inner)

    def close(self) -> None:
        close_emitter(self._inner)


class FanoutEmitter:
    """Forwards every record to each registered emitter, in registration order."""

    def __init__(self, emitters: Sequence[LogEmitter] = ()) -> None:
        self._emitters: list[LogEmitter] = list(emitters)

    def add(self, emitter: LogEmitter) -> None:
        self._emitters.append(emitter)

    @property
    def emitters(self) -> list[LogEmitter]:
        return list(self._emitters)

    def emit(
        self,
        level: LogLevel,
        template: str,
        args: Sequence[Any],
        tags: Mapping[str, Any],
    ) -> None:
        for emitter in self._emitters:
            emitter.emit(level, template, args, tags)

    def flush(self) -> None:
        for emitter in self._emitters:
            flush_emitter(emitter)

    def close(self) -> None:
        for emitter in self._emitters:
            close_emitter(emitter)


def flush_emitter(emitter: Any) -> None:
    flush = getattr(emitter, "flush", None)
    if callable(flush):
        flush()


def close_emitter(emitter: Any) -> None:
    close = getattr(emitter, "close", None)
    if callable(close):
        close()
