"""
Pytest fixtures for build log listener tests. Records emissions in memory instead of shipping them to Seq.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from buildlog_listener.router import BuildEventRouter

BUILD_START = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@dataclass
class Emitted:
    level: Any
    template: str
    args: tuple
    tags: dict


class RecordingEmitter:
    """Emitter that keeps every record it receives, in order."""

    def __init__(self) -> None:
        self.records: list[Emitted] = []
        self.flushes = 0
        self.closed = False

    def emit(self, level, template, args, tags) -> None:
        self.records.append(Emitted(level, template, tuple(args), dict(tags)))

    def flush(self) -> None:
        self.flushes += 1

    def close(self) -> None:
        self.closed = True

    def templates(self) -> list[str]:
        return [r.template for r in self.records]


@pytest.fixture
def emitter():
    return RecordingEmitter()


@pytest.fixture
def emitter_factory():
    """Callable producing a new RecordingEmitter each time, for multi-build hosts."""
    created: list[RecordingEmitter] = []

    def _make(*_args: Any) -> RecordingEmitter:
        created.append(RecordingEmitter())
        return created[-1]

    _make.created = created
    return _make


@pytest.fixture
def router(emitter):
    """Fresh engine for one build, writing to the recording emitter."""
    return BuildEventRouter(emitter)


@pytest.fixture
def at():
    """at(seconds) -> timestamp relative to the build start."""

    def _at(seconds: float = 0.0) -> datetime:
        return BUILD_START + timedelta(seconds=seconds)

    return _at
