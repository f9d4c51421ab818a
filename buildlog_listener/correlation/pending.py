"""
Pending-message buffer for records produced before the root project is known.

The build-start event arrives before any project, yet its record should carry
the build identifier derived from the root project. Records are queued here as
plain data and drained exactly once, in insertion order, when the first
project starts. After draining the buffer is sealed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from buildlog_listener.sinks.base import LogLevel


@dataclass(frozen=True)
class PendingRecord:
    """One deferred emission: which event produced it and what to emit."""

    event_kind: str
    level: LogLevel
    template: str
    args: tuple[Any, ...] = ()
    tags: dict[str, Any] = field(default_factory=dict)


class PendingBuffer:
    """Ordered queue of PendingRecords; drained once, then sealed."""

    def __init__(self) -> None:
        self._records: list[PendingRecord] = []
        self._sealed = False

    def __len__(self) -> int:
        return len(self._records)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def append(self, record: PendingRecord) -> None:
        if self._sealed:
            raise RuntimeError("pending buffer already drained")
        self._records.append(record)

    def drain(self) -> Iterator[PendingRecord]:
        """Seal the buffer and yield its records in insertion order."""
        if self._sealed:
            raise RuntimeError("pending buffer already drained")
        self._sealed = True
        records, self._records = self._records, []
        return iter(records)
