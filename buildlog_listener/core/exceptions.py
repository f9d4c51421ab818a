"""
Application-level exceptions.

CorrelationViolation and its subclasses are fatal to the engine instance that
raised them: the event source broke the start/finish pairing contract and the
tracked context can no longer be trusted. MalformedProperties is recoverable;
the router drops the offending tag set and carries on.
"""

from __future__ import annotations

from typing import Any


class BuildLogError(Exception):
    """Base class for all listener errors."""


class CorrelationViolation(BuildLogError):
    """Start/finish events did not pair up; the engine instance is no longer usable."""


class EmptyStackError(CorrelationViolation):
    def __init__(self, operation: str = "pop") -> None:
        self.operation = operation
        super().__init__(f"{operation} on empty context stack: finish event without matching start")


class FrameKindMismatch(CorrelationViolation):
    def __init__(self, expected: Any, actual: Any, name: str) -> None:
        self.expected = expected
        self.actual = actual
        self.name = name
        super().__init__(
            f"{expected.value} finish event does not match open {actual.value} frame {name!r}"
        )


class UnclosedScopesError(CorrelationViolation):
    def __init__(self, frames: list[Any]) -> None:
        self.frames = list(frames)
        open_scopes = ", ".join(f"{f.kind.value}:{f.name}" for f in self.frames)
        super().__init__(f"build finished with {len(self.frames)} open scope(s): {open_scopes}")


class BuildStateError(CorrelationViolation):
    def __init__(self, event: str, state: Any) -> None:
        self.event = event
        self.state = state
        super().__init__(f"{event} not allowed while build is {state.value}")


class EngineFaultedError(CorrelationViolation):
    """Raised for every event delivered after an earlier correlation violation."""


class MalformedProperties(BuildLogError):
    """A property or environment collection is not a set of string-keyed pairs."""


class EventDecodeError(BuildLogError):
    def __init__(self, reason: str, line_number: int | None = None) -> None:
        self.reason = reason
        self.line_number = line_number
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason}")


class ConfigError(BuildLogError):
    """Invalid configuration value."""
