"""
Context stack: the chain of currently open scopes, outermost first.

Push on scope start, pop on the matching scope finish. Popping an empty stack
or popping a frame of the wrong kind means the event source broke the
start/finish pairing and is raised, never ignored.
"""

from __future__ import annotations

from typing import Iterator

from buildlog_listener.core.exceptions import EmptyStackError, FrameKindMismatch
from buildlog_listener.correlation.frames import Frame, FrameKind


class ContextStack:
    """LIFO sequence of open Frames."""

    def __init__(self) -> None:
        self._frames: list[Frame] = []

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __reversed__(self) -> Iterator[Frame]:
        return reversed(self._frames)

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push(self, frame: Frame) -> None:
        self._frames.append(frame)

    def open(self, kind: FrameKind, name: str) -> Frame:
        """Build a frame parented on the current tail and push it."""
        parent_index = len(self._frames) - 1 if self._frames else None
        frame = Frame(kind=kind, name=name, parent_index=parent_index)
        self.push(frame)
        return frame

    def pop(self) -> Frame:
        if not self._frames:
            raise EmptyStackError("pop")
        return self._frames.pop()

    def pop_expecting(self, kind: FrameKind) -> Frame:
        """Pop the tail frame, which must be of the given kind; stack is untouched on failure."""
        tail = self.peek_tail()
        if tail is None:
            raise EmptyStackError(f"{kind.value} finish")
        if tail.kind is not kind:
            raise FrameKindMismatch(kind, tail.kind, tail.name)
        return self._frames.pop()

    def peek_tail(self) -> Frame | None:
        return self._frames[-1] if self._frames else None

    def find_nearest(self, kind: FrameKind) -> Frame | None:
        """Return the innermost frame of the given kind, scanning the whole stack."""
        for frame in reversed(self._frames):
            if frame.kind is kind:
                return frame
        return None

    def parent_of(self, frame: Frame) -> Frame | None:
        if frame.parent_index is None:
            return None
        return self._frames[frame.parent_index]

    def snapshot(self) -> list[Frame]:
        return list(self._frames)
