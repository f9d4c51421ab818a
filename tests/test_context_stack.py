"""
Tests for the context stack and frames (push/pop ordering, parent positions, nearest-kind lookup).
"""

from __future__ import annotations

import dataclasses

import pytest

from buildlog_listener.core.exceptions import CorrelationViolation, EmptyStackError, FrameKindMismatch
from buildlog_listener.correlation import ContextStack, Frame, FrameKind


def test_open_sets_parent_to_previous_tail():
    """open() parents each new frame on the frame that was the tail."""
    stack = ContextStack()
    project = stack.open(FrameKind.PROJECT, "app.proj")
    target = stack.open(FrameKind.TARGET, "Build")
    task = stack.open(FrameKind.TASK, "Csc")
    assert project.parent_index is None
    assert target.parent_index == 0
    assert task.parent_index == 1
    assert stack.parent_of(task) is target
    assert stack.parent_of(project) is None
    assert stack.depth == 3


def test_frames_are_immutable():
    """Frames reject attribute assignment after construction."""
    frame = Frame(FrameKind.PROJECT, "app.proj")
    with pytest.raises(dataclasses.FrozenInstanceError):
        frame.parent_index = 4  # type: ignore[misc]


def test_pop_is_lifo():
    """pop() returns frames in reverse push order."""
    stack = ContextStack()
    stack.open(FrameKind.PROJECT, "a.proj")
    stack.open(FrameKind.TARGET, "Build")
    assert stack.pop().name == "Build"
    assert stack.pop().name == "a.proj"
    assert len(stack) == 0
    assert stack.peek_tail() is None


def test_pop_on_empty_raises_correlation_violation():
    """pop() on an empty stack is a correlation violation."""
    stack = ContextStack()
    with pytest.raises(EmptyStackError):
        stack.pop()
    with pytest.raises(CorrelationViolation):
        stack.pop()


def test_pop_expecting_wrong_kind_leaves_stack_untouched():
    """A kind mismatch raises and does not remove the tail frame."""
    stack = ContextStack()
    stack.open(FrameKind.PROJECT, "a.proj")
    stack.open(FrameKind.TARGET, "Build")
    with pytest.raises(FrameKindMismatch) as excinfo:
        stack.pop_expecting(FrameKind.PROJECT)
    assert excinfo.value.actual is FrameKind.TARGET
    assert stack.depth == 2
    assert stack.pop_expecting(FrameKind.TARGET).name == "Build"


def test_pop_expecting_on_empty_raises():
    """pop_expecting() on an empty stack raises EmptyStackError."""
    with pytest.raises(EmptyStackError):
        ContextStack().pop_expecting(FrameKind.TASK)


def test_find_nearest_scans_whole_stack():
    """find_nearest() returns the innermost frame of the kind, past other kinds."""
    stack = ContextStack()
    stack.open(FrameKind.PROJECT, "outer.proj")
    stack.open(FrameKind.TARGET, "Build")
    stack.open(FrameKind.PROJECT, "inner.proj")
    stack.open(FrameKind.TARGET, "Compile")
    stack.open(FrameKind.TASK, "MSBuild")
    assert stack.find_nearest(FrameKind.PROJECT).name == "inner.proj"
    assert stack.find_nearest(FrameKind.TARGET).name == "Compile"
    stack.pop()
    stack.pop()
    stack.pop()
    assert stack.find_nearest(FrameKind.PROJECT).name == "outer.proj"
    assert stack.find_nearest(FrameKind.TASK) is None


def test_push_accepts_prebuilt_frame():
    """push() appends a caller-built frame as the new tail."""
    stack = ContextStack()
    frame = Frame(FrameKind.PROJECT, "a.proj", None)
    stack.push(frame)
    assert stack.peek_tail() is frame
    assert stack.snapshot() == [frame]
