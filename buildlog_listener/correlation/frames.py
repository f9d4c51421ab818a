"""
Scope frames for the context stack.

A Frame is one open build scope (project, target or task). Its parent is the
stack position of the frame that was open when it was pushed; frames never
reference each other directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FrameKind(str, Enum):
    PROJECT = "project"
    TARGET = "target"
    TASK = "task"


@dataclass(frozen=True)
class Frame:
    """
    Immutable record of one open scope.

    name is the project file path for PROJECT frames and the target or task
    name otherwise.
    """

    kind: FrameKind
    name: str
    parent_index: int | None = None
    """Stack position of the enclosing frame; None for the outermost frame."""
