"""
Ancestor resolver: which open scopes tag a log record.

One reverse scan of the context stack fills at most one project, one target
and one task slot:

- a TASK frame counts only while nothing else has been found, so it must be
  the innermost frame;
- a TARGET frame counts until a project is found, even after a task;
- the first PROJECT frame fills the project slot and ends the scan, so an
  outer project that invoked this one never leaks into the tags.

Only filled slots become tags. Finished scopes are already off the stack, so
a record raised directly under a project never inherits a stale target name.
"""

from __future__ import annotations

from typing import Any, Iterable

from buildlog_listener.correlation.context import (
    TAG_PROJECT_PATH,
    TAG_TARGET_NAME,
    TAG_TASK_NAME,
)
from buildlog_listener.correlation.frames import Frame, FrameKind


def resolve_ancestor_tags(frames: Iterable[Frame]) -> dict[str, Any]:
    """
    Compute {ProjectPath?, TargetName?, TaskName?} for the given stack.

    Args:
        frames: Open frames, outermost first (a ContextStack works directly).

    Returns:
        Tag mapping with only the slots that were filled.
    """
    ordered = list(frames)
    project: str | None = None
    target: str | None = None
    task: str | None = None

    for frame in reversed(ordered):
        if frame.kind is FrameKind.TASK:
            if target is None and task is None:
                task = frame.name
        elif frame.kind is FrameKind.TARGET:
            if target is None:
                target = frame.name
        elif frame.kind is FrameKind.PROJECT:
            project = frame.name
            break

    tags: dict[str, Any] = {}
    if project is not None:
        tags[TAG_PROJECT_PATH] = project
    if target is not None:
        tags[TAG_TARGET_NAME] = target
    if task is not None:
        tags[TAG_TASK_NAME] = task
    return tags
