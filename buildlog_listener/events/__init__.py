"""
Build events package.

Typed event records for every callback of the build-event source, the ordered
dispatch seam the listener subscribes to, and a JSON-lines decoder for
recorded event streams.
"""

from buildlog_listener.events.models import (
    EVENT_TYPES,
    BuildEvent,
    BuildFinished,
    BuildStarted,
    CustomRaised,
    ErrorRaised,
    MessageImportance,
    MessageRaised,
    ProjectFinished,
    ProjectStarted,
    TargetFinished,
    TargetStarted,
    TaskFinished,
    TaskStarted,
    WarningRaised,
)
from buildlog_listener.events.reader import decode_event, read_events
from buildlog_listener.events.source import BuildEventSource

__all__ = [
    "EVENT_TYPES",
    "BuildEvent",
    "BuildEventSource",
    "BuildFinished",
    "BuildStarted",
    "CustomRaised",
    "ErrorRaised",
    "MessageImportance",
    "MessageRaised",
    "ProjectFinished",
    "ProjectStarted",
    "TargetFinished",
    "TargetStarted",
    "TaskFinished",
    "TaskStarted",
    "WarningRaised",
    "decode_event",
    "read_events",
]
