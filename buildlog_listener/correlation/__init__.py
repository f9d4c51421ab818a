"""
Context-correlation engine: frames, context stack, ancestor resolver and the
pending-message buffer used until the root project is known.
"""

from buildlog_listener.correlation.context import LogContext, derive_build_id
from buildlog_listener.correlation.frames import Frame, FrameKind
from buildlog_listener.correlation.pending import PendingBuffer, PendingRecord
from buildlog_listener.correlation.resolver import resolve_ancestor_tags
from buildlog_listener.correlation.stack import ContextStack

__all__ = [
    "ContextStack",
    "Frame",
    "FrameKind",
    "LogContext",
    "PendingBuffer",
    "PendingRecord",
    "derive_build_id",
    "resolve_ancestor_tags",
]
