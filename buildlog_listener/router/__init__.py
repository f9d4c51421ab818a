"""
Event router — drives the context stack from the ordered build event stream
and emits one tagged record per event.
"""

from buildlog_listener.router.engine import LEVEL_FOR_IMPORTANCE, BuildEventRouter, BuildState
from buildlog_listener.router.properties import string_pairs

__all__ = [
    "LEVEL_FOR_IMPORTANCE",
    "BuildEventRouter",
    "BuildState",
    "string_pairs",
]
