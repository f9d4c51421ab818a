"""
Ordered callback source for build events.

Hosts register one handler list per event type and dispatch events one at a
time; each event is fully handled by every subscriber before dispatch()
returns. Handler exceptions propagate to the dispatching host.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Iterable

from buildlog_listener.events.models import EVENT_TYPES, BuildEvent

Handler = Callable[[BuildEvent], None]


class BuildEventSource:
    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = defaultdict(list)
        self.dispatched_count = 0

    def subscribe(self, event_type: type, handler: Handler) -> None:
        if event_type not in EVENT_TYPES.values():
            raise ValueError(f"unknown build event type: {event_type!r}")
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def dispatch(self, event: BuildEvent) -> None:
        for handler in list(self._handlers.get(type(event), [])):
            handler(event)
        self.dispatched_count += 1

    def replay(self, events: Iterable[BuildEvent]) -> int:
        """Dispatch events in order; returns how many were dispatched."""
        count = 0
        for event in events:
            self.dispatch(event)
            count += 1
        return count
