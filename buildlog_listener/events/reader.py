"""
JSON-lines decoder for recorded build event streams.

Each non-blank line is one object with a "type" naming the event
(e.g. "ProjectStarted") and the event's fields in snake_case:

    {"type": "ProjectStarted", "project_file": "app.proj", "target_names": "Build"}

Blank lines and lines starting with '#' are skipped.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Iterator

from buildlog_listener.core.exceptions import EventDecodeError
from buildlog_listener.events.models import EVENT_TYPES, BuildEvent


def decode_event(data: dict[str, Any], line_number: int | None = None) -> BuildEvent:
    """Build one event record from a decoded JSON object."""
    if not isinstance(data, dict):
        raise EventDecodeError("event must be a JSON object", line_number)
    type_name = data.get("type")
    cls = EVENT_TYPES.get(type_name) if isinstance(type_name, str) else None
    if cls is None:
        raise EventDecodeError(f"unknown event type: {type_name!r}", line_number)
    try:
        return cls.from_dict(data)
    except KeyError as e:
        raise EventDecodeError(f"{type_name} missing field {e.args[0]!r}", line_number) from e
    except (TypeError, ValueError, OverflowError, OSError) as e:
        # Out-of-range epoch seconds surface as OverflowError or OSError depending on the platform.
        raise EventDecodeError(f"{type_name}: {e}", line_number) from e


def read_events(lines: Iterable[str]) -> Iterator[BuildEvent]:
    """Lazily decode events from JSON lines, in order."""
    for line_number, raw in enumerate(lines, start=1):
        text = raw.strip()
        if not text or text.startswith("#"):
            continue
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise EventDecodeError(f"invalid JSON: {e.msg}", line_number) from e
        yield decode_event(data, line_number)
