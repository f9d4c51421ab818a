"""
Build event records consumed by the router.

One frozen dataclass per callback type of the build-event source. Every event
carries a UTC timestamp; hosts that replay recorded streams pass the recorded
time, live hosts can rely on the default. Property and environment
collections are kept exactly as the host delivered them; the router decides
whether they can be attached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(raw: Any) -> datetime:
    """Accept ISO 8601 strings (trailing Z allowed), epoch seconds, or None (now)."""
    if raw is None:
        return _utc_now()
    if isinstance(raw, datetime):
        return _as_utc(raw)
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    text = str(raw).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return _as_utc(parsed)


def _as_utc(value: datetime) -> datetime:
    """Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MessageImportance(str, Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class BuildEvent:
    """Marker base for all build events; event_name is the wire/type name."""

    event_name: ClassVar[str] = ""

    def __post_init__(self) -> None:
        # Timestamps are always timezone-aware UTC so elapsed-time arithmetic never mixes kinds.
        object.__setattr__(self, "timestamp", _parse_timestamp(self.timestamp))


@dataclass(frozen=True)
class BuildStarted(BuildEvent):
    event_name: ClassVar[str] = "BuildStarted"

    environment: Any = None
    message: str = "Build started."
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildStarted":
        return cls(
            environment=data.get("environment"),
            message=data.get("message") or "Build started.",
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class BuildFinished(BuildEvent):
    event_name: ClassVar[str] = "BuildFinished"

    message: str = ""
    succeeded: bool = True
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildFinished":
        return cls(
            message=data.get("message") or "",
            succeeded=bool(data.get("succeeded", True)),
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class ProjectStarted(BuildEvent):
    event_name: ClassVar[str] = "ProjectStarted"

    project_file: str
    target_names: Any = ""
    """Semicolon-separated string or list of target names."""
    properties: Any = None
    timestamp: datetime = field(default_factory=_utc_now)

    @property
    def target_names_text(self) -> str:
        if self.target_names is None:
            return ""
        if isinstance(self.target_names, str):
            return self.target_names
        return ";".join(str(t) for t in self.target_names)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectStarted":
        return cls(
            project_file=data["project_file"],
            target_names=data.get("target_names", ""),
            properties=data.get("properties"),
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class ProjectFinished(BuildEvent):
    event_name: ClassVar[str] = "ProjectFinished"

    message: str = ""
    project_file: str | None = None
    succeeded: bool = True
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectFinished":
        return cls(
            message=data.get("message") or "",
            project_file=data.get("project_file"),
            succeeded=bool(data.get("succeeded", True)),
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class TargetStarted(BuildEvent):
    event_name: ClassVar[str] = "TargetStarted"

    target_name: str
    target_file: str = ""
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TargetStarted":
        return cls(
            target_name=data["target_name"],
            target_file=data.get("target_file") or "",
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class TargetFinished(BuildEvent):
    event_name: ClassVar[str] = "TargetFinished"

    message: str = ""
    outputs: tuple[Any, ...] = ()
    """Output items: plain strings or objects/dicts carrying an item spec."""
    succeeded: bool = True
    timestamp: datetime = field(default_factory=_utc_now)

    @property
    def output_names(self) -> list[str]:
        names: list[str] = []
        for item in self.outputs or ():
            if isinstance(item, str):
                name = item
            elif isinstance(item, dict):
                name = item.get("item_spec") or item.get("ItemSpec") or ""
            else:
                name = getattr(item, "item_spec", None) or getattr(item, "ItemSpec", None) or str(item)
            if name:
                names.append(str(name))
        return names

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TargetFinished":
        return cls(
            message=data.get("message") or "",
            outputs=tuple(data.get("outputs") or ()),
            succeeded=bool(data.get("succeeded", True)),
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class TaskStarted(BuildEvent):
    event_name: ClassVar[str] = "TaskStarted"

    task_name: str
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskStarted":
        return cls(
            task_name=data["task_name"],
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class TaskFinished(BuildEvent):
    event_name: ClassVar[str] = "TaskFinished"

    message: str = ""
    succeeded: bool = True
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskFinished":
        return cls(
            message=data.get("message") or "",
            succeeded=bool(data.get("succeeded", True)),
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class _DiagnosticEvent(BuildEvent):
    message: str
    code: str | None = None
    file: str | None = None
    line: int | None = None
    column: int | None = None
    timestamp: datetime = field(default_factory=_utc_now)

    def location_tags(self) -> dict[str, Any]:
        """Code/File/Line/Column for whichever of them are set."""
        tags: dict[str, Any] = {}
        if self.code:
            tags["Code"] = self.code
        if self.file:
            tags["File"] = self.file
        if self.line:
            tags["Line"] = self.line
        if self.column:
            tags["Column"] = self.column
        return tags

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        line = data.get("line")
        column = data.get("column")
        return cls(
            message=data.get("message") or "",
            code=data.get("code"),
            file=data.get("file"),
            line=int(line) if line is not None else None,
            column=int(column) if column is not None else None,
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class ErrorRaised(_DiagnosticEvent):
    event_name: ClassVar[str] = "ErrorRaised"


@dataclass(frozen=True)
class WarningRaised(_DiagnosticEvent):
    event_name: ClassVar[str] = "WarningRaised"


@dataclass(frozen=True)
class MessageRaised(BuildEvent):
    event_name: ClassVar[str] = "MessageRaised"

    message: str
    importance: MessageImportance = MessageImportance.NORMAL
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MessageRaised":
        raw = str(data.get("importance") or MessageImportance.NORMAL.value).strip().lower()
        return cls(
            message=data.get("message") or "",
            importance=MessageImportance(raw),
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class CustomRaised(BuildEvent):
    event_name: ClassVar[str] = "CustomRaised"

    message: str
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomRaised":
        return cls(
            message=data.get("message") or "",
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


EVENT_TYPES: dict[str, type] = {
    cls.event_name: cls
    for cls in (
        BuildStarted,
        BuildFinished,
        ProjectStarted,
        ProjectFinished,
        TargetStarted,
        TargetFinished,
        TaskStarted,
        TaskFinished,
        ErrorRaised,
        WarningRaised,
        MessageRaised,
        CustomRaised,
    )
}
