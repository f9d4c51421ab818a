"""
Event router — one correlation engine per build.

Receives build events in order, keeps the context stack in step with
start/finish pairs, and makes one emission per event tagged with the open
project/target/task and the build id. Records produced before the root
project is known are queued and replayed, with the build id, when it starts.

A correlation violation (unmatched finish, wrong frame kind, scopes still
open at build end, out-of-order build events) is raised to the caller and
leaves the engine faulted: every later event raises EngineFaultedError.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Sequence

from buildlog_listener.buildlog_logging import bind_build, get_logger
from buildlog_listener.core.exceptions import (
    BuildStateError,
    CorrelationViolation,
    EngineFaultedError,
    MalformedProperties,
    UnclosedScopesError,
)
from buildlog_listener.correlation.context import (
    TAG_ENVIRONMENT,
    TAG_ERRORS,
    TAG_PROPERTIES,
    TAG_TARGET_OUTPUT_ITEMS,
    TAG_TIME_ELAPSED,
    TAG_WARNINGS,
    LogContext,
    derive_build_id,
)
from buildlog_listener.correlation.frames import FrameKind
from buildlog_listener.correlation.pending import PendingBuffer, PendingRecord
from buildlog_listener.correlation.resolver import resolve_ancestor_tags
from buildlog_listener.correlation.stack import ContextStack
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
from buildlog_listener.events.source import BuildEventSource
from buildlog_listener.router.properties import string_pairs
from buildlog_listener.sinks.base import LogEmitter, LogLevel

logger = get_logger(__name__)

LEVEL_FOR_IMPORTANCE = {
    MessageImportance.HIGH: LogLevel.INFORMATION,
    MessageImportance.NORMAL: LogLevel.DEBUG,
    MessageImportance.LOW: LogLevel.VERBOSE,
}


class BuildState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"
    FAULTED = "faulted"


class BuildEventRouter:
    """
    Correlation engine for a single build.

    Owns its context stack, pending buffer and counters; construct a new
    instance for each build.
    """

    def __init__(self, emitter: LogEmitter) -> None:
        self._emitter = emitter
        self._stack = ContextStack()
        self._pending = PendingBuffer()
        self._context = LogContext()
        self._root_seen = False
        self._state = BuildState.NOT_STARTED
        self._log = logger
        self.warnings = 0
        self.errors = 0
        self.build_started_at = None
        self._handlers: dict[type, Callable[[Any], None]] = {
            BuildStarted: self._on_build_started,
            BuildFinished: self._on_build_finished,
            ProjectStarted: self._on_project_started,
            ProjectFinished: self._on_project_finished,
            TargetStarted: self._on_target_started,
            TargetFinished: self._on_target_finished,
            TaskStarted: self._on_task_started,
            TaskFinished: self._on_task_finished,
            ErrorRaised: self._on_error,
            WarningRaised: self._on_warning,
            MessageRaised: self._on_message,
            CustomRaised: self._on_custom,
        }

    @property
    def state(self) -> BuildState:
        return self._state

    @property
    def stack(self) -> ContextStack:
        return self._stack

    @property
    def context(self) -> LogContext:
        return self._context

    @property
    def build_id(self) -> str | None:
        return self._context.build_id

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def attach(self, source: BuildEventSource) -> None:
        """Subscribe to every event type of the source."""
        for event_type in EVENT_TYPES.values():
            source.subscribe(event_type, self.handle)

    def detach(self, source: BuildEventSource) -> None:
        """Remove this router from every event type of the source."""
        for event_type in EVENT_TYPES.values():
            source.unsubscribe(event_type, self.handle)

    def handle(self, event: BuildEvent) -> None:
        if self._state is BuildState.FAULTED:
            raise EngineFaultedError(
                f"{event.event_name} delivered after a correlation violation"
            )
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"unsupported build event: {type(event).__name__}")
        try:
            if self._state is BuildState.FINISHED:
                raise BuildStateError(event.event_name, self._state)
            handler(event)
        except CorrelationViolation as e:
            self._state = BuildState.FAULTED
            self._log.error(
                "router_correlation_violation",
                build_event=event.event_name,
                depth=self._stack.depth,
                error=str(e),
            )
            raise

    # -- emission ---------------------------------------------------------

    def _tags(self) -> dict[str, Any]:
        return resolve_ancestor_tags(self._stack)

    def _emit(
        self,
        event_kind: str,
        level: LogLevel,
        template: str,
        args: Sequence[Any],
        tags: dict[str, Any],
    ) -> None:
        if not self._root_seen and not self._pending.sealed:
            self._pending.append(
                PendingRecord(event_kind=event_kind, level=level, template=template, args=tuple(args), tags=tags)
            )
            return
        self._emitter.emit(level, template, tuple(args), self._context.apply(tags))

    def _flush_pending(self) -> None:
        for record in self._pending.drain():
            self._emitter.emit(record.level, record.template, record.args, self._context.apply(record.tags))

    def _string_pairs_or_none(self, raw: Any, tag: str) -> dict[str, str] | None:
        try:
            pairs = string_pairs(raw)
        except MalformedProperties as e:
            self._log.warning("router_properties_skipped", tag=tag, error=str(e))
            return None
        return pairs or None

    # -- build ------------------------------------------------------------

    def _on_build_started(self, event: BuildStarted) -> None:
        if self._state is not BuildState.NOT_STARTED:
            raise BuildStateError(event.event_name, self._state)
        self._state = BuildState.RUNNING
        self.build_started_at = event.timestamp
        tags: dict[str, Any] = {}
        environment = self._string_pairs_or_none(event.environment, TAG_ENVIRONMENT)
        if environment:
            tags[TAG_ENVIRONMENT] = environment
        self._emit(event.event_name, LogLevel.INFORMATION, "Build started {BuildStartedTime}", (event.timestamp,), tags)

    def _on_build_finished(self, event: BuildFinished) -> None:
        if self._state is not BuildState.RUNNING:
            raise BuildStateError(event.event_name, self._state)
        if self._stack.depth:
            raise UnclosedScopesError(self._stack.snapshot())
        if not self._pending.sealed:
            # No project ever started; release what was queued without a build id.
            self._log.warning("router_build_finished_without_project", pending=len(self._pending))
            self._flush_pending()
        tags: dict[str, Any] = {TAG_WARNINGS: self.warnings, TAG_ERRORS: self.errors}
        if self.build_started_at is not None:
            tags[TAG_TIME_ELAPSED] = event.timestamp - self.build_started_at
        self._emit(event.event_name, LogLevel.INFORMATION, "Build finished: {BuildFinishedMessage}", (event.message,), tags)
        self._state = BuildState.FINISHED

    # -- project ----------------------------------------------------------

    def _on_project_started(self, event: ProjectStarted) -> None:
        caller = self._stack.find_nearest(FrameKind.PROJECT)
        self._stack.open(FrameKind.PROJECT, event.project_file)

        if not self._root_seen:
            self._root_seen = True
            build_id = derive_build_id(event.project_file, self.build_started_at)
            self._context = self._context.with_build_id(build_id)
            self._log = bind_build(build_id, root_project=event.project_file)
            self._log.info("router_build_id_assigned", pending=len(self._pending))
            self._flush_pending()

        tags = self._tags()
        properties = self._string_pairs_or_none(event.properties, TAG_PROPERTIES)
        if properties:
            tags[TAG_PROPERTIES] = properties
        if caller is not None:
            self._emit(
                event.event_name,
                LogLevel.INFORMATION,
                "Project {ParentProjectFile} is building {ProjectFile} ({TargetNames})",
                (caller.name, event.project_file, event.target_names_text),
                tags,
            )
        else:
            self._emit(
                event.event_name,
                LogLevel.INFORMATION,
                "Building project {ProjectFile} ({TargetNames})",
                (event.project_file, event.target_names_text),
                tags,
            )

    def _on_project_finished(self, event: ProjectFinished) -> None:
        tags = self._tags()
        self._stack.pop_expecting(FrameKind.PROJECT)
        self._emit(event.event_name, LogLevel.INFORMATION, "{ProjectFinishedMessage}", (event.message,), tags)

    # -- target -----------------------------------------------------------

    def _on_target_started(self, event: TargetStarted) -> None:
        self._stack.open(FrameKind.TARGET, event.target_name)
        self._emit(
            event.event_name,
            LogLevel.DEBUG,
            "Target {TargetName} started in {TargetFile}",
            (event.target_name, event.target_file),
            self._tags(),
        )

    def _on_target_finished(self, event: TargetFinished) -> None:
        tags = self._tags()
        self._stack.pop_expecting(FrameKind.TARGET)
        outputs = event.output_names
        if outputs:
            tags[TAG_TARGET_OUTPUT_ITEMS] = outputs
        self._emit(event.event_name, LogLevel.DEBUG, "{TargetFinishedMessage}", (event.message,), tags)

    # -- task -------------------------------------------------------------

    def _on_task_started(self, event: TaskStarted) -> None:
        self._stack.open(FrameKind.TASK, event.task_name)
        self._emit(event.event_name, LogLevel.VERBOSE, "Task {TaskName} started", (event.task_name,), self._tags())

    def _on_task_finished(self, event: TaskFinished) -> None:
        tags = self._tags()
        self._stack.pop_expecting(FrameKind.TASK)
        self._emit(event.event_name, LogLevel.VERBOSE, "{TaskFinishedMessage}", (event.message,), tags)

    # -- diagnostics and messages ----------------------------------------

    def _on_error(self, event: ErrorRaised) -> None:
        self.errors += 1
        tags = {**self._tags(), **event.location_tags()}
        self._emit(event.event_name, LogLevel.ERROR, "{ErrorMessage}", (event.message,), tags)

    def _on_warning(self, event: WarningRaised) -> None:
        self.warnings += 1
        tags = {**self._tags(), **event.location_tags()}
        self._emit(event.event_name, LogLevel.WARNING, "{WarningMessage}", (event.message,), tags)

    def _on_message(self, event: MessageRaised) -> None:
        level = LEVEL_FOR_IMPORTANCE[event.importance]
        self._emit(event.event_name, level, "{Message}", (event.message,), self._tags())

    def _on_custom(self, event: CustomRaised) -> None:
        self._emit(event.event_name, LogLevel.INFORMATION, "{CustomMessage}", (event.message,), self._tags())
