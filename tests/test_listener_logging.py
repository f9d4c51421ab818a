"""
Tests for the listener's own structlog diagnostics: rendered line shape, build binding,
and the console sink that writes build records through structlog.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta

import structlog
from structlog.testing import capture_logs

from buildlog_listener.buildlog_logging import bind_build, build_processors
from buildlog_listener.events import BuildStarted, ProjectStarted


def _logger(log_format: str, level: int = logging.DEBUG):
    return structlog.wrap_logger(
        structlog.ReturnLogger(),
        processors=build_processors(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def test_json_line_is_keyed_by_event_type():
    """JSON diagnostics carry event_type (not event), level and a UTC timestamp."""
    line = _logger("json").bind(build_id="build_0123456789ab").warning("seq_delivery_failed", event_count=3)
    record = json.loads(line)
    assert record["event_type"] == "seq_delivery_failed"
    assert "event" not in record
    assert record["build_id"] == "build_0123456789ab"
    assert record["event_count"] == 3
    assert record["level"] == "warning"
    stamp = datetime.fromisoformat(record["timestamp"].replace("Z", "+00:00"))
    assert stamp.utcoffset() == timedelta(0)


def test_json_renders_non_serializable_values_as_text():
    """Values such as timedelta are stringified rather than failing the log call."""
    record = json.loads(_logger("json").info("router_build_finished", elapsed=timedelta(seconds=90)))
    assert record["elapsed"] == "0:01:30"


def test_level_filter_drops_below_threshold():
    """A logger filtered at WARNING returns nothing for info calls."""
    assert _logger("json", logging.WARNING).info("router_build_id_assigned") is None


def test_console_format_keeps_event_name():
    """The console renderer shows the event name and key/values."""
    line = _logger("console").info("build_logger_initialized", verbosity="normal")
    assert "build_logger_initialized" in line
    assert "verbosity" in line


def test_bind_build_carries_build_and_root_project():
    """bind_build adds build_id and root_project to every later call."""
    with capture_logs() as logs:
        bind_build("build_0123456789ab", root_project="src/app.proj").info("router_properties_skipped", tag="Properties")
        bind_build("build_ba9876543210").info("router_properties_skipped", tag="Environment")
    first, second = logs
    assert first["build_id"] == "build_0123456789ab"
    assert first["root_project"] == "src/app.proj"
    assert first["logger"] == "buildlog_listener"
    assert second["build_id"] == "build_ba9876543210"
    assert "root_project" not in second


def test_router_logs_build_id_assignment(router, at):
    """The root-project latch is logged once with the build id and the queued record count."""
    with capture_logs() as logs:
        router.handle(BuildStarted(timestamp=at(0)))
        router.handle(ProjectStarted("root.proj", "Build", {}, timestamp=at(1)))
        router.handle(ProjectStarted("child.proj", "Build", {}, timestamp=at(2)))
    assigned = [e for e in logs if e["event"] == "router_build_id_assigned"]
    assert len(assigned) == 1
    assert assigned[0]["build_id"] == router.build_id
    assert assigned[0]["root_project"] == "root.proj"
    assert assigned[0]["pending"] == 1


def test_console_sink_renders_through_structlog():
    """ConsoleSink logs the rendered template with tags as key/values."""
    from buildlog_listener.sinks import ConsoleSink, LogLevel

    calls = []

    class _Log:
        def info(self, event, **kw):
            calls.append((event, kw))

    ConsoleSink(_Log()).emit(LogLevel.INFORMATION, "Task {TaskName} started", ["Csc"], {"ProjectPath": "a.proj"})
    assert calls == [
        (
            "build_record",
            {"message": "Task Csc started", "build_level": "Information", "ProjectPath": "a.proj"},
        )
    ]
