"""
End-to-end build scenario: one root project, one target, one error.

BuildStarted -> ProjectStarted(root.proj) -> TargetStarted(Compile) -> ErrorRaised
-> TargetFinished -> ProjectFinished -> BuildFinished, checked record by record.
"""

from __future__ import annotations

from buildlog_listener.correlation import derive_build_id
from buildlog_listener.events import (
    BuildFinished,
    BuildStarted,
    ErrorRaised,
    ProjectFinished,
    ProjectStarted,
    TargetFinished,
    TargetStarted,
)
from buildlog_listener.router import BuildState
from buildlog_listener.sinks import LogLevel


def test_single_project_build_with_error(router, emitter, at):
    """Every record carries the right tags at its depth and the summary counts the error."""
    events = [
        BuildStarted(environment=None, timestamp=at(0)),
        ProjectStarted("root.proj", "Build", {}, timestamp=at(1)),
        TargetStarted("Compile", "root.proj", timestamp=at(2)),
        ErrorRaised("bad syntax", timestamp=at(3)),
        TargetFinished("ok", [], timestamp=at(4)),
        ProjectFinished("done", timestamp=at(5)),
        BuildFinished("done", timestamp=at(6)),
    ]
    depths = []
    for event in events:
        router.handle(event)
        depths.append(router.stack.depth)

    assert depths == [0, 1, 2, 2, 1, 0, 0]
    assert router.state is BuildState.FINISHED

    build_id = derive_build_id("root.proj", at(0))
    records = emitter.records
    assert len(records) == 7
    assert all(r.tags["BuildID"] == build_id for r in records)

    started, project, target, error, target_done, project_done, finished = records

    assert started.template == "Build started {BuildStartedTime}"
    assert set(started.tags) == {"BuildID"}

    assert project.args == ("root.proj", "Build")
    assert project.tags == {"BuildID": build_id, "ProjectPath": "root.proj"}

    assert target.args == ("Compile", "root.proj")
    assert target.tags == {"BuildID": build_id, "ProjectPath": "root.proj", "TargetName": "Compile"}

    assert error.level is LogLevel.ERROR
    assert error.args == ("bad syntax",)
    assert error.tags == {"BuildID": build_id, "ProjectPath": "root.proj", "TargetName": "Compile"}

    assert target_done.tags == {"BuildID": build_id, "ProjectPath": "root.proj", "TargetName": "Compile"}
    assert project_done.tags == {"BuildID": build_id, "ProjectPath": "root.proj"}

    assert finished.template == "Build finished: {BuildFinishedMessage}"
    assert finished.tags["Warnings"] == 0
    assert finished.tags["Errors"] == 1
    assert "ProjectPath" not in finished.tags
