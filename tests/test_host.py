"""
Tests for the build logger host (initialize / shutdown) and the replay CLI.
"""

from __future__ import annotations

import json

import httpx

from buildlog_listener.config import ListenerSettings, LoggerVerbosity
from buildlog_listener.events import BuildEventSource, BuildFinished, BuildStarted, ProjectFinished, ProjectStarted
from buildlog_listener.host import BuildLogger, build_emitter
from buildlog_listener.router import BuildState
from buildlog_listener.sinks import ConsoleSink, FanoutEmitter, LevelFilter, LogLevel, SeqSink


def test_initialize_creates_fresh_router_per_build(emitter, at):
    """Each initialize() gives a new engine; counters do not leak between builds."""
    host = BuildLogger(ListenerSettings(), emitter=emitter)
    first_source = BuildEventSource()
    first = host.initialize(first_source)
    first_source.dispatch(BuildStarted(timestamp=at(0)))
    first_source.dispatch(ProjectStarted("a.proj", "Build", {}, timestamp=at(1)))
    first_source.dispatch(ProjectFinished("done"))
    first_source.dispatch(BuildFinished("ok", timestamp=at(2)))

    second = host.initialize(BuildEventSource())
    assert second is not first
    assert second.build_id is None
    assert second.stack.depth == 0
    assert len(emitter.records) == 4

    host.shutdown()
    assert emitter.closed
    host.shutdown()


def _run_build(source, at, root="a.proj", offset=0):
    source.dispatch(BuildStarted(timestamp=at(offset)))
    source.dispatch(ProjectStarted(root, "Build", {}, timestamp=at(offset + 1)))
    source.dispatch(ProjectFinished("done"))
    source.dispatch(BuildFinished("ok", timestamp=at(offset + 2)))


def test_reinitialize_on_same_source_detaches_previous_router(emitter, at):
    """A second build on the same source reaches only the new router."""
    host = BuildLogger(ListenerSettings(), emitter=emitter)
    source = BuildEventSource()
    first = host.initialize(source)
    _run_build(source, at)
    assert emitter.flushes == 0

    second = host.initialize(source)
    assert emitter.flushes == 1
    assert not emitter.closed
    _run_build(source, at, root="b.proj", offset=10)

    assert first.state is BuildState.FINISHED
    assert second.state is BuildState.FINISHED
    assert len(emitter.records) == 8
    assert emitter.records[-1].tags["BuildID"] == second.build_id != first.build_id
    host.shutdown()
    assert emitter.closed


def test_reinitialize_closes_previous_sink_chain(monkeypatch, emitter_factory):
    """Settings-built sinks of the previous build are closed before new ones are made."""
    monkeypatch.setattr("buildlog_listener.host.build_emitter", emitter_factory)
    host = BuildLogger(ListenerSettings())
    host.initialize(BuildEventSource())
    host.initialize(BuildEventSource())

    first, second = emitter_factory.created
    assert first.closed
    assert not second.closed
    host.shutdown()
    assert second.closed


def test_reinitialize_delivers_buffered_seq_batch(monkeypatch, at):
    """Records still batched in the previous SeqSink are POSTed on re-initialize."""
    posted = []

    def handler(request: httpx.Request) -> httpx.Response:
        posted.append(request.content.decode("utf-8").splitlines())
        return httpx.Response(201)

    def seq_only(settings):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return SeqSink(settings.seq_url, batch_size=100, client=client)

    monkeypatch.setattr("buildlog_listener.host.build_emitter", seq_only)
    host = BuildLogger(ListenerSettings())
    source = BuildEventSource()
    host.initialize(source)
    _run_build(source, at)
    assert posted == []

    host.initialize(source)
    assert len(posted) == 1
    assert len(posted[0]) == 4
    host.shutdown()


def test_verbosity_and_parameters_are_host_settable():
    """The host exposes verbosity (parsed from text) and an unparsed parameter string."""
    host = BuildLogger(ListenerSettings(parameters="server=http://seq;whatever"))
    assert host.parameters == "server=http://seq;whatever"
    host.verbosity = "minimal"
    assert host.verbosity is LoggerVerbosity.MINIMAL


def test_build_emitter_chain():
    """Settings produce Seq (+ console) behind a verbosity filter."""
    emitter = build_emitter(ListenerSettings(verbosity=LoggerVerbosity.QUIET))
    assert isinstance(emitter, LevelFilter)
    assert emitter.min_level is LogLevel.WARNING
    inner = emitter._inner
    assert isinstance(inner, FanoutEmitter)
    kinds = [type(e) for e in inner.emitters]
    assert kinds == [SeqSink, ConsoleSink]
    assert inner.emitters[0].endpoint == "http://localhost:5341/api/events/raw"
    emitter.close()

    no_console = build_emitter(ListenerSettings(console=False))
    assert [type(e) for e in no_console._inner.emitters] == [SeqSink]
    no_console.close()


def test_main_replays_stream(tmp_path, monkeypatch, emitter):
    """main() replays a JSON-lines file and exits 0; a missing file exits 1."""
    import main as cli

    monkeypatch.setattr("buildlog_listener.host.build_emitter", lambda settings: emitter)

    good = tmp_path / "good.jsonl"
    good.write_text(
        "\n".join(
            json.dumps(e)
            for e in (
                {"type": "BuildStarted", "timestamp": "2024-05-01T12:00:00Z"},
                {"type": "ProjectStarted", "project_file": "a.proj"},
                {"type": "ProjectFinished", "message": "done"},
                {"type": "BuildFinished", "message": "ok", "timestamp": "2024-05-01T12:00:05Z"},
            )
        ),
        encoding="utf-8",
    )
    assert cli.main([str(good), "--no-console"]) == 0
    assert len(emitter.records) == 4
    assert emitter.closed

    assert cli.main([str(tmp_path / "missing.jsonl")]) == 1


def test_main_exits_nonzero_on_correlation_violation(tmp_path, monkeypatch, emitter):
    """An unmatched finish in the stream stops the replay with exit status 1."""
    import main as cli

    monkeypatch.setattr("buildlog_listener.host.build_emitter", lambda settings: emitter)

    bad = tmp_path / "bad.jsonl"
    bad.write_text(
        '{"type": "BuildStarted"}\n{"type": "TargetFinished", "message": "orphan"}\n',
        encoding="utf-8",
    )
    assert cli.main([str(bad)]) == 1
    assert emitter.closed
