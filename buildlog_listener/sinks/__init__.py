"""
Log sinks — emitter interface, Seq (CLEF over HTTP) and console delivery,
fan-out and minimum-level filtering.
"""

from buildlog_listener.sinks.base import FanoutEmitter, LevelFilter, LogEmitter, LogLevel
from buildlog_listener.sinks.console import ConsoleSink
from buildlog_listener.sinks.seq import SeqSink
from buildlog_listener.sinks.template import bind_template, render_template

__all__ = [
    "ConsoleSink",
    "FanoutEmitter",
    "LevelFilter",
    "LogEmitter",
    "LogLevel",
    "SeqSink",
    "bind_template",
    "render_template",
]
