"""
Logger host — the object a build tool loads and initializes.

initialize(source) builds the sink chain from settings, creates a fresh
router for the build and subscribes it to every event type of the source.
shutdown() flushes and closes the sinks.
"""

from __future__ import annotations

from typing import Any

from buildlog_listener.buildlog_logging import get_logger
from buildlog_listener.config import ListenerSettings, LoggerVerbosity, get_settings
from buildlog_listener.events.source import BuildEventSource
from buildlog_listener.router.engine import BuildEventRouter
from buildlog_listener.sinks.base import FanoutEmitter, LevelFilter, LogEmitter, close_emitter, flush_emitter
from buildlog_listener.sinks.console import ConsoleSink
from buildlog_listener.sinks.seq import SeqSink

logger = get_logger(__name__)


def build_emitter(settings: ListenerSettings) -> LevelFilter:
    """Seq sink (plus console when enabled) behind the verbosity filter."""
    fanout = FanoutEmitter()
    fanout.add(
        SeqSink(
            settings.seq_url,
            api_key=settings.seq_api_key,
            batch_size=settings.batch_size,
            timeout_sec=settings.http_timeout_sec,
        )
    )
    if settings.console:
        fanout.add(ConsoleSink())
    return LevelFilter(fanout, settings.verbosity.min_level)


class BuildLogger:
    """Build tool logger that forwards contextualized records to Seq."""

    def __init__(
        self,
        settings: ListenerSettings | None = None,
        *,
        emitter: LogEmitter | None = None,
    ) -> None:
        """
        Args:
            settings: Listener settings; read from the environment when omitted.
            emitter: Pre-built emitter (replaces the settings-derived sink chain).
        """
        self._settings = settings or get_settings()
        self._verbosity = self._settings.verbosity
        self.parameters: str | None = self._settings.parameters
        self._emitter_override = emitter
        self._emitter: Any = None
        self._router: BuildEventRouter | None = None
        self._source: BuildEventSource | None = None

    @property
    def verbosity(self) -> LoggerVerbosity:
        return self._verbosity

    @verbosity.setter
    def verbosity(self, value: LoggerVerbosity | str) -> None:
        self._verbosity = value if isinstance(value, LoggerVerbosity) else LoggerVerbosity.parse(value)

    @property
    def router(self) -> BuildEventRouter | None:
        return self._router

    def initialize(self, source: BuildEventSource) -> BuildEventRouter:
        """Create the sinks and a new router for this build, and subscribe it to the source."""
        self._release()
        if self._emitter_override is not None:
            self._emitter = self._emitter_override
        else:
            settings = self._settings.with_overrides(verbosity=self._verbosity, parameters=self.parameters)
            self._emitter = build_emitter(settings)
        self._router = BuildEventRouter(self._emitter)
        self._router.attach(source)
        self._source = source
        logger.info(
            "build_logger_initialized",
            seq_url=self._settings.seq_url,
            verbosity=self._verbosity.value,
            parameters=self.parameters,
        )
        return self._router

    def _release(self) -> None:
        """Unsubscribe the previous build's router and deliver what its sinks still hold."""
        if self._router is not None and self._source is not None:
            self._router.detach(self._source)
        self._source = None
        emitter, self._emitter = self._emitter, None
        if emitter is None:
            return
        if emitter is self._emitter_override:
            # Reused by the next build; closing is left to shutdown().
            flush_emitter(emitter)
        else:
            close_emitter(emitter)

    def shutdown(self) -> None:
        """Flush and close the sinks; safe to call more than once."""
        emitter = self._emitter
        if emitter is None:
            return
        self._release()
        if emitter is self._emitter_override:
            close_emitter(emitter)
        router = self._router
        logger.info(
            "build_logger_shutdown",
            state=router.state.value if router else None,
            warnings=router.warnings if router else 0,
            errors=router.errors if router else 0,
        )
