"""
Main entrypoint: replay a recorded build event stream into Seq.

Reads JSON-lines build events (one {"type": ..., ...} object per line) from a
file or stdin, dispatches them in order through the build logger, then flushes
the sinks. Exits 1 when the stream breaks start/finish pairing or cannot be
decoded.

Env: BUILDLOG_SEQ_URL, BUILDLOG_SEQ_API_KEY, BUILDLOG_VERBOSITY, BUILDLOG_CONSOLE, LOG_LEVEL, LOG_FORMAT.

Usage: python main.py build-events.jsonl --seq-url http://localhost:5341/ --verbosity detailed
"""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

# Configure structured JSON logging before other imports that may log
from buildlog_listener.buildlog_logging import get_logger

logger = get_logger("main")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay build events into Seq as structured logs.")
    parser.add_argument("events", help="JSON-lines build event file, or - for stdin")
    parser.add_argument("--seq-url", default=None, help="Seq server URL (overrides BUILDLOG_SEQ_URL)")
    parser.add_argument("--api-key", default=None, help="Seq API key (overrides BUILDLOG_SEQ_API_KEY)")
    parser.add_argument("--verbosity", default=None, help="quiet|minimal|normal|detailed|diagnostic")
    parser.add_argument("--no-console", action="store_true", help="Do not echo records to the console")
    parser.add_argument("--parameters", default=None, help="Free-form logger parameter string")
    return parser.parse_args(argv)


def _replay(stream: TextIO, args: argparse.Namespace) -> int:
    from buildlog_listener.config import LoggerVerbosity, get_settings
    from buildlog_listener.core.exceptions import ConfigError, CorrelationViolation, EventDecodeError
    from buildlog_listener.events import BuildEventSource, read_events
    from buildlog_listener.host import BuildLogger

    try:
        settings = get_settings().with_overrides(
            seq_url=args.seq_url,
            seq_api_key=args.api_key,
            verbosity=LoggerVerbosity.parse(args.verbosity) if args.verbosity else None,
            console=False if args.no_console else None,
            parameters=args.parameters,
        )
    except ConfigError as e:
        logger.error("main_config_error", error=str(e))
        return 1

    source = BuildEventSource()
    build_logger = BuildLogger(settings)
    build_logger.initialize(source)
    try:
        count = source.replay(read_events(stream))
    except (CorrelationViolation, EventDecodeError) as e:
        logger.error("main_replay_failed", error=str(e), dispatched=source.dispatched_count)
        return 1
    finally:
        build_logger.shutdown()

    logger.info("main_replay_complete", event_count=count)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.events == "-":
        return _replay(sys.stdin, args)
    try:
        with open(args.events, encoding="utf-8") as f:
            return _replay(f, args)
    except OSError as e:
        logger.error("main_events_unreadable", path=args.events, error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
