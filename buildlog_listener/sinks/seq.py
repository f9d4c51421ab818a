"""
Seq sink — CLEF over HTTP.

Each record becomes one compact log event format (CLEF) JSON line:
@t timestamp, @mt message template, @l level (omitted for Information, which
is Seq's default), the template properties bound from the positional args,
and the contextual tags. Lines are batched and POSTed to
<server>/api/events/raw. Delivery failures are logged and the batch dropped;
they never propagate to the router.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

import httpx

from buildlog_listener.buildlog_logging import get_logger
from buildlog_listener.sinks.base import LogLevel
from buildlog_listener.sinks.template import bind_template

logger = get_logger(__name__)

CLEF_CONTENT_TYPE = "application/vnd.serilog.clef"
RAW_EVENTS_PATH = "/api/events/raw"
API_KEY_HEADER = "X-Seq-ApiKey"
DEFAULT_BATCH_SIZE = 100
DEFAULT_TIMEOUT_SEC = 10.0


def format_timespan(value: timedelta) -> str:
    """Render a timedelta the way .NET prints a TimeSpan: [d.]hh:mm:ss.fffffff."""
    total_us = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)
    seconds, micros = divmod(total_us, 1_000_000)
    minutes, secs = divmod(seconds, 60)
    hours, mins = divmod(minutes, 60)
    days, hours = divmod(hours, 24)
    prefix = f"{days}." if days else ""
    return f"{sign}{prefix}{hours:02d}:{mins:02d}:{secs:02d}.{micros * 10:07d}"


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, timedelta):
        return format_timespan(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_clef(
    level: LogLevel,
    template: str,
    args: Sequence[Any],
    tags: Mapping[str, Any],
    timestamp: datetime,
) -> dict[str, Any]:
    """Build one CLEF event; template properties take precedence over tags of the same name."""
    event: dict[str, Any] = {"@t": timestamp.isoformat(), "@mt": template}
    if level is not LogLevel.INFORMATION:
        event["@l"] = level.value
    for key, value in tags.items():
        event[_escape_name(key)] = value
    for key, value in bind_template(template, args).items():
        event[_escape_name(key)] = value
    return event


def _escape_name(name: str) -> str:
    return "@" + name if name.startswith("@") else name


class SeqSink:
    """
    Batching Seq emitter.

    Connects to a Seq server over HTTP with httpx. Records are buffered and
    sent when batch_size is reached, on flush(), and on close().
    """

    def __init__(
        self,
        server_url: str,
        *,
        api_key: str | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        client: httpx.Client | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Args:
            server_url: Seq base URL (e.g. http://localhost:5341/).
            api_key: Optional Seq API key sent as X-Seq-ApiKey.
            batch_size: Records buffered before an automatic POST.
            timeout_sec: HTTP timeout for each POST.
            client: Optional preconfigured httpx.Client (tests inject a MockTransport).
            clock: Source of @t timestamps.
        """
        if not server_url.strip():
            raise ValueError("server_url must be non-empty")
        if batch_size < 1:
            raise ValueError("batch_size must be positive")

        self._endpoint = server_url.strip().rstrip("/") + RAW_EVENTS_PATH
        self._batch_size = batch_size
        self._clock = clock
        headers = {"Content-Type": CLEF_CONTENT_TYPE}
        if api_key:
            headers[API_KEY_HEADER] = api_key
        self._headers = headers
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout_sec))
        self._pending: list[str] = []
        self._closed = False
        self.sent_count = 0
        self.dropped_count = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def emit(
        self,
        level: LogLevel,
        template: str,
        args: Sequence[Any],
        tags: Mapping[str, Any],
    ) -> None:
        if self._closed:
            logger.warning("seq_emit_after_close", template=template)
            return
        event = to_clef(level, template, args, tags, self._clock())
        self._pending.append(json.dumps(event, default=_json_default))
        if len(self._pending) >= self._batch_size:
            self.flush()

    def flush(self) -> None:
        """POST buffered events; on failure log and drop the batch."""
        if not self._pending:
            return
        batch, self._pending = self._pending, []
        body = "\n".join(batch) + "\n"
        try:
            resp = self._client.post(self._endpoint, content=body.encode("utf-8"), headers=self._headers)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            self.dropped_count += len(batch)
            logger.warning(
                "seq_delivery_failed",
                endpoint=self._endpoint,
                event_count=len(batch),
                error=str(e),
            )
            return
        self.sent_count += len(batch)
        logger.debug("seq_batch_sent", endpoint=self._endpoint, event_count=len(batch))

    def close(self) -> None:
        if self._closed:
            return
        self.flush()
        self._closed = True
        if self._owns_client:
            self._client.close()
