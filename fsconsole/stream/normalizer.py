# fsconsole/stream/normalizer.py
"""
Stream payload -> LogEntry.

Decoding is an ordered pipeline of strategies. Each strategy returns a
DecodedMessage or None ("try next"); the raw strategy always succeeds, so
every payload yields exactly one entry.
"""
from __future__ import annotations

import itertools
import json
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence, Union

from .state import LogEntry, Severity

SOURCE_SYSTEM = "SYSTEM"
SOURCE_WEBSOCKET = "WEBSOCKET"

# "[<unix time>] [<TYPE>] <command>: <message>" as printed by the backend logger
LOG_LINE_RE = re.compile(r"\[(\d+)\] \[(\w+)\] ([^:]+): (.+)")

# year 10000; larger times cannot be rendered as ISO-8601
MAX_EPOCH_S = 253402300800.0

Payload = Union[str, bytes, bytearray]


@dataclass(frozen=True)
class DecodedMessage:
    strategy: str
    severity: Severity
    source: str
    message: str
    time_s: Optional[float] = None
    payload: Any = None


Strategy = Callable[[str], Optional[DecodedMessage]]


def decode_json(text: str) -> Optional[DecodedMessage]:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    message = data.get("message")
    return DecodedMessage(
        strategy="json",
        severity=Severity.parse(data.get("type") or Severity.INFO.value),
        source=str(data.get("command") or SOURCE_SYSTEM),
        message=str(message) if message not in (None, "") else text,
        time_s=_parse_time(data.get("time")),
        payload=data.get("data"),
    )


def decode_pattern(text: str) -> Optional[DecodedMessage]:
    m = LOG_LINE_RE.search(text)
    if m is None:
        return None
    time_s, sev, source, message = m.groups()
    return DecodedMessage(
        strategy="pattern",
        severity=Severity.parse(sev),
        source=source,
        message=message,
        time_s=_parse_time(time_s),
    )


def decode_raw(text: str) -> DecodedMessage:
    return DecodedMessage(strategy="raw", severity=Severity.INFO, source=SOURCE_SYSTEM, message=text)


DEFAULT_STRATEGIES: Sequence[Strategy] = (decode_json, decode_pattern)


def _parse_time(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        t = float(value)
    except (TypeError, ValueError):
        return None
    if not (0 <= t < MAX_EPOCH_S):
        return None
    return t


def iso_timestamp(epoch_s: float) -> str:
    """Epoch seconds -> `YYYY-MM-DDTHH:MM:SS.mmmZ` (UTC)."""
    dt = datetime.fromtimestamp(epoch_s, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LogIdFactory:
    """`log_<epoch_ms>_<n>`: unique per process, roughly monotonic."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"log_{int(self._clock() * 1000)}_{next(self._counter)}"


class LogNormalizer:
    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        id_factory: Optional[Callable[[], str]] = None,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
    ):
        self._clock = clock
        self._next_id = id_factory or LogIdFactory(clock)
        self._strategies = tuple(strategies)

    def decode(self, text: str) -> DecodedMessage:
        for strategy in self._strategies:
            decoded = strategy(text)
            if decoded is not None:
                return decoded
        return decode_raw(text)

    def normalize(self, payload: Payload) -> LogEntry:
        if isinstance(payload, (bytes, bytearray)):
            try:
                text = bytes(payload).decode("utf-8")
            except UnicodeDecodeError as e:
                return self.entry(
                    Severity.ERROR,
                    SOURCE_WEBSOCKET,
                    f"Error processing message: {e.reason}",
                    payload={"original_message": repr(bytes(payload)), "error": str(e)},
                )
        else:
            text = str(payload)

        decoded = self.decode(text)
        return self.entry(
            decoded.severity,
            decoded.source,
            decoded.message,
            payload=decoded.payload,
            time_s=decoded.time_s,
        )

    def entry(
        self,
        severity: Severity,
        source: str,
        message: str,
        *,
        payload: Any = None,
        time_s: Optional[float] = None,
    ) -> LogEntry:
        """Build an entry stamped with `time_s` (or now) and a fresh id."""
        ts = time_s if time_s is not None else self._clock()
        return LogEntry(
            id=self._next_id(),
            timestamp=iso_timestamp(ts),
            severity=severity,
            source=source,
            message=message,
            payload=payload,
        )
