# fsconsole/stream/state.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class Severity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"
    SYSTEM = "SYSTEM"

    @classmethod
    def parse(cls, value: Any, default: Optional["Severity"] = None) -> "Severity":
        """Case-insensitive lookup; unknown names map to `default` (INFO)."""
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return default or cls.INFO


@dataclass(frozen=True)
class LogEntry:
    """
    One normalized unit of the activity stream, independent of its wire format.
    """
    id: str
    timestamp: str          # ISO-8601 UTC, e.g. 2025-01-01T12:00:00.000Z
    severity: Severity
    source: str             # originating command, "SYSTEM" or "WEBSOCKET"
    message: str
    payload: Any = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "severity": self.severity.value,
            "source": self.source,
            "message": self.message,
            "payload": self.payload,
        }


@dataclass(frozen=True)
class StreamStatus:
    """
    A snapshot of the stream client, safe to share across threads.
    """
    url: str
    state: ConnectionState
    attempts: int
    max_attempts: int
    manually_closed: bool
    log_count: int
    last_error: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED
