# fsconsole/interfaces/log_sink.py
from __future__ import annotations

from typing import Protocol

from fsconsole.stream.state import LogEntry


class LogSink(Protocol):
    def on_log(self, entry: LogEntry) -> None: ...
    def close(self) -> None: ...
