# fsconsole/stream/history.py
from __future__ import annotations

from collections import deque
from typing import Deque, Tuple

from .state import LogEntry


class LogHistory:
    """Bounded, insertion-ordered log buffer; the oldest entry is evicted first."""

    def __init__(self, max_logs: int = 1000):
        if int(max_logs) < 1:
            raise ValueError(f"max_logs must be >= 1, got {max_logs}")
        self._entries: Deque[LogEntry] = deque(maxlen=int(max_logs))

    @property
    def max_logs(self) -> int:
        return self._entries.maxlen or 0

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def snapshot(self) -> Tuple[LogEntry, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
