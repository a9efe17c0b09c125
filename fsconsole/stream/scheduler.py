# fsconsole/stream/scheduler.py
from __future__ import annotations

import threading
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Deferred one-shot calls (reconnect timers)."""
    def call_later(self, delay_s: float, fn: Callable[[], None]) -> TimerHandle: ...


class TimerScheduler:
    """Scheduler backed by daemon threading.Timer objects."""

    def call_later(self, delay_s: float, fn: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(max(0.0, float(delay_s)), fn)
        timer.daemon = True
        timer.start()
        return timer
