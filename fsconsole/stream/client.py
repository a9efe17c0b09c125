# fsconsole/stream/client.py
from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, List, Optional, Tuple, Union

from .errors import TransportError
from .history import LogHistory
from .normalizer import SOURCE_WEBSOCKET, LogNormalizer
from .scheduler import Scheduler, TimerHandle, TimerScheduler
from .state import ConnectionState, LogEntry, Severity, StreamStatus
from .transport import (
    CLOSE_ABNORMAL,
    CLOSE_NORMAL,
    StreamTransport,
    TransportFactory,
    WebSocketTransport,
)

LogCallback = Callable[[LogEntry], None]


class _GenerationListener:
    """
    Binds transport events to the connection generation that produced them,
    so events from a torn-down connection are dropped.
    """

    def __init__(self, client: "ReconnectingStreamClient", generation: int):
        self._client = client
        self._generation = generation

    def on_open(self) -> None:
        self._client._handle_open(self._generation)

    def on_message(self, payload: Union[str, bytes]) -> None:
        self._client._handle_message(self._generation, payload)

    def on_close(self, code: Optional[int], reason: str) -> None:
        self._client._handle_close(self._generation, code, reason)

    def on_error(self, error: BaseException) -> None:
        self._client._handle_error(self._generation, error)


class ReconnectingStreamClient:
    """
    Live log stream consumer with a bounded history and bounded reconnects.

    States: DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED, with
    ERROR reached on transport errors or once the retry budget is spent.
    Only disconnect() yields a clean DISCONNECTED with no further retries;
    reconnect() clears that and starts over.

    All transitions go through the _handle_* methods under one lock; log
    subscribers are called outside of it.
    """

    def __init__(
        self,
        url: str,
        *,
        transport_factory: Optional[TransportFactory] = None,
        max_logs: int = 1000,
        reconnect_interval_s: float = 3.0,
        max_reconnect_attempts: int = 5,
        scheduler: Optional[Scheduler] = None,
        normalizer: Optional[LogNormalizer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if reconnect_interval_s < 0:
            raise ValueError("reconnect_interval_s must be >= 0")
        if max_reconnect_attempts < 0:
            raise ValueError("max_reconnect_attempts must be >= 0")

        self.url = url
        self._factory: TransportFactory = transport_factory or WebSocketTransport
        self.reconnect_interval_s = float(reconnect_interval_s)
        self.max_reconnect_attempts = int(max_reconnect_attempts)
        self._scheduler: Scheduler = scheduler or TimerScheduler()
        self._normalizer = normalizer or LogNormalizer()
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.RLock()
        self._history = LogHistory(max_logs)
        self._subscribers: List[LogCallback] = []

        self._state = ConnectionState.DISCONNECTED
        self._transport: Optional[StreamTransport] = None
        self._generation = 0
        self._attempts = 0
        self._manually_closed = False
        self._retry: Optional[TimerHandle] = None
        self._last_error: Optional[str] = None
        self._last_message: Any = None

    # ---------------- Read-only views ----------------
    @property
    def state(self) -> ConnectionState:
        with self._lock:
            return self._state

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    @property
    def logs(self) -> Tuple[LogEntry, ...]:
        with self._lock:
            return self._history.snapshot()

    @property
    def last_message(self) -> Any:
        with self._lock:
            return self._last_message

    @property
    def retry_pending(self) -> bool:
        with self._lock:
            return self._retry is not None

    def status(self) -> StreamStatus:
        with self._lock:
            return StreamStatus(
                url=self.url,
                state=self._state,
                attempts=self._attempts,
                max_attempts=self.max_reconnect_attempts,
                manually_closed=self._manually_closed,
                log_count=len(self._history),
                last_error=self._last_error,
            )

    # ---------------- Control ----------------
    def connect(self) -> None:
        with self._lock:
            if self._state is ConnectionState.CONNECTED:
                return
            if self._state is ConnectionState.CONNECTING and self._transport is not None:
                return
            self._manually_closed = False
        self._open()

    def disconnect(self) -> None:
        with self._lock:
            self._manually_closed = True
            self._cancel_retry()
            transport = self._detach()
            was = self._state
            self._state = ConnectionState.DISCONNECTED
            entry = None
            if transport is not None or was is not ConnectionState.DISCONNECTED:
                entry = self._append(Severity.SYSTEM, SOURCE_WEBSOCKET, "Connection closed by user")

        self._log.info("STREAM_DISCONNECT url=%s", self.url)
        self._close_quietly(transport, CLOSE_NORMAL, "Manual disconnect")
        self._notify(entry)

    def reconnect(self) -> None:
        with self._lock:
            self._manually_closed = False
            self._attempts = 0
            self._cancel_retry()
            transport = self._detach()
            self._state = ConnectionState.DISCONNECTED

        self._log.info("STREAM_RECONNECT url=%s", self.url)
        self._close_quietly(transport, CLOSE_NORMAL, "Reconnect")
        self._open()

    def send(self, message: Any) -> bool:
        with self._lock:
            transport = self._transport
            if self._state is not ConnectionState.CONNECTED or transport is None:
                return False

        text = message if isinstance(message, str) else json.dumps(message)
        try:
            transport.send(text)
        except (TransportError, TypeError) as e:
            self._log.warning("STREAM_SEND_FAILED err=%s", e)
            return False
        return True

    # ---------------- History ----------------
    def add_log(self, severity: Severity, source: str, message: str, payload: Any = None) -> LogEntry:
        with self._lock:
            entry = self._append(severity, source, message, payload)
        self._notify(entry)
        return entry

    def clear_logs(self) -> None:
        with self._lock:
            self._history.clear()

    def subscribe(self, cb: LogCallback) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(cb)

        def _unsubscribe() -> None:
            with self._lock:
                if cb in self._subscribers:
                    self._subscribers.remove(cb)

        return _unsubscribe

    # ---------------- Transport events ----------------
    def _handle_open(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._state = ConnectionState.CONNECTED
            self._attempts = 0
            self._last_error = None
            self._cancel_retry()
            entry = self._append(Severity.SYSTEM, SOURCE_WEBSOCKET, "Stream connection established")

        self._log.info("STREAM_CONNECTED url=%s", self.url)
        self._notify(entry)

    def _handle_message(self, generation: int, payload: Union[str, bytes]) -> None:
        with self._lock:
            if generation != self._generation:
                return
            try:
                entry = self._normalizer.normalize(payload)
            except Exception as e:
                self._log.exception("STREAM_MESSAGE_DECODE_FAILED")
                entry = self._normalizer.entry(
                    Severity.ERROR,
                    SOURCE_WEBSOCKET,
                    f"Error processing message: {e}",
                    payload={"original_message": payload, "error": str(e)},
                )
            self._last_message = payload
            self._history.append(entry)

        self._notify(entry)

    def _handle_close(self, generation: int, code: Optional[int], reason: str) -> None:
        entries: List[LogEntry] = []
        with self._lock:
            if generation != self._generation:
                return
            self._transport = None

            if self._manually_closed:
                self._state = ConnectionState.DISCONNECTED
                return

            self._state = ConnectionState.DISCONNECTED
            detail = f"code: {code}" + (f", reason: {reason}" if reason else "")
            entries.append(self._append(Severity.WARNING, SOURCE_WEBSOCKET, f"Stream connection closed ({detail})"))

            if self._attempts < self.max_reconnect_attempts:
                self._attempts += 1
                entries.append(self._append(
                    Severity.INFO,
                    SOURCE_WEBSOCKET,
                    f"Reconnecting... (attempt {self._attempts}/{self.max_reconnect_attempts})",
                ))
                self._cancel_retry()
                self._retry = self._scheduler.call_later(self.reconnect_interval_s, self._retry_fired)
                self._log.warning(
                    "STREAM_CLOSED code=%s reason=%s retry=%d/%d",
                    code, reason, self._attempts, self.max_reconnect_attempts,
                )
            else:
                self._state = ConnectionState.ERROR
                self._last_error = "maximum reconnect attempts reached"
                entries.append(self._append(
                    Severity.ERROR,
                    SOURCE_WEBSOCKET,
                    f"Maximum reconnect attempts reached ({self.max_reconnect_attempts})",
                ))
                self._log.error("STREAM_RETRIES_EXHAUSTED max=%d", self.max_reconnect_attempts)

        for entry in entries:
            self._notify(entry)

    def _handle_error(self, generation: int, error: BaseException) -> None:
        with self._lock:
            if generation != self._generation or self._manually_closed:
                return
            self._state = ConnectionState.ERROR
            err = str(error) or type(error).__name__
            self._last_error = err
            entry = self._append(Severity.ERROR, SOURCE_WEBSOCKET, "Stream connection error", {"error": err})

        self._log.warning("STREAM_ERROR err=%s", err)
        self._notify(entry)

    def _retry_fired(self) -> None:
        with self._lock:
            self._retry = None
        self._open(from_retry=True)

    # ---------------- Internals ----------------
    def _open(self, *, from_retry: bool = False) -> None:
        with self._lock:
            # disconnect() may land between the timer firing and this lock
            if from_retry and self._manually_closed:
                return
            self._cancel_retry()
            stale = self._detach()
            generation = self._generation
            self._state = ConnectionState.CONNECTING
            transport = self._factory(self.url, _GenerationListener(self, generation))
            self._transport = transport

        self._close_quietly(stale, CLOSE_NORMAL, "Reopen")
        self._log.info("STREAM_CONNECTING url=%s attempt=%d", self.url, self._attempts)
        try:
            transport.open()
        except TransportError as e:
            self._handle_error(generation, e)
            self._handle_close(generation, CLOSE_ABNORMAL, str(e))

    def _detach(self) -> Optional[StreamTransport]:
        # Invalidate the current connection; its late events are ignored.
        transport = self._transport
        self._transport = None
        self._generation += 1
        return transport

    def _cancel_retry(self) -> None:
        if self._retry is not None:
            self._retry.cancel()
            self._retry = None

    def _append(self, severity: Severity, source: str, message: str, payload: Any = None) -> LogEntry:
        entry = self._normalizer.entry(severity, source, message, payload=payload)
        self._history.append(entry)
        return entry

    def _notify(self, entry: Optional[LogEntry]) -> None:
        if entry is None:
            return
        with self._lock:
            cbs = list(self._subscribers)
        for cb in cbs:
            try:
                cb(entry)
            except Exception:
                self._log.exception("LOG_CALLBACK_ERROR")

    def _close_quietly(self, transport: Optional[StreamTransport], code: int, reason: str) -> None:
        if transport is None:
            return
        try:
            transport.close(code, reason)
        except TransportError:
            self._log.exception("STREAM_CLOSE_FAILED")

    def __enter__(self) -> "ReconnectingStreamClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()
