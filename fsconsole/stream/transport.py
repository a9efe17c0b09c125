# fsconsole/stream/transport.py
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Protocol, Union

import websocket

from .errors import TransportIOError, TransportOpenError

# RFC 6455 close codes used by the client
CLOSE_NORMAL = 1000
CLOSE_ABNORMAL = 1006


class StreamListener(Protocol):
    """Connection events delivered by a StreamTransport."""
    def on_open(self) -> None: ...
    def on_message(self, payload: Union[str, bytes]) -> None: ...
    def on_close(self, code: Optional[int], reason: str) -> None: ...
    def on_error(self, error: BaseException) -> None: ...


class StreamTransport(ABC):
    """
    Abstract event-driven stream connection.

    Contract:
      - open() starts connecting and returns immediately; the outcome is
        reported through the listener (on_open, or on_error + on_close).
      - open() may raise TransportOpenError when connecting cannot even start.
      - send(text) raises TransportIOError when the connection is not open.
      - close() is idempotent; the listener receives on_close afterwards.
    """

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def send(self, text: str) -> None: ...

    @abstractmethod
    def close(self, code: int = CLOSE_NORMAL, reason: str = "") -> None: ...


TransportFactory = Callable[[str, StreamListener], StreamTransport]


class WebSocketTransport(StreamTransport):
    """
    WebSocket transport implemented via websocket-client.

    run_forever() runs on a daemon reader thread; events are forwarded to the
    listener from that thread.
    """

    def __init__(
        self,
        url: str,
        listener: StreamListener,
        *,
        ping_interval_s: float = 0.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.url = url
        self._listener = listener
        self.ping_interval_s = float(ping_interval_s)
        self._log = logger or logging.getLogger(__name__)

        self._app: Optional[websocket.WebSocketApp] = None
        self._thread: Optional[threading.Thread] = None
        self._opened = threading.Event()

    @property
    def is_open(self) -> bool:
        return self._app is not None and self._opened.is_set()

    def open(self) -> None:
        if self._app is not None:
            return

        try:
            self._app = websocket.WebSocketApp(
                self.url,
                on_open=self._on_open,
                on_message=self._on_message,
                on_error=self._on_error,
                on_close=self._on_close,
            )
            self._thread = threading.Thread(
                target=self._run,
                name="fsconsole-ws-reader",
                daemon=True,
            )
            self._thread.start()
        except (ValueError, RuntimeError) as e:
            self._app = None
            self._thread = None
            raise TransportOpenError(f"cannot open {self.url}: {e}") from None

        self._log.debug("WS_READER_STARTED url=%s", self.url)

    def send(self, text: str) -> None:
        app = self._app
        if app is None or not self._opened.is_set():
            raise TransportIOError("send while transport not open")
        try:
            app.send(text)
        except websocket.WebSocketException as e:
            raise TransportIOError(f"WebSocket send failed: {e}") from None
        except OSError as e:
            raise TransportIOError(f"WebSocket send failed: {e}") from None

    def close(self, code: int = CLOSE_NORMAL, reason: str = "") -> None:
        app = self._app
        if app is None:
            return
        self._opened.clear()
        try:
            app.close(status=code, reason=reason.encode("utf-8"))
        except (websocket.WebSocketException, OSError):
            self._log.exception("WS_CLOSE_FAILED url=%s", self.url)

    # ---------------- reader thread ----------------
    def _run(self) -> None:
        app = self._app
        if app is None:
            return
        try:
            app.run_forever(ping_interval=self.ping_interval_s or 0)
        except Exception as e:
            # run_forever reports most failures through on_error; this is the rest
            self._log.exception("WS_READER_CRASHED url=%s", self.url)
            self._listener.on_error(e)
            self._listener.on_close(CLOSE_ABNORMAL, str(e))
        finally:
            self._opened.clear()
            self._app = None

    def _on_open(self, _ws: Any) -> None:
        self._opened.set()
        self._listener.on_open()

    def _on_message(self, _ws: Any, message: Union[str, bytes]) -> None:
        self._listener.on_message(message)

    def _on_error(self, _ws: Any, error: BaseException) -> None:
        self._listener.on_error(error)

    def _on_close(self, _ws: Any, code: Optional[int], reason: Optional[str]) -> None:
        self._opened.clear()
        if isinstance(reason, bytes):
            reason = reason.decode("utf-8", errors="replace")
        self._listener.on_close(code if code is not None else CLOSE_ABNORMAL, reason or "")
