from __future__ import annotations

import threading
import time

import pytest

import fsconsole.stream.transport as transport_mod
from fsconsole.stream.errors import TransportIOError
from fsconsole.stream.transport import CLOSE_ABNORMAL, WebSocketTransport


class RecordingListener:
    def __init__(self):
        self.events = []

    def on_open(self):
        self.events.append(("open",))

    def on_message(self, payload):
        self.events.append(("message", payload))

    def on_close(self, code, reason):
        self.events.append(("close", code, reason))

    def on_error(self, error):
        self.events.append(("error", str(error)))


class FakeApp:
    """Stands in for websocket.WebSocketApp; run_forever blocks until close()."""
    script = ()
    crash = None

    def __init__(self, url, on_open, on_message, on_error, on_close):
        self.url = url
        self.on_open = on_open
        self.on_message = on_message
        self.on_error = on_error
        self.on_close = on_close
        self.sent = []
        self.close_kwargs = None
        self._stop = threading.Event()

    def run_forever(self, ping_interval=0):
        if FakeApp.crash is not None:
            raise FakeApp.crash
        self.on_open(self)
        for msg in FakeApp.script:
            self.on_message(self, msg)
        self._stop.wait(1.0)
        self.on_close(self, self.close_kwargs["status"] if self.close_kwargs else None, b"bye")

    def send(self, text):
        self.sent.append(text)

    def close(self, **kwargs):
        self.close_kwargs = kwargs
        self._stop.set()


@pytest.fixture
def fake_app(monkeypatch):
    FakeApp.script = ()
    FakeApp.crash = None
    monkeypatch.setattr(transport_mod.websocket, "WebSocketApp", FakeApp)
    return FakeApp


def _wait_for(pred, timeout=1.0):
    deadline = time.time() + timeout
    while not pred() and time.time() < deadline:
        time.sleep(0.005)
    return pred()


def test_events_are_forwarded_and_close_is_sent(fake_app):
    fake_app.script = ("hello", b"raw")
    lst = RecordingListener()
    t = WebSocketTransport("ws://x/api/ws", lst)

    t.open()
    assert _wait_for(lambda: len(lst.events) >= 3)
    assert t.is_open

    t.send("ping")
    app = t._app
    assert app.sent == ["ping"]

    t.close(1000, "done")
    t._thread.join(timeout=1.0)

    assert app.close_kwargs == {"status": 1000, "reason": b"done"}
    assert lst.events == [("open",), ("message", "hello"), ("message", b"raw"), ("close", 1000, "bye")]
    assert not t.is_open


def test_send_before_open_raises(fake_app):
    t = WebSocketTransport("ws://x", RecordingListener())
    with pytest.raises(TransportIOError):
        t.send("x")


def test_reader_crash_reports_error_and_abnormal_close(fake_app):
    fake_app.crash = RuntimeError("kaboom")
    lst = RecordingListener()
    t = WebSocketTransport("ws://x", lst)

    t.open()
    t._thread.join(timeout=1.0)

    assert lst.events == [("error", "kaboom"), ("close", CLOSE_ABNORMAL, "kaboom")]


def test_close_before_open_is_noop(fake_app):
    t = WebSocketTransport("ws://x", RecordingListener())
    t.close()
