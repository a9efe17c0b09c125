from __future__ import annotations

from pathlib import Path

from fsconsole.api.client import ApiResponse
from fsconsole.api.errors import ApiError
from fsconsole.app.config import ConsoleConfig
from fsconsole.app.session import ConsoleSession
from fsconsole.core.errors import CommandExecutionError
from fsconsole.stream.state import ConnectionState, Severity


class FakeExecutor:
    def __init__(self, error: ApiError | None = None):
        self.commands = []
        self.error = error
        self.closed = False

    def execute(self, command: str) -> ApiResponse:
        self.commands.append(command)
        if self.error is not None:
            raise CommandExecutionError(self.error)
        return ApiResponse(status="success", message="ok", data=None)

    def close(self):
        self.closed = True


class FakeStream:
    def __init__(self, config):
        self.url = config.ws_url
        self.connects = 0
        self.disconnects = 0
        self.subscribers = []
        self.state = ConnectionState.DISCONNECTED

    def subscribe(self, cb):
        self.subscribers.append(cb)
        return lambda: self.subscribers.remove(cb)

    def connect(self):
        self.connects += 1
        self.state = ConnectionState.CONNECTING

    def disconnect(self):
        self.disconnects += 1
        self.state = ConnectionState.DISCONNECTED


class ListSink:
    def __init__(self):
        self.entries = []
        self.closed = False

    def on_log(self, entry):
        self.entries.append(entry)

    def close(self):
        self.closed = True


def _session(**kw) -> ConsoleSession:
    cfg = kw.pop("config", ConsoleConfig(script_delay_s=0))
    return ConsoleSession(cfg, **kw)


def test_invalid_command_never_reaches_executor():
    ex = FakeExecutor()
    out = _session(executor=ex).execute("mkdisk -path=/a.mia")

    assert not out.ok
    assert out.response is None and out.error is None
    assert out.validated.errors == ("missing required parameter: -size",)
    assert ex.commands == []


def test_valid_command_is_sent_in_canonical_form():
    ex = FakeExecutor()
    out = _session(executor=ex).execute('mount  -path="/home/my disk.mia" -name=P1')

    assert out.ok
    assert ex.commands == ['mount -path="/home/my disk.mia" -name=P1']


def test_execution_errors_are_returned_not_raised():
    err = ApiError(kind="rejected", message="partition not found", suggestions=("Check the exact partition name",))
    out = _session(executor=FakeExecutor(error=err)).execute("mount -path=/a -name=P")

    assert not out.ok
    assert out.error is err


def test_percent20_quote_style_is_used():
    ex = FakeExecutor()
    s = _session(executor=ex, config=ConsoleConfig(quote_style="percent20"))
    s.execute('mount -path="/my disk.mia" -name=P1')
    assert ex.commands == ["mount -path=/my%20disk.mia -name=P1"]


def test_check_and_help():
    s = _session(executor=FakeExecutor())
    assert s.check("mounted").formatted == "mounted"
    assert "mkdisk" in s.commands()
    assert s.help("mkfs").startswith("Command: mkfs")


def test_run_script_file(tmp_path: Path):
    p = tmp_path / "s.smia"
    p.write_text("# c\nmkgrp -name=users\nmkgrp\nlogout\n", encoding="utf-8")
    ex = FakeExecutor()

    report = _session(executor=ex).run_script_file(p)

    assert (report.total, report.succeeded, report.failed) == (3, 2, 1)
    assert ex.commands == ["mkgrp -name=users", "logout"]


def test_custom_metadata_dir(tmp_path: Path):
    (tmp_path / "commands.yml").write_text("commands:\n  ping: {}\n", encoding="utf-8")
    s = _session(executor=FakeExecutor(), config=ConsoleConfig(metadata_dir=str(tmp_path)))

    assert s.commands() == ["ping"]
    assert s.execute("mkdisk -size=1 -path=/a").validated.errors == ("unknown command: mkdisk",)


def test_stream_is_lazy_and_sinks_are_attached():
    made = []

    def factory(cfg):
        made.append(FakeStream(cfg))
        return made[-1]

    sink = ListSink()
    ex = FakeExecutor()
    s = _session(executor=ex, stream_factory=factory)
    s.add_sink(sink)
    assert made == []

    stream = s.start_stream()
    assert stream is made[0]
    assert stream.connects == 1
    assert stream.subscribers == [sink.on_log]

    with s:
        pass

    assert stream.disconnects == 1
    assert stream.subscribers == []
    assert sink.closed
    assert ex.closed


def test_default_stream_uses_config():
    s = _session(executor=FakeExecutor(), config=ConsoleConfig(ws_url="ws://h/ws", max_logs=7, max_reconnect_attempts=2))
    stream = s.stream

    assert stream.url == "ws://h/ws"
    assert stream.max_reconnect_attempts == 2
    assert stream.state is ConnectionState.DISCONNECTED
    stream.add_log(Severity.INFO, "SYSTEM", "x")
    assert len(stream.logs) == 1
