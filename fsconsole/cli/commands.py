# fsconsole/cli/commands.py
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

from fsconsole.app.config import ConsoleConfig, load_config
from fsconsole.app.session import ConsoleSession, ExecutionOutcome
from fsconsole.core.errors import CommandExecutionError
from fsconsole.interfaces import LogSink
from fsconsole.script.runner import ScriptResult
from fsconsole.script.sample import SAMPLE_SCRIPT
from fsconsole.stream.state import LogEntry


# ---------------- Log sink ----------------

def format_entry(entry: LogEntry) -> str:
    return f"{entry.timestamp} [{entry.severity.value}] {entry.source}: {entry.message}"


class PrintLogSink(LogSink):
    """Print stream log entries to stdout."""
    def __init__(self, *, include_payload: bool = False):
        self._include_payload = include_payload

    def on_log(self, entry: LogEntry) -> None:
        print(format_entry(entry))
        if self._include_payload and entry.payload is not None:
            print(f"  payload: {_dump(entry.payload)}")

    def close(self) -> None:
        return None

# ---------------- Logging ----------------

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_file_logging(log_path: Path, *, level: int = logging.INFO) -> logging.Handler:
    """Route fsconsole logs to `log_path`; a second call for the same file reuses its handler."""
    root = logging.getLogger()
    resolved = log_path.resolve()

    existing = next(
        (
            h for h in root.handlers
            if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == resolved
        ),
        None,
    )
    if existing is not None:
        return existing

    resolved.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(resolved, encoding="utf-8", delay=True)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    if root.level > level:
        root.setLevel(level)
    return handler

# ---------------- Session ----------------

def resolve_config(args) -> ConsoleConfig:
    cfg = load_config(args.config)
    delay_ms = getattr(args, "delay_ms", None)
    return cfg.with_overrides(
        api_url=args.api_url,
        ws_url=args.ws_url,
        script_delay_s=(max(0, delay_ms) / 1000.0) if delay_ms is not None else None,
    )


def build_session(config: ConsoleConfig) -> ConsoleSession:
    return ConsoleSession(config)

# ---------------- Printing ----------------

def _dump(value: Any) -> str:
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def print_outcome(outcome: ExecutionOutcome) -> None:
    v = outcome.validated
    if not v.is_valid:
        print(f"INVALID: {v.original.strip()}")
        for err in v.errors:
            print(f"  - {err}")
        return

    if outcome.error is not None:
        err = outcome.error
        print(f"FAILED: {v.formatted}")
        print(f"{err.title}: {err.message}")
        for s in err.suggestions:
            print(f"  hint: {s}")
        return

    resp = outcome.response
    print(f"OK: {v.formatted}")
    if resp is not None:
        if resp.message:
            print(resp.message)
        if resp.data is not None:
            print(_dump(resp.data))


def print_script_result(idx: int, result: ScriptResult) -> None:
    mark = "OK  " if result.success else "FAIL"
    print(f"[{idx + 1:3d}] {mark} {result.command}")
    if result.message:
        print(f"       {result.message}")

# ---------------- Commands ----------------

def cmd_commands(session: ConsoleSession) -> int:
    print("Available commands:\n")
    for spec in session.registry:
        print(f"  {spec.name:<10} {spec.description}")
    print("\nUse: fsconsole describe <command>")
    return 0


def cmd_describe(session: ConsoleSession, name: str) -> int:
    spec = session.registry.require(name)
    print(session.help(spec.name))
    return 0


def cmd_check(session: ConsoleSession, line: str) -> int:
    v = session.check(line)
    if not v.is_valid:
        print(f"INVALID: {line.strip()}")
        for err in v.errors:
            print(f"  - {err}")
        return 1
    print(v.formatted)
    return 0


def cmd_exec(session: ConsoleSession, line: str) -> int:
    outcome = session.execute(line)
    print_outcome(outcome)
    return 0 if outcome.ok else 1


def cmd_run(session: ConsoleSession, script: str) -> int:
    report = session.run_script_file(script, on_result=print_script_result)
    print(f"\nScript: total={report.total} ok={report.succeeded} failed={report.failed}")
    return 0 if report.failed == 0 else 1


def cmd_sample_script() -> int:
    print(SAMPLE_SCRIPT, end="")
    return 0


def cmd_health(session: ConsoleSession) -> int:
    try:
        resp = session.executor.health()
    except CommandExecutionError as e:
        print(f"Backend: DOWN ({e.error.title}: {e.message})")
        return 1
    print(f"Backend: {resp.status or 'ok'}" + (f" - {resp.message}" if resp.message else ""))
    return 0


def cmd_logs(
    session: ConsoleSession,
    *,
    secs: Optional[float],
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    session.add_sink(PrintLogSink(include_payload=True))
    stream = session.start_stream()
    print(f"Following {stream.url} (Ctrl+C to stop)")

    t0 = clock()
    try:
        while secs is None or clock() - t0 < secs:
            sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        session.stop_stream()
    return 0


SHELL_HELP = """\
Shell commands:
  help              list commands
  help <command>    show parameters of a command
  logs              print buffered stream logs
  clear             clear buffered stream logs
  exit | quit       leave the shell
Anything else is validated and executed."""


def cmd_shell(
    session: ConsoleSession,
    *,
    stream: bool = False,
    input_fn: Callable[[str], str] = input,
) -> int:
    if stream:
        session.start_stream()

    print("fsconsole shell. Type 'help' for help, 'exit' to quit.")
    while True:
        try:
            line = input_fn("fs> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        text = line.strip()
        if not text:
            continue

        word, _, rest = text.partition(" ")
        word = word.lower()

        if word in ("exit", "quit"):
            break
        if word == "help":
            if rest.strip():
                print(session.help(rest.strip()))
            else:
                print(SHELL_HELP)
                print("\nCommands: " + ", ".join(session.commands()))
            continue
        if word == "logs" and not rest:
            entries = session.stream.logs
            if not entries:
                print("(no stream logs)")
            for entry in entries:
                print(format_entry(entry))
            continue
        if word == "clear" and not rest:
            session.stream.clear_logs()
            print("Stream logs cleared.")
            continue

        print_outcome(session.execute(text))

    session.stop_stream()
    return 0
