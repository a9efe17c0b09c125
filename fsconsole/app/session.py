# fsconsole/app/session.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from fsconsole.api.client import ApiClient, ApiResponse, CommandExecutor
from fsconsole.api.errors import ApiError
from fsconsole.app.config import ConsoleConfig
from fsconsole.core.errors import CommandExecutionError
from fsconsole.grammar.formatter import quote_strategy
from fsconsole.grammar.loader import METADATA_DIR
from fsconsole.grammar.parser import CommandParser, ValidatedCommand
from fsconsole.grammar.schema import CommandRegistry
from fsconsole.interfaces import LogSink
from fsconsole.script.runner import ResultCallback, ScriptReport, ScriptRunner, read_script
from fsconsole.stream.client import ReconnectingStreamClient

StreamFactory = Callable[[ConsoleConfig], ReconnectingStreamClient]


@dataclass(frozen=True)
class ExecutionOutcome:
    validated: ValidatedCommand
    response: Optional[ApiResponse] = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.validated.is_valid and self.error is None and self.response is not None and self.response.ok


def default_stream_factory(config: ConsoleConfig) -> ReconnectingStreamClient:
    return ReconnectingStreamClient(
        config.ws_url,
        max_logs=config.max_logs,
        reconnect_interval_s=config.reconnect_interval_s,
        max_reconnect_attempts=config.max_reconnect_attempts,
    )


class ConsoleSession:
    """
    App-level facade: validation, execution, scripts and the live log stream.
    """

    def __init__(
        self,
        config: ConsoleConfig,
        *,
        registry: Optional[CommandRegistry] = None,
        executor: Optional[CommandExecutor] = None,
        stream_factory: Optional[StreamFactory] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._log = logger or logging.getLogger(__name__)

        if registry is None:
            if Path(config.metadata_dir).resolve() == METADATA_DIR.resolve():
                registry = CommandRegistry.default()
            else:
                registry = CommandRegistry.load(config.metadata_dir)
        self._registry = registry

        self._parser = CommandParser(registry, quote=quote_strategy(config.quote_style), logger=self._log)
        self._executor: CommandExecutor = executor or ApiClient(
            config.api_url,
            timeout_s=config.request_timeout_s,
            logger=self._log,
        )
        self._stream_factory = stream_factory or default_stream_factory
        self._stream: Optional[ReconnectingStreamClient] = None
        self._sinks: List[LogSink] = []
        self._unsubscribe: List[Callable[[], None]] = []

    @property
    def config(self) -> ConsoleConfig:
        return self._config

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def parser(self) -> CommandParser:
        return self._parser

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    # ---------------- Commands ----------------
    def check(self, line: str) -> ValidatedCommand:
        return self._parser.validate_and_format(line)

    def execute(self, line: str) -> ExecutionOutcome:
        validated = self._parser.validate_and_format(line)
        if not validated.is_valid:
            self._log.info("COMMAND_INVALID line=%r errors=%s", line, list(validated.errors))
            return ExecutionOutcome(validated=validated)

        try:
            response = self._executor.execute(validated.formatted)
        except CommandExecutionError as e:
            return ExecutionOutcome(validated=validated, error=e.error)
        return ExecutionOutcome(validated=validated, response=response)

    def run_script(self, text: str, *, on_result: Optional[ResultCallback] = None) -> ScriptReport:
        runner = ScriptRunner(
            self._parser,
            self._executor,
            delay_s=self._config.script_delay_s,
            logger=self._log,
        )
        return runner.run(text, on_result=on_result)

    def run_script_file(self, path: str | Path, *, on_result: Optional[ResultCallback] = None) -> ScriptReport:
        return self.run_script(read_script(path), on_result=on_result)

    def help(self, name: str) -> str:
        return self._parser.help(name)

    def commands(self) -> List[str]:
        return self._registry.names()

    # ---------------- Stream ----------------
    @property
    def stream(self) -> ReconnectingStreamClient:
        if self._stream is None:
            self._stream = self._stream_factory(self._config)
            for sink in self._sinks:
                self._unsubscribe.append(self._stream.subscribe(sink.on_log))
        return self._stream

    def add_sink(self, sink: LogSink) -> None:
        if sink in self._sinks:
            return
        self._sinks.append(sink)
        if self._stream is not None:
            self._unsubscribe.append(self._stream.subscribe(sink.on_log))

    def start_stream(self) -> ReconnectingStreamClient:
        stream = self.stream
        stream.connect()
        return stream

    def stop_stream(self) -> None:
        if self._stream is not None:
            self._stream.disconnect()

    def close(self) -> None:
        self.stop_stream()
        for unsub in self._unsubscribe:
            unsub()
        self._unsubscribe.clear()
        for sink in self._sinks:
            try:
                sink.close()
            except Exception:
                self._log.exception("LOG_SINK_CLOSE_FAILED")
        close = getattr(self._executor, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "ConsoleSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
