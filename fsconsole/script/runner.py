# fsconsole/script/runner.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional

from fsconsole.api.client import CommandExecutor
from fsconsole.core.errors import CommandExecutionError, ScriptLoadError
from fsconsole.grammar.parser import CommandParser

SCRIPT_SUFFIX = ".smia"
COMMENT_PREFIX = "#"


@dataclass(frozen=True)
class ScriptResult:
    command: str
    success: bool
    message: str
    payload: Any = None


@dataclass(frozen=True)
class ScriptReport:
    results: List[ScriptResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded


ResultCallback = Callable[[int, ScriptResult], None]  # (line index, result)


def split_script(text: str) -> List[str]:
    """Executable lines of a script: trimmed, without blanks and # comments."""
    lines = (ln.strip() for ln in text.splitlines())
    return [ln for ln in lines if ln and not ln.startswith(COMMENT_PREFIX)]


def read_script(path: str | Path) -> str:
    p = Path(path)
    if p.suffix.lower() != SCRIPT_SUFFIX:
        raise ScriptLoadError(
            f"Not a script file: {p.name}",
            hint=f"Scripts must use the {SCRIPT_SUFFIX} extension.",
            details={"path": str(p)},
        )
    try:
        return p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ScriptLoadError(f"Script not found: {p}", details={"path": str(p)}) from None
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptLoadError(f"Cannot read script {p}", hint=str(e), details={"path": str(p)}) from None


class ScriptRunner:
    """
    Run a script line by line against an injected executor.

    Lines are dispatched one at a time, in order, with a fixed pause between
    consecutive dispatches. A failing line never stops the run.
    """

    def __init__(
        self,
        parser: CommandParser,
        executor: CommandExecutor,
        *,
        delay_s: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        self._parser = parser
        self._executor = executor
        self.delay_s = max(0.0, float(delay_s))
        self._sleep = sleep
        self._log = logger or logging.getLogger(__name__)

    def run(self, text: str, *, on_result: Optional[ResultCallback] = None) -> ScriptReport:
        lines = split_script(text)
        self._log.info("SCRIPT_START lines=%d delay_s=%.3f", len(lines), self.delay_s)

        results: List[ScriptResult] = []
        dispatched = 0

        for idx, line in enumerate(lines):
            validated = self._parser.validate_and_format(line)

            if not validated.is_valid:
                result = ScriptResult(
                    command=line,
                    success=False,
                    message=f"validation error: {', '.join(validated.errors)}",
                )
                self._log.warning("SCRIPT_LINE_INVALID idx=%d errors=%s", idx, list(validated.errors))
            else:
                if dispatched and self.delay_s > 0:
                    self._sleep(self.delay_s)
                dispatched += 1
                result = self._dispatch(idx, line, validated.formatted)

            results.append(result)
            if on_result is not None:
                try:
                    on_result(idx, result)
                except Exception:
                    self._log.exception("SCRIPT_RESULT_CALLBACK_ERROR")

        report = ScriptReport(results=results)
        self._log.info("SCRIPT_DONE ok=%d failed=%d", report.succeeded, report.failed)
        return report

    def _dispatch(self, idx: int, line: str, formatted: str) -> ScriptResult:
        try:
            response = self._executor.execute(formatted)
        except CommandExecutionError as e:
            self._log.warning("SCRIPT_LINE_FAILED idx=%d kind=%s msg=%s", idx, e.error.kind, e.message)
            return ScriptResult(command=line, success=False, message=e.message, payload=e.error.as_dict())

        return ScriptResult(
            command=line,
            success=response.ok,
            message=response.message,
            payload=response.data,
        )
