# fsconsole/core/errors.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from fsconsole.api.errors import ApiError


class FsConsoleError(Exception):
    """
    An expected failure the CLI reports to the user instead of a traceback.

    `code` identifies the failure class; `hint` is a one-line remedy printed
    under the message; `details` carries context for logs.
    """

    code: str = "fsconsole_error"

    def __init__(
        self,
        message: str,
        *,
        hint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        return self.message


# -- local setup ------------------------------------------------------------

class ConfigError(FsConsoleError):
    """Bad config file or CLI override (unknown key, wrong type, out of range)."""
    code = "config_error"


class SchemaError(FsConsoleError):
    """A command name the registry does not know, or a malformed commands.yml."""
    code = "schema_error"


class ScriptLoadError(FsConsoleError):
    """A .smia script that is missing, unreadable or has the wrong extension."""
    code = "script_load_error"


# -- backend ----------------------------------------------------------------

class CommandExecutionError(FsConsoleError):
    """
    The backend could not run a command. `error` is the ApiError built where
    the request failed; its first suggestion doubles as the hint.
    """
    code = "command_execution_error"

    def __init__(self, error: "ApiError", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            error.message,
            hint=error.suggestions[0] if error.suggestions else None,
            details=details,
        )
        self.error = error
