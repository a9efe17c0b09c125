from .errors import (
    FsConsoleError,
    ConfigError,
    SchemaError,
    ScriptLoadError,
    CommandExecutionError,
)

__all__ = [
    "FsConsoleError",
    "ConfigError",
    "SchemaError",
    "ScriptLoadError",
    "CommandExecutionError",
]
