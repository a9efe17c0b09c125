# fsconsole/app/config.py
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from fsconsole.core.errors import ConfigError
from fsconsole.grammar.formatter import QUOTE_STRATEGIES
from fsconsole.grammar.loader import METADATA_DIR


@dataclass(frozen=True)
class ConsoleConfig:
    api_url: str = "http://localhost:8080/api"
    ws_url: str = "ws://localhost:8080/api/ws"
    request_timeout_s: float = 10.0
    max_logs: int = 1000
    reconnect_interval_s: float = 3.0
    max_reconnect_attempts: int = 5
    script_delay_s: float = 0.5
    quote_style: str = "quote"
    metadata_dir: str = str(METADATA_DIR)

    def __post_init__(self) -> None:
        if self.request_timeout_s <= 0:
            raise ConfigError(f"request_timeout_s must be > 0, got {self.request_timeout_s}")
        if self.max_logs < 1:
            raise ConfigError(f"max_logs must be >= 1, got {self.max_logs}")
        if self.reconnect_interval_s < 0:
            raise ConfigError(f"reconnect_interval_s must be >= 0, got {self.reconnect_interval_s}")
        if self.max_reconnect_attempts < 0:
            raise ConfigError(f"max_reconnect_attempts must be >= 0, got {self.max_reconnect_attempts}")
        if self.script_delay_s < 0:
            raise ConfigError(f"script_delay_s must be >= 0, got {self.script_delay_s}")
        if self.quote_style.lower() not in QUOTE_STRATEGIES:
            raise ConfigError(
                f"Unknown quote_style '{self.quote_style}'.",
                hint=f"Valid styles: {sorted(QUOTE_STRATEGIES)}",
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConsoleConfig":
        known = {f.name: f for f in fields(cls)}
        kwargs: dict = {}

        for key, value in data.items():
            f = known.get(key)
            if f is None:
                raise ConfigError(
                    f"Unknown config key '{key}'.",
                    hint=f"Valid keys: {sorted(known)}",
                    details={"key": key},
                )
            kwargs[key] = _cast(key, value, type(getattr(cls, key)))

        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "ConsoleConfig":
        """Copy with non-None overrides applied (CLI flags)."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values) if values else self


def load_config(path: Optional[str | Path] = None) -> ConsoleConfig:
    if path is None:
        return ConsoleConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    try:
        with open(p, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}", hint=str(e)) from None

    if not isinstance(doc, dict):
        raise ConfigError(f"{p.name} must contain a mapping")

    return ConsoleConfig.from_mapping(doc)


def _cast(key: str, value: Any, target: type) -> Any:
    try:
        if target is bool or isinstance(value, bool):
            raise TypeError(f"Expected {target.__name__}, got bool")
        if target is int:
            if isinstance(value, float) and not value.is_integer():
                raise TypeError(f"Expected int, got {value!r}")
            return int(value)
        if target is float:
            return float(value)
        if target is str:
            if not isinstance(value, str):
                raise TypeError(f"Expected str, got {type(value).__name__}")
            return value
    except (TypeError, ValueError) as e:
        raise ConfigError(
            f"Invalid value for config key '{key}'.",
            hint=str(e),
            details={"key": key, "value": value},
        ) from None
    return value
