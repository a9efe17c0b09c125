# fsconsole/grammar/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

METADATA_DIR = Path(__file__).resolve().parents[1] / "metadata"

VALID_TYPES = ("string", "number", "enum")


class SchemaLoader:
    """Load the command schema YAML into plain dicts (shape-checked, not typed)."""

    REQUIRED_FILES = ("commands.yml",)

    def __init__(self, config_dir: str | Path = METADATA_DIR):
        self.config_dir = Path(config_dir)

        # Full document
        self.commands_doc: Dict[str, Any] = {}

        # Extracted structure used by CommandRegistry(...)
        self.commands: Dict[str, Dict[str, Any]] = {}

    def load_all(self) -> None:
        for fn in self.REQUIRED_FILES:
            path = self.config_dir / fn
            if not path.exists():
                raise FileNotFoundError(f"Schema file not found: {path}")

        self.commands_doc = self._load_yaml("commands.yml")
        commands = self.commands_doc.get("commands", {}) or {}

        if not isinstance(commands, dict):
            raise ValueError("commands.yml must contain 'commands' mapping")

        self.commands = {}
        for name, cmd in commands.items():
            self.commands[str(name).lower()] = self._check_command(str(name), cmd or {})

    def _check_command(self, name: str, cmd: Any) -> Dict[str, Any]:
        if not isinstance(cmd, dict):
            raise ValueError(f"Command '{name}' must be a mapping")

        params = cmd.get("params", {}) or {}
        if not isinstance(params, dict):
            raise ValueError(f"Command '{name}': 'params' must be a mapping")

        for pname, spec in params.items():
            if not isinstance(spec, dict):
                raise ValueError(f"Command '{name}' param '{pname}' must be a mapping")

            ptype = spec.get("type")
            if ptype not in VALID_TYPES:
                raise ValueError(f"Command '{name}' param '{pname}': unknown type {ptype!r}")

            if ptype == "enum":
                values = spec.get("values")
                if not isinstance(values, list) or not values:
                    raise ValueError(f"Command '{name}' param '{pname}': enum needs a non-empty 'values' list")
                default = spec.get("default")
                if default is not None and str(default).upper() not in {str(v).upper() for v in values}:
                    raise ValueError(f"Command '{name}' param '{pname}': default {default!r} not in {values}")

        return {"description": str(cmd.get("description", "") or ""), "params": params}

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        path = self.config_dir / filename
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
