# fsconsole/grammar/schema.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from fsconsole.core.errors import SchemaError
from .loader import METADATA_DIR, SchemaLoader


class ParamKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    ENUM = "enum"


@dataclass(frozen=True)
class ParameterSpec:
    """
    Static description of one command parameter.

    Contains only metadata - validation lives in CommandParser.
    """
    name: str
    kind: ParamKind
    required: bool = False
    allowed_values: Tuple[str, ...] = ()
    default: Optional[str] = None
    description: str = ""

    @classmethod
    def from_dict(cls, name: str, spec: Mapping[str, Any]) -> "ParameterSpec":
        default = spec.get("default")
        return cls(
            name=str(name).lower(),
            kind=ParamKind(spec["type"]),
            required=bool(spec.get("required", False)),
            allowed_values=tuple(str(v) for v in spec.get("values", None) or ()),
            default=str(default) if default is not None else None,
            description=str(spec.get("description", "") or ""),
        )

    def accepts(self, value: str) -> bool:
        """Case-insensitive membership test for ENUM parameters."""
        upper = value.upper()
        return any(v.upper() == upper for v in self.allowed_values)


@dataclass(frozen=True)
class CommandSpec:
    name: str
    parameters: Mapping[str, ParameterSpec] = field(default_factory=dict)
    description: str = ""

    @property
    def required(self) -> List[str]:
        return [n for n, p in self.parameters.items() if p.required]


class CommandRegistry:
    """Read-only, case-insensitive lookup of command schemas."""

    def __init__(self, commands: Mapping[str, CommandSpec]):
        self._commands: Dict[str, CommandSpec] = {k.lower(): v for k, v in commands.items()}

    @classmethod
    def from_loader(cls, loader: SchemaLoader) -> "CommandRegistry":
        specs: Dict[str, CommandSpec] = {}
        for name, cmd in loader.commands.items():
            params = {
                str(pname).lower(): ParameterSpec.from_dict(pname, pspec)
                for pname, pspec in (cmd.get("params") or {}).items()
            }
            specs[name] = CommandSpec(name=name, parameters=params, description=cmd.get("description", ""))
        return cls(specs)

    @classmethod
    def load(cls, metadata_dir: str | Path) -> "CommandRegistry":
        loader = SchemaLoader(metadata_dir)
        loader.load_all()
        return cls.from_loader(loader)

    @classmethod
    def default(cls) -> "CommandRegistry":
        return _packaged_registry()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._commands

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def names(self) -> List[str]:
        return list(self._commands.keys())

    def get(self, name: str) -> Optional[CommandSpec]:
        return self._commands.get(name.lower())

    def require(self, name: str) -> CommandSpec:
        spec = self.get(name)
        if spec is None:
            raise SchemaError(
                f"Unknown command: {name}",
                hint=f"Known commands: {', '.join(self.names())}",
                details={"command": name},
            )
        return spec

    def describe(self, name: str) -> str:
        """Human-readable help for one command."""
        spec = self.get(name)
        if spec is None:
            return f"unknown command: {name}"

        lines = [f"Command: {spec.name}"]
        if spec.description:
            lines.append(f"  {spec.description}")
        lines.append("")

        if not spec.parameters:
            lines.append("Parameters: (none)")
            return "\n".join(lines)

        lines.append("Parameters:")
        for pname, p in spec.parameters.items():
            head = f"  -{pname} ({'required' if p.required else 'optional'})"
            if p.default is not None:
                head += f" [default: {p.default}]"
            if p.allowed_values:
                head += f" [values: {', '.join(p.allowed_values)}]"
            lines.append(head)
            if p.description:
                lines.append(f"    {p.description}")
        return "\n".join(lines)


@lru_cache(maxsize=1)
def _packaged_registry() -> CommandRegistry:
    return CommandRegistry.load(METADATA_DIR)
