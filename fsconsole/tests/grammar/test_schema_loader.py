from pathlib import Path

import pytest

from fsconsole.core.errors import SchemaError
from fsconsole.grammar.loader import SchemaLoader
from fsconsole.grammar.schema import CommandRegistry, ParamKind


def _write(dirp: Path, text: str) -> None:
    (dirp / "commands.yml").write_text(text, encoding="utf-8")


def test_load_requires_commands_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        SchemaLoader(tmp_path).load_all()


def test_load_rejects_non_mapping_commands(tmp_path: Path) -> None:
    _write(tmp_path, "commands: [a, b]\n")
    with pytest.raises(ValueError):
        SchemaLoader(tmp_path).load_all()


def test_load_rejects_unknown_param_type(tmp_path: Path) -> None:
    _write(tmp_path, "commands:\n  x:\n    params:\n      a: {type: bool}\n")
    with pytest.raises(ValueError):
        SchemaLoader(tmp_path).load_all()


def test_load_rejects_enum_without_values(tmp_path: Path) -> None:
    _write(tmp_path, "commands:\n  x:\n    params:\n      a: {type: enum}\n")
    with pytest.raises(ValueError):
        SchemaLoader(tmp_path).load_all()


def test_load_rejects_enum_default_outside_values(tmp_path: Path) -> None:
    _write(tmp_path, "commands:\n  x:\n    params:\n      a: {type: enum, values: [A, B], default: C}\n")
    with pytest.raises(ValueError):
        SchemaLoader(tmp_path).load_all()


def test_registry_from_custom_yaml_is_case_insensitive(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "commands:\n"
        "  MkThing:\n"
        "    description: make a thing\n"
        "    params:\n"
        "      Size: {type: number, required: true}\n"
        "      mode: {type: enum, values: [a, b], default: a}\n"
        "  noop: {}\n",
    )
    reg = CommandRegistry.load(tmp_path)

    assert "mkthing" in reg and "MKTHING" in reg
    assert len(reg) == 2

    spec = reg.require("mkthing")
    assert spec.required == ["size"]
    assert spec.parameters["size"].kind is ParamKind.NUMBER
    assert spec.parameters["mode"].default == "a"
    assert spec.parameters["mode"].accepts("B")
    assert reg.get("noop").parameters == {}


def test_require_unknown_command_raises_schema_error() -> None:
    reg = CommandRegistry.default()
    with pytest.raises(SchemaError) as ei:
        reg.require("format")
    assert ei.value.code == "schema_error"


def test_packaged_registry_has_core_commands() -> None:
    reg = CommandRegistry.default()
    for name in ("mkdisk", "rmdisk", "fdisk", "mount", "mkfs", "login", "logout", "mkgrp",
                 "rmgrp", "mkusr", "rmusr", "chgrp", "mkfile", "mkdir", "cat", "rep", "mounted"):
        assert name in reg

    mkdisk = reg.get("mkdisk")
    assert set(mkdisk.required) == {"size", "path"}
    assert mkdisk.parameters["fit"].allowed_values == ("BF", "FF", "WF")
    assert mkdisk.parameters["unit"].default == "M"
    assert reg.get("fdisk").parameters["unit"].default == "K"


def test_describe_lists_parameters() -> None:
    reg = CommandRegistry.default()
    text = reg.describe("MKDISK")

    assert text.startswith("Command: mkdisk")
    assert "-size (required)" in text
    assert "-fit (optional) [default: FF] [values: BF, FF, WF]" in text
    assert reg.describe("logout").endswith("Parameters: (none)")
    assert reg.describe("nope") == "unknown command: nope"
