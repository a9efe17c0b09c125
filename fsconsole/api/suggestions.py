# fsconsole/api/suggestions.py
"""
Remediation hints for failed backend commands.

Rules match on the command text and the backend error message (both
lower-cased) and are evaluated in order; at most MAX_SUGGESTIONS are kept.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

MAX_SUGGESTIONS = 4

# (command substring or None, error substrings, hints)
_RULES: Sequence[Tuple[Optional[str], Tuple[str, ...], Tuple[str, ...]]] = (
    ("fdisk", ("no hay espacio suficiente", "not enough space"), (
        "Check the free space of the disk",
        'Create a larger disk: mkdisk -size=5000 -unit=M -path="/path/big_disk.mia"',
        "Remove unused partitions",
    )),
    ("fdisk", ("partición extendida", "extended partition"), (
        'Create a primary partition: fdisk -size=300 -unit=M -path="/path/disk.mia" -name="Primary1"',
        'Use a smaller partition: fdisk -size=100 -unit=M -path="/path/disk.mia" -name="Small1"',
    )),
    ("mount", ("no se encontró una partición", "partition not found"), (
        "Check the exact partition name",
        "{create_partition}",
    )),
    ("mount", ("ya está montada", "already mounted"), (
        "List mounted partitions: mounted",
        "Use a different mount id",
    )),
    ("mount", ("solo se pueden montar particiones primarias", "only primary partitions"), (
        'Create a primary partition: fdisk -size=300 -unit=M -path="/path/disk.mia" -name="Primary1"',
        "Check the partition type",
    )),
    ("mkdisk", ("ya existe", "file exists", "already exists"), (
        'Use a different name: mkdisk -size=1000 -unit=M -path="/path/new_disk.mia"',
        'Delete the existing disk: rmdisk -path="/path/disk.mia"',
    )),
    ("mkdisk", ("espacio insuficiente", "no space"), (
        'Create a smaller disk: mkdisk -size=500 -unit=M -path="/path/disk.mia"',
        'Use a different location: mkdisk -size=1000 -unit=M -path="/tmp/disk.mia"',
    )),
    (None, ("no such file", "no existe", "does not exist"), (
        "Create the missing folders: mkdir -p -path=/full/path",
        "Check that the path is absolute",
    )),
    (None, ("permission denied", "permisos"), (
        "Check the folder permissions",
        "Use a writable location such as /tmp",
    )),
)

_QUOTED = re.compile(r"'([^']+)'")


def _partition_name(message: str) -> str:
    m = _QUOTED.search(message)
    return m.group(1) if m else "NewPartition"


def suggest(command: str, message: str, extra: Iterable[str] = ()) -> List[str]:
    """Return up to MAX_SUGGESTIONS hints for a failed command."""
    cmd = (command or "").lower()
    err = (message or "").lower()
    out: List[str] = []

    for cmd_key, needles, hints in _RULES:
        if cmd_key is not None and cmd_key not in cmd:
            continue
        if not any(n in err for n in needles):
            continue
        for hint in hints:
            if hint == "{create_partition}":
                name = _partition_name(message)
                hint = f'Create the missing partition: fdisk -size=300 -unit=M -path="/path/disk.mia" -name="{name}"'
            out.append(hint)

    out.extend(extra)
    return out[:MAX_SUGGESTIONS]
