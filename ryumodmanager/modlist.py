"""Readers and writers for the two mod list file formats.

Legacy format (``ModLoadOrder.txt``), one mod per line, all implicitly enabled::

    ; full line comment
    ModA
    ModB ; trailing comment

Current format (``ModList.txt``), a single line of ``|`` separated tokens where
``<`` marks an enabled mod and ``>`` a disabled one::

    <ModA|>ModB|<ModC
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .models import ModEntry, equal_mod_names

COMMENT_PREFIX = ";"
TOKEN_SEPARATOR = "|"
ENABLED_PREFIX = "<"
DISABLED_PREFIX = ">"


def _mod_dir_exists(mods_root: Path | None, name: str) -> bool:
    if mods_root is None:
        return True
    if (mods_root / name).is_dir():
        return True
    if not mods_root.is_dir():
        return False
    folded = name.casefold()
    return any(path.is_dir() and path.name.casefold() == folded for path in mods_root.iterdir())


def parse_legacy_load_order(lines: Iterable[str], mods_root: Path | None = None) -> List[str]:
    mods: List[str] = []
    for raw_line in lines:
        if raw_line.startswith(COMMENT_PREFIX):
            continue
        line = raw_line.split(COMMENT_PREFIX, 1)[0].strip()
        if not line:
            continue
        if any(equal_mod_names(line, existing) for existing in mods):
            continue
        if not _mod_dir_exists(mods_root, line):
            continue
        mods.append(line)
    return mods


def read_legacy_load_order(txt_path: Path, mods_root: Path | None = None) -> List[str]:
    """Read mod names from the legacy load order file, in file order."""

    if not txt_path.is_file():
        return []
    with txt_path.open("r", encoding="utf-8", errors="ignore") as handle:
        return parse_legacy_load_order(handle.read().splitlines(), mods_root)


def legacy_to_entries(names: Iterable[str]) -> List[ModEntry]:
    return [ModEntry(name, True) for name in names]


def parse_mod_list(line: str, mods_root: Path | None = None) -> List[ModEntry]:
    mods: List[ModEntry] = []
    for token in line.strip().split(TOKEN_SEPARATOR):
        if not token:
            continue
        if token[0] not in (ENABLED_PREFIX, DISABLED_PREFIX):
            continue
        entry = ModEntry(token[1:], token[0] == ENABLED_PREFIX)
        if not entry.is_valid or entry in mods:
            continue
        if not _mod_dir_exists(mods_root, entry.name):
            continue
        mods.append(entry)
    return mods


def read_mod_list(txt_path: Path, mods_root: Path | None = None) -> List[ModEntry]:
    """Read the current format mod list. Only the first line of the file is used."""

    if not txt_path.is_file():
        return []
    with txt_path.open("r", encoding="utf-8", errors="ignore") as handle:
        first_line = handle.readline()
    return parse_mod_list(first_line, mods_root)


def serialize_mod_list(entries: Iterable[ModEntry]) -> str:
    return TOKEN_SEPARATOR.join(f"{entry.prefix}{entry.name}" for entry in entries)


def write_mod_list(txt_path: Path, entries: List[ModEntry]) -> bool:
    """Write ``entries`` to ``txt_path``.

    An empty list leaves the file untouched and returns False, so a run that
    found nothing never erases a saved list.
    """

    if not entries:
        return False
    txt_path.write_text(serialize_mod_list(entries), encoding="utf-8")
    return True


__all__ = [
    "parse_legacy_load_order",
    "read_legacy_load_order",
    "legacy_to_entries",
    "parse_mod_list",
    "read_mod_list",
    "serialize_mod_list",
    "write_mod_list",
]
