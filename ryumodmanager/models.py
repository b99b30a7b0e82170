from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List

from .constants import EXTERNAL_MODS, INI, MLO, MODS, PARLESS, TXT, TXT_OLD


def equal_mod_names(first: str, second: str) -> bool:
    return first.casefold() == second.casefold()


@dataclass(slots=True, eq=False)
class ModEntry:
    name: str
    enabled: bool = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModEntry):
            return NotImplemented
        return equal_mod_names(self.name, other.name)

    def __hash__(self) -> int:
        return hash(self.name.casefold())

    @property
    def is_valid(self) -> bool:
        return bool(self.name.strip())

    @property
    def prefix(self) -> str:
        return "<" if self.enabled else ">"


def extend_unique(entries: List[ModEntry], candidates: Iterable[ModEntry]) -> int:
    """Append candidates whose name is not already present, keeping the first occurrence.

    Returns the number of entries that were appended.
    """

    seen = {entry.name.casefold() for entry in entries}
    added = 0
    for candidate in candidates:
        key = candidate.name.casefold()
        if key in seen:
            continue
        seen.add(key)
        entries.append(candidate)
        added += 1
    return added


def enabled_mod_names(entries: Iterable[ModEntry]) -> List[str]:
    return [entry.name for entry in entries if entry.enabled]


class Game(str, Enum):
    UNSUPPORTED = "Unsupported"
    YAKUZA0 = "Yakuza0"
    YAKUZA_KIWAMI = "YakuzaKiwami"
    YAKUZA_KIWAMI2 = "YakuzaKiwami2"
    YAKUZA3 = "Yakuza3"
    YAKUZA4 = "Yakuza4"
    YAKUZA5 = "Yakuza5"
    YAKUZA6 = "Yakuza6"
    YAKUZA_LIKE_A_DRAGON = "YakuzaLikeADragon"
    JUDGMENT = "Judgment"
    LOST_JUDGMENT = "LostJudgment"
    EVE = "eve"

    @property
    def is_supported(self) -> bool:
        return self is not Game.UNSUPPORTED

    @property
    def is_judgment(self) -> bool:
        return self in (Game.JUDGMENT, Game.LOST_JUDGMENT)


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Options taken from the command line, fixed for the whole run."""

    silent: bool = False
    launch_game: bool = False


@dataclass(frozen=True, slots=True)
class RunSettings:
    """Flags resolved from the command line and the config file once configuring is done."""

    silent: bool
    loose_files_enabled: bool
    external_mods_only: bool
    check_for_updates: bool
    show_warnings: bool
    verbose: bool


class UpdateStatus(str, Enum):
    AVAILABLE = "available"
    UP_TO_DATE = "up_to_date"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    tag: str
    name: str
    url: str


@dataclass(frozen=True, slots=True)
class UpdateCheckResult:
    status: UpdateStatus
    current_version: str
    release: ReleaseInfo | None = None
    error: str | None = None

    @property
    def update_available(self) -> bool:
        return self.status is UpdateStatus.AVAILABLE


@dataclass(frozen=True, slots=True)
class GamePaths:
    """Locations of every file and directory the pipeline touches, relative to one game directory."""

    game_dir: Path

    @property
    def config_path(self) -> Path:
        return self.game_dir / INI

    @property
    def mods_dir(self) -> Path:
        return self.game_dir / MODS

    @property
    def external_mods_dir(self) -> Path:
        return self.mods_dir / EXTERNAL_MODS

    @property
    def repack_dir(self) -> Path:
        return self.mods_dir / PARLESS

    @property
    def mod_list_path(self) -> Path:
        return self.game_dir / TXT

    @property
    def legacy_list_path(self) -> Path:
        return self.game_dir / TXT_OLD

    @property
    def mlo_path(self) -> Path:
        return self.game_dir / MLO
