"""Game-specific workarounds applied before generation.

Every patch checks the current state first, so running it again changes nothing.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from .constants import DINPUT8DLL, VERSIONDLL, WINMMDLL, WINMMLJ
from .file_utils import remove_file, rename_file
from .load_config import VersionedConfig
from .models import Game
from .reporter import Reporter

OVERRIDES_SECTION = "Overrides"
REBUILD_MLO_KEY = "RebuildMLO"


def _disable_rebuild_mlo(config: VersionedConfig, reason: str, reporter: Reporter) -> bool:
    if not config.has_key(OVERRIDES_SECTION, REBUILD_MLO_KEY):
        return False
    if not config.get_bool(OVERRIDES_SECTION, REBUILD_MLO_KEY, default=True):
        return False
    reporter.info(f"Game specific patch: Disabling RebuildMLO {reason}...")
    config.set(OVERRIDES_SECTION, REBUILD_MLO_KEY, False)
    return True


def apply_config_overrides(
    config: VersionedConfig,
    game: Game,
    external_only: bool,
    platform_variant: bool,
    reporter: Reporter,
) -> List[str]:
    """Force off config options that break on some games. Returns the reasons applied."""

    applied: List[str] = []
    if external_only and game.is_judgment:
        reason = "for Judgment and Lost Judgment when using an external mod manager"
        if _disable_rebuild_mlo(config, reason, reporter):
            applied.append(reason)
    if platform_variant:
        reason = "for Xbox games"
        if _disable_rebuild_mlo(config, reason, reporter):
            applied.append(reason)
    return applied


def _patch_eve(game_dir: Path, reporter: Reporter) -> List[str]:
    dinput8 = game_dir / DINPUT8DLL
    version = game_dir / VERSIONDLL
    if not dinput8.is_file():
        return []
    # Virtua Fighter eSports crashes when dinput8.dll is the ASI loader.
    if version.is_file():
        reporter.info(f"Game specific patch: Deleting {DINPUT8DLL} because {VERSIONDLL} exists...")
        remove_file(dinput8)
        return [f"deleted {DINPUT8DLL}"]
    reporter.info(f"Game specific patch: Renaming {DINPUT8DLL} to {VERSIONDLL}...")
    rename_file(dinput8, version)
    return [f"renamed {DINPUT8DLL} to {VERSIONDLL}"]


def _patch_judgment(game_dir: Path, reporter: Reporter) -> List[str]:
    applied: List[str] = []
    dinput8 = game_dir / DINPUT8DLL
    winmm = game_dir / WINMMDLL
    winmm_lj = game_dir / WINMMLJ

    if dinput8.is_file():
        reporter.info(f"Game specific patch: Deleting {DINPUT8DLL} because it causes crashes with Judgment games...")
        remove_file(dinput8)
        applied.append(f"deleted {DINPUT8DLL}")

    if not winmm.is_file():
        if winmm_lj.is_file():
            reporter.info(f"Game specific patch: Enabling {WINMMDLL} by renaming {WINMMLJ} to fix Judgment games crashes...")
            rename_file(winmm_lj, winmm)
            applied.append(f"renamed {WINMMLJ} to {WINMMDLL}")
        else:
            reporter.warn(
                f"{WINMMLJ} was not found. Judgment games will NOT load mods without this file. "
                "Please redownload Ryu Mod Manager."
            )
    return applied


def apply_game_patches(game_dir: Path, game: Game, reporter: Reporter) -> List[str]:
    """Apply loader-DLL workarounds for ``game``. Returns a description of each change made."""

    if game is Game.EVE:
        applied = _patch_eve(game_dir, reporter)
    elif game.is_judgment:
        applied = _patch_judgment(game_dir, reporter)
    else:
        applied = []
    for change in applied:
        reporter.ok(change, indent=2)
    return applied
