from __future__ import annotations

from pathlib import Path
from typing import List

from .constants import EXTERNAL_MODS, PARLESS
from .load_config import VersionedConfig
from .models import GamePaths, ModEntry, extend_unique
from .modlist import legacy_to_entries, read_legacy_load_order, read_mod_list, write_mod_list
from .reporter import Reporter

RESERVED_MOD_DIRS = frozenset({PARLESS, EXTERNAL_MODS})

MARKER_SECTION = "SavedSettings"
MARKER_KEY = "ModListImported"


def scan_mods(mods_root: Path) -> List[str]:
    """Return every mod directory under ``mods_root``, skipping the reserved ones."""

    if not mods_root.is_dir():
        return []
    names = [
        path.name
        for path in mods_root.iterdir()
        if path.is_dir() and path.name not in RESERVED_MOD_DIRS
    ]
    return sorted(names, key=lambda name: (name.casefold(), name))


class MigrationCoordinator:
    """One-time import of the legacy load order file.

    The import is due while the legacy file exists and the config has no
    ``SavedSettings.ModListImported`` marker. Cleanup (deleting the legacy file
    and persisting the marker) only runs through :meth:`complete`, which callers
    invoke after the converted list has been written.
    """

    def __init__(self, paths: GamePaths, reporter: Reporter) -> None:
        self.paths = paths
        self.reporter = reporter
        self.pending = False

    def is_due(self, config: VersionedConfig) -> bool:
        if config.get_bool(MARKER_SECTION, MARKER_KEY, default=False):
            return False
        return self.paths.legacy_list_path.is_file()

    def import_legacy(self) -> List[ModEntry]:
        legacy_path = self.paths.legacy_list_path
        self.reporter.info(f"Old format load order file ({legacy_path.name}) was found. Importing to the new format...")
        names = read_legacy_load_order(legacy_path, self.paths.mods_dir)
        self.pending = True
        self.reporter.ok(f"Imported {len(names)} mod(s) from {legacy_path.name}.", indent=2)
        return legacy_to_entries(names)

    def complete(self, config: VersionedConfig) -> bool:
        if not self.pending:
            return False
        legacy_path = self.paths.legacy_list_path
        try:
            if legacy_path.exists():
                legacy_path.unlink()
        except OSError as exc:
            self.reporter.warn(
                f"Could not delete {legacy_path.name} ({exc}). This file should be deleted manually."
            )
        config.set(MARKER_SECTION, MARKER_KEY, True)
        self.pending = False
        return True


class SourceReconciler:
    """Builds the ordered, de-duplicated mod list for a run.

    Sources are merged in precedence order and the first occurrence of a name
    (compared case-insensitively) wins: legacy list or current list, then any
    mod directory not listed yet.
    """

    def __init__(self, paths: GamePaths, migration: MigrationCoordinator, reporter: Reporter) -> None:
        self.paths = paths
        self.migration = migration
        self.reporter = reporter
        self.external_only = False

    def external_only_active(self, external_mods_only: bool) -> bool:
        return external_mods_only and self.paths.external_mods_dir.is_dir()

    def reconcile(self, config: VersionedConfig, external_mods_only: bool) -> List[ModEntry]:
        self.external_only = self.external_only_active(external_mods_only)
        if self.external_only:
            self.reporter.info(f"Loading external mods only from \"{self.paths.external_mods_dir}\".")
            return [ModEntry(EXTERNAL_MODS, True)]

        mods: List[ModEntry] = []
        migrating = False

        if self.migration.is_due(config):
            migrating = True
            extend_unique(mods, self.migration.import_legacy())
        elif self.paths.mod_list_path.is_file():
            extend_unique(mods, read_mod_list(self.paths.mod_list_path, self.paths.mods_dir))
            self.reporter.debug(f"Read {len(mods)} mod(s) from {self.paths.mod_list_path.name}.")
        else:
            self.reporter.info(f"{self.paths.mod_list_path.name} was not found. Will load all existing mods.")

        if self.paths.mods_dir.is_dir():
            self.reporter.info("Scanning for mods...")
            # Mods missing from a legacy list were never loaded, so they stay disabled after conversion.
            default_enabled = not migrating
            added = extend_unique(mods, (ModEntry(name, default_enabled) for name in scan_mods(self.paths.mods_dir)))
            self.reporter.ok(f"Found {added} new mod(s).", indent=2)

        return mods


def save_mod_list(
    entries: List[ModEntry],
    paths: GamePaths,
    migration: MigrationCoordinator,
    config: VersionedConfig,
) -> bool:
    """Persist ``entries`` and, once the write succeeded, finish a pending legacy migration."""

    written = write_mod_list(paths.mod_list_path, entries)
    if written:
        migration.complete(config)
    return written
