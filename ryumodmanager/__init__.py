"""Core package for the Ryu Mod Manager command line tool."""

from .load_config import ConfigError, VersionedConfig
from .mod_sources import MigrationCoordinator, SourceReconciler, save_mod_list, scan_mods
from .models import GamePaths, Game, ModEntry, RunOptions, RunSettings, UpdateCheckResult, UpdateStatus
from .modlist import (
    parse_legacy_load_order,
    parse_mod_list,
    read_legacy_load_order,
    read_mod_list,
    serialize_mod_list,
    write_mod_list,
)
from .orchestrator import Orchestrator, RunOutcome
from .report import export_report, print_load_order
from .reporter import ConsoleReporter, Reporter
from .state_machine import PipelineEvent, PipelineState, PipelineStateMachine
from .update_probe import ReleaseClient, UpdateProbe, check_for_updates

__all__ = [
    "ConfigError",
    "VersionedConfig",
    "MigrationCoordinator",
    "SourceReconciler",
    "save_mod_list",
    "scan_mods",
    "GamePaths",
    "Game",
    "ModEntry",
    "RunOptions",
    "RunSettings",
    "UpdateCheckResult",
    "UpdateStatus",
    "parse_legacy_load_order",
    "parse_mod_list",
    "read_legacy_load_order",
    "read_mod_list",
    "serialize_mod_list",
    "write_mod_list",
    "Orchestrator",
    "RunOutcome",
    "export_report",
    "print_load_order",
    "ConsoleReporter",
    "Reporter",
    "PipelineEvent",
    "PipelineState",
    "PipelineStateMachine",
    "ReleaseClient",
    "UpdateProbe",
    "check_for_updates",
]
