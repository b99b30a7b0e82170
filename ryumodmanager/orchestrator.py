"""Drives one run: configure, reconcile, patch, generate, validate.

Phases run strictly in order on the calling thread. The only concurrent work
is the update probe, started while configuring and joined with a bounded wait
while validating.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .constants import UPDATE_CHECK_TIMEOUT
from .file_utils import ensure_directory, launch_process, remove_file
from .game_patches import apply_config_overrides, apply_game_patches
from .game_path import missing_asi, missing_loader_dll
from .load_config import VersionedConfig
from .mod_sources import MigrationCoordinator, SourceReconciler, save_mod_list
from .models import (
    Game,
    GamePaths,
    ModEntry,
    RunOptions,
    RunSettings,
    UpdateCheckResult,
    UpdateStatus,
    enabled_mod_names,
)
from .report import export_report, print_load_order
from .reporter import Reporter
from .state_machine import PipelineEvent, PipelineState, PipelineStateMachine
from .tooling import ExeValidator, GameDetector, Generator, Repacker
from .update_probe import UpdateProbe

ABORT_UNSUPPORTED_GAME = "No supported game was found in this directory"
ABORT_NO_MODS = "No mods were found, and .parless paths are disabled"


def resolve_settings(options: RunOptions, config: VersionedConfig) -> RunSettings:
    silent = options.silent
    return RunSettings(
        silent=silent,
        loose_files_enabled=config.get_bool("Overrides", "LooseFilesEnabled", default=False),
        external_mods_only=config.get_bool("RyuModManager", "LoadExternalModsOnly", default=True),
        # No need to check if the console will not be shown anyway.
        check_for_updates=not silent and config.get_bool("RyuModManager", "CheckForUpdates", default=True),
        show_warnings=config.get_bool("RyuModManager", "ShowWarnings", default=True),
        verbose=config.get_bool("RyuModManager", "Verbose", default=False),
    )


@dataclass(slots=True)
class RunOutcome:
    state: PipelineState
    game: Game = Game.UNSUPPORTED
    settings: RunSettings | None = None
    mods: List[ModEntry] = field(default_factory=list)
    mod_list_saved: bool = False
    abort_reason: str | None = None
    warnings: List[str] = field(default_factory=list)
    update_result: UpdateCheckResult | None = None
    history: List[PipelineState] = field(default_factory=list)


class Orchestrator:
    def __init__(
        self,
        paths: GamePaths,
        options: RunOptions,
        *,
        generator: Generator,
        repacker: Repacker,
        detector: GameDetector,
        validator: ExeValidator,
        reporter: Reporter,
        update_probe: UpdateProbe | None = None,
        update_timeout: float = UPDATE_CHECK_TIMEOUT,
        export_path: Path | None = None,
    ) -> None:
        self.paths = paths
        self.options = options
        self.generator = generator
        self.repacker = repacker
        self.detector = detector
        self.validator = validator
        self.reporter = reporter
        self.update_probe = update_probe
        self.update_timeout = update_timeout
        self.export_path = export_path
        self.machine = PipelineStateMachine()

    @property
    def state(self) -> PipelineState:
        return self.machine.state

    def run(self) -> RunOutcome:
        outcome = RunOutcome(state=self.state)

        config, settings, game = self.configure()
        outcome.game = game
        self.machine.transition(PipelineEvent.CONFIGURED)

        mods, outcome.mod_list_saved = self.reconcile(config, settings, game)
        outcome.mods = mods
        outcome.settings = settings
        self.machine.transition(PipelineEvent.RECONCILED)

        self.patch(game)
        self.machine.transition(PipelineEvent.PATCHED)

        abort_reason = self.generate(settings, game, mods)
        if abort_reason is not None:
            outcome.abort_reason = abort_reason
            self.machine.transition(PipelineEvent.ABORT)
            self._finish(settings)
        else:
            self.machine.transition(PipelineEvent.GENERATED)
            outcome.warnings, outcome.update_result = self.validate(settings, game)
            self.machine.transition(PipelineEvent.VALIDATED)

        outcome.state = self.state
        outcome.history = list(self.machine.history)

        if self.options.launch_game:
            self.launch_game()
        return outcome

    # -- phases ------------------------------------------------------------

    def configure(self) -> tuple[VersionedConfig, RunSettings, Game]:
        config_path = self.paths.config_path
        config = VersionedConfig.load(config_path)
        if config.created:
            self.reporter.info(f"{config_path.name} was not found. Created default config.")
        elif config.was_upgraded:
            self.reporter.info(f"{config_path.name} was outdated (version {config.migrated_from}). Updated to the latest version.")

        settings = resolve_settings(self.options, config)
        self.reporter.set_verbose(settings.verbose)

        if settings.check_for_updates and self.update_probe is not None:
            self.update_probe.start()

        game = self.detector.detect_game()
        self.reporter.debug(f"Detected game: {game.value}")
        if game.is_supported and ensure_directory(self.paths.mods_dir):
            self.reporter.info(f"\"{self.paths.mods_dir.name}\" folder was not found. Created empty folder.")
        return config, settings, game

    def reconcile(
        self, config: VersionedConfig, settings: RunSettings, game: Game
    ) -> tuple[List[ModEntry], bool]:
        migration = MigrationCoordinator(self.paths, self.reporter)
        reconciler = SourceReconciler(self.paths, migration, self.reporter)
        mods = reconciler.reconcile(config, settings.external_mods_only)

        saved = False
        if not reconciler.external_only:
            saved = save_mod_list(mods, self.paths, migration, config)
            if saved:
                self.reporter.debug(f"Saved {len(mods)} mod(s) to {self.paths.mod_list_path.name}.")

        platform_variant = self.detector.is_platform_variant(self.detector.game_exe())
        apply_config_overrides(config, game, reconciler.external_only, platform_variant, self.reporter)

        print_load_order(mods, self.reporter)
        if self.export_path is not None:
            export_report(self.export_path, mods, game, settings.loose_files_enabled)
            self.reporter.info(f"Load order report saved to {self.export_path}")
        return mods, saved

    def patch(self, game: Game) -> List[str]:
        return apply_game_patches(self.paths.game_dir, game, self.reporter)

    def generate(self, settings: RunSettings, game: Game, mods: List[ModEntry]) -> str | None:
        """Run the generator. Returns the abort reason when generation cannot happen."""

        if not game.is_supported:
            self.reporter.error(f"Aborting: {ABORT_UNSUPPORTED_GAME}")
            return ABORT_UNSUPPORTED_GAME

        mod_names = enabled_mod_names(mods)
        if not mod_names and not settings.loose_files_enabled:
            self.reporter.error(f"Aborting: {ABORT_NO_MODS}")
            return ABORT_NO_MODS

        # A stale MLO would still be picked up by the game if generation fails.
        if remove_file(self.paths.mlo_path):
            self.reporter.info("Removed old MLO.")
        self.repacker.remove_stale_artifacts()

        self.reporter.info(f"Generating load order for {len(mod_names)} mod(s)...")
        self.generator.generate(mod_names, settings.loose_files_enabled)
        self.reporter.ok("Load order generated.")
        return None

    def validate(self, settings: RunSettings, game: Game) -> tuple[List[str], UpdateCheckResult | None]:
        warnings: List[str] = []
        game_dir = self.paths.game_dir

        if missing_loader_dll(game_dir):
            warnings.append("loader library is missing")
            self.reporter.warn(
                "No ASI loader library (dinput8.dll, version.dll or winmm.dll) was found in this directory. "
                "RyuModManager will NOT function properly without it."
            )
        if missing_asi(game_dir):
            warnings.append("ASI plugin is missing")
            self.reporter.warn("\"YakuzaParless.asi\" is missing from this directory. RyuModManager will NOT function properly without this file.")

        if settings.show_warnings and self.invalid_game_exe(game):
            warnings.append("game executable is unsupported")
            self.reporter.warn("Game version is unsupported. Please use the latest Steam version of the game.")
            self.reporter.warn("RyuModManager will still generate the load order, but the game might CRASH or not function properly.", indent=2)

        update_result = self.join_update_probe()
        self._finish(settings)
        return warnings, update_result

    # -- helpers -----------------------------------------------------------

    def invalid_game_exe(self, game: Game) -> bool:
        exe = self.detector.game_exe()
        if not game.is_supported or exe is None:
            return True
        return self.detector.is_platform_variant(exe) or not self.validator.validate(exe, game)

    def join_update_probe(self) -> UpdateCheckResult | None:
        if self.update_probe is None or not self.update_probe.started:
            return None
        self.reporter.info("Checking for updates...")
        result = self.update_probe.join(self.update_timeout)
        if result.status is UpdateStatus.AVAILABLE and result.release is not None:
            self.reporter.info("New version detected!")
            self.reporter.info(f"Current version: {result.current_version}", indent=2)
            self.reporter.info(f"Latest version: {result.release.tag}", indent=2)
            self.reporter.info(f"Please update by going to {result.release.url}")
        elif result.status is UpdateStatus.UP_TO_DATE:
            self.reporter.ok("Current version is up to date")
        else:
            self.reporter.warn("Unable to check for updates")
            if result.error:
                self.reporter.debug(result.error, indent=2)
        return result

    def _finish(self, settings: RunSettings) -> None:
        if not settings.silent:
            self.reporter.pause("Program finished. Press Enter to exit...")

    def launch_game(self) -> bool:
        exe = self.detector.game_exe()
        if exe is None or not exe.is_file():
            self.reporter.warn("Could not run game because the game executable does not exist.")
            return False
        self.reporter.info(f"Launching \"{exe}\"...")
        launch_process(exe, cwd=exe.parent)
        return True
