"""Boundaries to the collaborators the pipeline drives but does not implement.

The protocols are what the orchestrator depends on; the classes below them
are the default implementations wired by the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from .file_utils import remove_tree, run_command
from .models import Game, ReleaseInfo


class GeneratorError(RuntimeError):
    """Raised when the load-order generator cannot be run or fails."""


@runtime_checkable
class Generator(Protocol):
    def generate(self, mod_names: Sequence[str], loose_files_enabled: bool) -> None:
        """Produce the load-order artifact from the enabled mods, first loaded first."""


@runtime_checkable
class Repacker(Protocol):
    def remove_stale_artifacts(self) -> None:
        """Delete archives repacked by a previous run."""


@runtime_checkable
class GameDetector(Protocol):
    def detect_game(self) -> Game:
        """Return the game found in the game directory."""

    def game_exe(self) -> Path | None:
        """Return the game executable, if any."""

    def is_platform_variant(self, exe_path: Path | None) -> bool:
        """Return True for non-PC-store builds that need features turned off."""


@runtime_checkable
class ExeValidator(Protocol):
    def validate(self, exe_path: Path | None, game: Game) -> bool:
        """Return True if the executable is a known, unmodified build."""


@runtime_checkable
class ReleaseLookup(Protocol):
    def latest_release(self, owner: str, repo: str) -> ReleaseInfo | None:
        """Return the latest published release; may raise on network errors."""


@dataclass(slots=True)
class ExternalTool:
    executable: Path
    args: Sequence[str] = ()

    def run(self, extra_args: Sequence[str] = (), *, cwd: Path | None = None, dry_run: bool = False) -> int:
        command = [str(self.executable), *self.args, *extra_args]
        return run_command(command, cwd=cwd, dry_run=dry_run)


@dataclass(slots=True)
class CommandGenerator:
    """Runs an external load-order tool as ``<tool> [--loose-files] <mod> ...``."""

    tool: ExternalTool
    cwd: Path | None = None
    loose_files_flag: str = "--loose-files"

    def generate(self, mod_names: Sequence[str], loose_files_enabled: bool) -> None:
        if not self.tool.executable.is_file():
            raise GeneratorError(f"Load-order generator {self.tool.executable} does not exist.")
        extra_args = [self.loose_files_flag] if loose_files_enabled else []
        extra_args.extend(mod_names)
        return_code = self.tool.run(extra_args, cwd=self.cwd)
        if return_code != 0:
            raise GeneratorError(f"Load-order generator exited with code {return_code}.")


@dataclass(slots=True)
class ParlessRepacker:
    """Owns the directory where repacked archives are written."""

    repack_dir: Path

    def remove_stale_artifacts(self) -> None:
        remove_tree(self.repack_dir)
