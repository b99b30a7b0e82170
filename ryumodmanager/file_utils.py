from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Sequence


def ensure_directory(path: Path) -> bool:
    """Create ``path`` if needed. Returns True when the directory was created."""

    if path.is_dir():
        return False
    path.mkdir(parents=True, exist_ok=True)
    return True


def remove_file(path: Path) -> bool:
    if not path.is_file():
        return False
    path.unlink()
    return True


def remove_tree(path: Path) -> bool:
    if not path.is_dir():
        return False
    shutil.rmtree(path)
    return True


def rename_file(source: Path, destination: Path) -> None:
    if destination.exists():
        raise FileExistsError(f"Cannot rename {source}: {destination} already exists")
    source.rename(destination)


def run_command(
    command: Sequence[str], *, cwd: Path | None = None, dry_run: bool = False
) -> int:
    if dry_run:
        return 0
    completed = subprocess.run(list(command), cwd=cwd, check=False)
    return completed.returncode


def launch_process(executable: Path, *, cwd: Path | None = None) -> subprocess.Popen:
    return subprocess.Popen([str(executable)], cwd=cwd)
