from pathlib import Path

import pytest

from ryumodmanager.models import GamePaths

from fakes import RecordingReporter


@pytest.fixture()
def paths(tmp_path: Path) -> GamePaths:
    game_paths = GamePaths(tmp_path)
    game_paths.mods_dir.mkdir()
    return game_paths


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()
