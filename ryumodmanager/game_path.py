"""Game directory inspection: which game is installed, and whether its loader files are in place."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Dict, Iterable, Mapping

from .constants import ASI, DINPUT8DLL, VERSIONDLL, WINMMDLL
from .models import Game

GAME_EXECUTABLES: Dict[str, Game] = {
    "yakuza0.exe": Game.YAKUZA0,
    "yakuzakiwami.exe": Game.YAKUZA_KIWAMI,
    "yakuzakiwami2.exe": Game.YAKUZA_KIWAMI2,
    "yakuza3.exe": Game.YAKUZA3,
    "yakuza4.exe": Game.YAKUZA4,
    "yakuza5.exe": Game.YAKUZA5,
    "yakuza6.exe": Game.YAKUZA6,
    "yakuzalikeadragon.exe": Game.YAKUZA_LIKE_A_DRAGON,
    "judgment.exe": Game.JUDGMENT,
    "lostjudgment.exe": Game.LOST_JUDGMENT,
    "eve.exe": Game.EVE,
}

XBOX_PATH_MARKER = "windowsapps"
XBOX_CONFIG_FILE = "MicrosoftGame.config"


def find_game_exe(game_dir: Path) -> Path | None:
    if not game_dir.is_dir():
        return None
    for path in sorted(game_dir.iterdir()):
        if path.is_file() and path.name.lower() in GAME_EXECUTABLES:
            return path
    return None


class GamePath:
    """Default game detector working on the files of a game directory."""

    def __init__(self, game_dir: Path) -> None:
        self.game_dir = game_dir

    def game_exe(self) -> Path | None:
        return find_game_exe(self.game_dir)

    def detect_game(self) -> Game:
        exe = self.game_exe()
        if exe is None:
            return Game.UNSUPPORTED
        return GAME_EXECUTABLES[exe.name.lower()]

    def is_platform_variant(self, exe_path: Path | None) -> bool:
        if exe_path is None:
            return False
        if any(part.lower() == XBOX_PATH_MARKER for part in exe_path.parts):
            return True
        return (exe_path.parent / XBOX_CONFIG_FILE).is_file()


def file_md5(path: Path, chunk_size: int = 1 << 20) -> str:
    digest = hashlib.md5()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


class HashExeValidator:
    """Checks a game executable against known-good MD5 digests.

    Games without any registered digest are accepted as-is.
    """

    def __init__(self, known_hashes: Mapping[Game, Iterable[str]] | None = None) -> None:
        self.known_hashes = {
            game: {digest.lower() for digest in digests}
            for game, digests in (known_hashes or {}).items()
        }

    def validate(self, exe_path: Path | None, game: Game) -> bool:
        if exe_path is None or not exe_path.is_file():
            return False
        expected = self.known_hashes.get(game)
        if not expected:
            return True
        return file_md5(exe_path) in expected


def missing_loader_dll(game_dir: Path) -> bool:
    return not any((game_dir / name).is_file() for name in (DINPUT8DLL, VERSIONDLL, WINMMDLL))


def missing_asi(game_dir: Path) -> bool:
    return not (game_dir / ASI).is_file()
