from __future__ import annotations

import argparse
from pathlib import Path

from ryumodmanager import ConsoleReporter, GamePaths, Orchestrator, ReleaseClient, RunOptions, UpdateProbe
from ryumodmanager.constants import AUTHOR, VERSION
from ryumodmanager.game_path import GamePath, HashExeValidator
from ryumodmanager.load_config import ConfigError
from ryumodmanager.logging_utils import log_info
from ryumodmanager.tooling import CommandGenerator, ExternalTool, GeneratorError, ParlessRepacker


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Generate the mod load order for a Yakuza/Judgment game. "
            "Run without arguments from the game directory."
        )
    )
    parser.add_argument(
        "-s",
        "--silent",
        action="store_true",
        help="Do not check for updates and do not wait for a key press at the end.",
    )
    parser.add_argument(
        "-r",
        "--run",
        action="store_true",
        help="Run the game after the program finishes.",
    )
    parser.add_argument(
        "--game-dir",
        type=Path,
        default=Path.cwd(),
        help="Directory containing the game executable. Defaults to the current directory.",
    )
    parser.add_argument(
        "--generator",
        type=Path,
        default=None,
        help="Path to the load-order generator executable. Defaults to ModLoadOrder.exe in the game directory.",
    )
    parser.add_argument(
        "--export-path",
        type=Path,
        default=Path(""),
        help="Path to save the load order report Excel file.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    log_info(f"Ryu Mod Manager {VERSION}")
    log_info(f"By {AUTHOR}")

    game_dir = args.game_dir.expanduser().resolve()
    if not game_dir.is_dir():
        raise SystemExit(f"Game directory {game_dir} does not exist.")

    paths = GamePaths(game_dir)
    options = RunOptions(silent=args.silent, launch_game=args.run)
    generator_path = args.generator.expanduser() if args.generator else game_dir / "ModLoadOrder.exe"

    export_path = args.export_path
    if export_path == Path(""):
        export_path = None
    elif export_path.suffix.lower() != ".xlsx":
        export_path = export_path / "load_order_report.xlsx"

    orchestrator = Orchestrator(
        paths,
        options,
        generator=CommandGenerator(ExternalTool(generator_path), cwd=game_dir),
        repacker=ParlessRepacker(paths.repack_dir),
        detector=GamePath(game_dir),
        validator=HashExeValidator(),
        reporter=ConsoleReporter(),
        update_probe=None if options.silent else UpdateProbe(ReleaseClient()),
        export_path=export_path,
    )
    try:
        orchestrator.run()
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc
    except GeneratorError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
