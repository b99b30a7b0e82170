import configparser
import threading

from ryumodmanager.constants import ASI, EXTERNAL_MODS, VERSIONDLL
from ryumodmanager.mod_sources import MARKER_KEY, MARKER_SECTION
from ryumodmanager.models import Game, ReleaseInfo, RunOptions, UpdateStatus
from ryumodmanager.orchestrator import ABORT_NO_MODS, ABORT_UNSUPPORTED_GAME, Orchestrator
from ryumodmanager.state_machine import PipelineState
from ryumodmanager.update_probe import UpdateProbe

from fakes import FakeDetector, FakeGenerator, FakeLookup, FakeRepacker, FakeValidator, RecordingReporter, make_mods


def _write_config(paths, **overrides):
    data = {
        "Parless": {"IniVersion": 4},
        "Overrides": {"LooseFilesEnabled": 0, "RebuildMLO": 1},
        "RyuModManager": {"Verbose": 0, "CheckForUpdates": 0, "ShowWarnings": 1, "LoadExternalModsOnly": 0},
    }
    for key, value in overrides.items():
        section, name = key.split("__")
        data[section][name] = value
    lines = []
    for section, values in data.items():
        lines.append(f"[{section}]")
        lines.extend(f"{name}={value}" for name, value in values.items())
        lines.append("")
    paths.config_path.write_text("\n".join(lines), encoding="utf-8")


def _read_config(paths):
    parser = configparser.ConfigParser()
    parser.optionxform = str
    parser.read(paths.config_path, encoding="utf-8")
    return parser


def _install_loader(paths):
    (paths.game_dir / VERSIONDLL).write_bytes(b"dll")
    (paths.game_dir / ASI).write_bytes(b"asi")


def _orchestrator(paths, reporter, *, silent=True, game=Game.YAKUZA0, probe=None, timeout=5.0, valid=True):
    exe = paths.game_dir / "Yakuza0.exe"
    exe.write_bytes(b"exe")
    generator = FakeGenerator()
    repacker = FakeRepacker()
    orchestrator = Orchestrator(
        paths,
        RunOptions(silent=silent),
        generator=generator,
        repacker=repacker,
        detector=FakeDetector(game=game, exe=exe),
        validator=FakeValidator(valid),
        reporter=reporter,
        update_probe=probe,
        update_timeout=timeout,
    )
    return orchestrator, generator, repacker


def test_full_run_generates_enabled_mods_in_order(paths, reporter):
    _write_config(paths)
    _install_loader(paths)
    make_mods(paths.mods_dir, "ModA", "ModB", "ModC")
    paths.mod_list_path.write_text("<ModC|>ModB", encoding="utf-8")
    paths.mlo_path.write_bytes(b"stale")
    orchestrator, generator, repacker = _orchestrator(paths, reporter)

    outcome = orchestrator.run()

    assert outcome.state is PipelineState.DONE
    assert outcome.history == [
        PipelineState.CONFIGURING,
        PipelineState.RECONCILING,
        PipelineState.PATCHING,
        PipelineState.GENERATING,
        PipelineState.VALIDATING,
        PipelineState.DONE,
    ]
    assert generator.calls == [(["ModC", "ModA"], False)]
    assert repacker.cleanups == 1
    assert not paths.mlo_path.exists()
    assert paths.mod_list_path.read_text(encoding="utf-8") == "<ModC|>ModB|<ModA"
    assert outcome.warnings == []
    assert reporter.pauses == []


def test_unsupported_game_aborts(paths, reporter):
    _write_config(paths)
    make_mods(paths.mods_dir, "ModA")
    orchestrator, generator, repacker = _orchestrator(paths, reporter, silent=False, game=Game.UNSUPPORTED)

    outcome = orchestrator.run()

    assert outcome.state is PipelineState.ABORTED
    assert outcome.abort_reason == ABORT_UNSUPPORTED_GAME
    assert generator.calls == []
    assert repacker.cleanups == 0
    assert PipelineState.VALIDATING not in outcome.history
    assert len(reporter.pauses) == 1


def test_no_enabled_mods_without_loose_files_aborts(paths, reporter):
    _write_config(paths)
    make_mods(paths.mods_dir, "ModA")
    paths.mod_list_path.write_text(">ModA", encoding="utf-8")
    orchestrator, generator, _ = _orchestrator(paths, reporter)

    outcome = orchestrator.run()

    assert outcome.state is PipelineState.ABORTED
    assert outcome.abort_reason == ABORT_NO_MODS
    assert generator.calls == []


def test_loose_files_generate_without_mods(paths, reporter):
    _write_config(paths, Overrides__LooseFilesEnabled=1)
    _install_loader(paths)
    orchestrator, generator, _ = _orchestrator(paths, reporter)

    outcome = orchestrator.run()

    assert outcome.state is PipelineState.DONE
    assert generator.calls == [([], True)]
    assert not outcome.mod_list_saved
    assert not paths.mod_list_path.exists()


def test_external_only_run_passes_single_entry_and_keeps_list(paths, reporter):
    _write_config(paths, RyuModManager__LoadExternalModsOnly=1)
    _install_loader(paths)
    make_mods(paths.mods_dir, "ModA", EXTERNAL_MODS)
    paths.mod_list_path.write_text(">ModA", encoding="utf-8")
    orchestrator, generator, _ = _orchestrator(paths, reporter)

    outcome = orchestrator.run()

    assert generator.calls == [([EXTERNAL_MODS], False)]
    assert paths.mod_list_path.read_text(encoding="utf-8") == ">ModA"
    assert not outcome.mod_list_saved


def test_judgment_external_only_disables_rebuild_mlo(paths, reporter):
    _write_config(paths, RyuModManager__LoadExternalModsOnly=1)
    _install_loader(paths)
    make_mods(paths.mods_dir, EXTERNAL_MODS)
    orchestrator, _, _ = _orchestrator(paths, reporter, game=Game.JUDGMENT)

    outcome = orchestrator.run()

    assert outcome.state is PipelineState.DONE
    assert _read_config(paths).get("Overrides", "RebuildMLO") == "0"


def test_migration_happens_once_across_runs(paths, reporter):
    _write_config(paths)
    _install_loader(paths)
    make_mods(paths.mods_dir, "A", "B", "C")
    paths.legacy_list_path.write_text("A\nB\n", encoding="utf-8")

    first, generator, _ = _orchestrator(paths, reporter)
    first.run()

    assert generator.calls == [(["A", "B"], False)]
    assert paths.mod_list_path.read_text(encoding="utf-8") == "<A|<B|>C"
    assert not paths.legacy_list_path.exists()
    assert _read_config(paths).get(MARKER_SECTION, MARKER_KEY) == "1"

    second_reporter = RecordingReporter()
    second, generator, _ = _orchestrator(paths, second_reporter)
    outcome = second.run()

    assert [(m.name, m.enabled) for m in outcome.mods] == [("A", True), ("B", True), ("C", False)]
    assert generator.calls == [(["A", "B"], False)]
    assert any("Old format" in line for line in reporter.lines("info"))
    assert not any("Old format" in line for line in second_reporter.lines("info"))


def test_missing_config_is_created_and_run_continues(paths, reporter):
    _install_loader(paths)
    make_mods(paths.mods_dir, "ModA")
    orchestrator, generator, _ = _orchestrator(paths, reporter)

    outcome = orchestrator.run()

    assert paths.config_path.exists()
    assert outcome.state is PipelineState.DONE
    assert generator.calls == [(["ModA"], False)]


def test_commented_ini_from_older_release_runs_to_completion(paths, reporter):
    paths.config_path.write_text(
        "[Parless]\n"
        "; Parless ini version, do not change\n"
        "IniVersion=3\n"
        "\n"
        "[Overrides]\n"
        "; Rebuild the MLO\n"
        "RebuildMLO=0\n"
        "\n"
        "[RyuModManager]\n"
        "LoadExternalModsOnly=0\n"
        "CheckForUpdates=0\n",
        encoding="utf-8",
    )
    _install_loader(paths)
    make_mods(paths.mods_dir, "ModA")
    orchestrator, generator, _ = _orchestrator(paths, reporter)

    outcome = orchestrator.run()

    assert outcome.state is PipelineState.DONE
    assert generator.calls == [(["ModA"], False)]
    assert any("was outdated (version 3)" in line for line in reporter.lines("info"))
    assert _read_config(paths).get("Overrides", "RebuildMLO") == "1"


def test_settings_follow_config_flags(paths, reporter):
    _write_config(paths, RyuModManager__Verbose=1, RyuModManager__ShowWarnings=0, Overrides__LooseFilesEnabled=1)
    _install_loader(paths)
    orchestrator, _, _ = _orchestrator(paths, reporter)

    outcome = orchestrator.run()

    settings = outcome.settings
    assert settings.verbose is True
    assert settings.show_warnings is False
    assert settings.loose_files_enabled is True
    assert settings.external_mods_only is False
    assert settings.check_for_updates is False
    assert reporter.verbose is True


def test_validation_warnings_do_not_stop_the_run(paths, reporter):
    _write_config(paths)
    make_mods(paths.mods_dir, "ModA")
    orchestrator, _, _ = _orchestrator(paths, reporter, valid=False)

    outcome = orchestrator.run()

    assert outcome.state is PipelineState.DONE
    assert outcome.warnings == [
        "loader library is missing",
        "ASI plugin is missing",
        "game executable is unsupported",
    ]


def test_exe_warning_respects_show_warnings(paths, reporter):
    _write_config(paths, RyuModManager__ShowWarnings=0)
    _install_loader(paths)
    make_mods(paths.mods_dir, "ModA")
    orchestrator, _, _ = _orchestrator(paths, reporter, valid=False)

    assert orchestrator.run().warnings == []


def test_update_probe_result_is_reported(paths, reporter):
    _write_config(paths, RyuModManager__CheckForUpdates=1)
    _install_loader(paths)
    make_mods(paths.mods_dir, "ModA")
    release = ReleaseInfo(tag="v9.9.9", name="Ryu Mod Manager v9.9.9", url="https://example.invalid")
    probe = UpdateProbe(FakeLookup(release=release), current_version="v3.2.2")
    orchestrator, _, _ = _orchestrator(paths, reporter, silent=False, probe=probe)

    outcome = orchestrator.run()

    assert outcome.update_result.status is UpdateStatus.AVAILABLE
    assert "New version detected!" in reporter.lines("info")
    assert len(reporter.pauses) == 1


def test_slow_update_probe_is_abandoned(paths, reporter):
    _write_config(paths, RyuModManager__CheckForUpdates=1)
    _install_loader(paths)
    make_mods(paths.mods_dir, "ModA")
    gate = threading.Event()
    probe = UpdateProbe(FakeLookup(gate=gate), current_version="v3.2.2")
    orchestrator, _, _ = _orchestrator(paths, reporter, silent=False, probe=probe, timeout=0.05)

    outcome = orchestrator.run()
    gate.set()

    assert outcome.state is PipelineState.DONE
    assert outcome.update_result.status is UpdateStatus.FAILED
    assert "Unable to check for updates" in reporter.lines("warn")


def test_silent_run_never_starts_probe(paths, reporter):
    _write_config(paths, RyuModManager__CheckForUpdates=1)
    _install_loader(paths)
    make_mods(paths.mods_dir, "ModA")
    lookup = FakeLookup()
    probe = UpdateProbe(lookup, current_version="v3.2.2")
    orchestrator, _, _ = _orchestrator(paths, reporter, silent=True, probe=probe)

    outcome = orchestrator.run()

    assert not probe.started
    assert outcome.update_result is None
    assert lookup.calls == 0
    assert outcome.settings.check_for_updates is False
