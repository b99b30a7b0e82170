from __future__ import annotations

from pathlib import Path
from typing import List

from openpyxl import Workbook

from .models import Game, ModEntry
from .reporter import Reporter


def print_load_order(entries: List[ModEntry], reporter: Reporter) -> None:
    if not entries:
        reporter.debug("Load order is empty.")
        return
    reporter.debug("Load order (first entry loads first):")
    for priority, entry in enumerate(entries):
        state = "enabled" if entry.enabled else "disabled"
        reporter.debug(f"{priority}: {entry.name} ({state})", indent=2)


def export_report(
    output_path: Path,
    entries: List[ModEntry],
    game: Game,
    loose_files_enabled: bool,
) -> None:
    """Write an Excel report of the reconciled load order."""

    output_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()

    # Export load order sheet
    order_sheet = workbook.active
    if not order_sheet:
        order_sheet = workbook.create_sheet("load_order")
    else:
        order_sheet.title = "load_order"
    order_sheet.append(["priority", "mod name", "enabled"])
    for priority, entry in enumerate(entries):
        order_sheet.append([priority, entry.name, "yes" if entry.enabled else "no"])

    # Export summary sheet
    enabled_count = sum(1 for entry in entries if entry.enabled)
    summary_sheet = workbook.create_sheet("summary")
    summary_sheet.append(["game", game.value])
    summary_sheet.append(["total mods", len(entries)])
    summary_sheet.append(["enabled mods", enabled_count])
    summary_sheet.append(["disabled mods", len(entries) - enabled_count])
    summary_sheet.append(["loose files", "yes" if loose_files_enabled else "no"])

    workbook.save(output_path)
    workbook.close()


__all__ = ["print_load_order", "export_report"]
