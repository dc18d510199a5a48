from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from openpyxl import Workbook

from .logging_utils import log, log_conflict, log_info, log_ok
from .models import Diagnostic, InvalidEntry, LoadOrderEntry


def print_load_order(entries: Sequence[LoadOrderEntry]) -> None:
    if not entries:
        log_info("Load order is empty.")
        return
    log_info("Load order (highest priority first):")
    for position, entry in enumerate(entries):
        marker = "x" if entry.enabled else " "
        managed = f" <{entry.mod_id}>" if entry.mod_id else ""
        log(f"{position:>3} [{marker}] {entry.name} ({entry.id}, {entry.kind.value}){managed}", "order", indent=2)


def print_validation_report(invalid: Sequence[InvalidEntry] | None) -> None:
    if not invalid:
        log_ok("No duplicate identities found.")
        return
    log_conflict("Duplicate identities detected:")
    for item in invalid:
        log_conflict(item.reason, indent=2)


def print_diagnostics(diagnostics: Sequence[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        log(f"{diagnostic.package}: {diagnostic.error_type}: {diagnostic.message}", "skipped", indent=2)


def _build_order_rows(entries: Sequence[LoadOrderEntry], invalid_keys: set[str]) -> List[List[object]]:
    rows: List[List[object]] = []
    for position, entry in enumerate(entries):
        rows.append(
            [
                position,                       # position
                entry.id,                       # load order id
                entry.name,                     # name
                entry.kind.value,               # kind
                entry.enabled,                  # enabled
                entry.mod_id,                   # managed mod id
                entry.ui_key,                   # ui key
                entry.ui_key in invalid_keys,   # invalid
            ]
        )
    return rows


def export_report(
    output_path: Path,
    entries: Sequence[LoadOrderEntry],
    diagnostics: Sequence[Diagnostic],
    invalid: Sequence[InvalidEntry] | None = None,
) -> None:
    """Write an Excel workbook describing a resolved load order."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    invalid = list(invalid or [])

    workbook = Workbook()

    # Export Load order sheet
    order_sheet = workbook.active
    if not order_sheet:
        order_sheet = workbook.create_sheet("load_order")
    else:
        order_sheet.title = "load_order"
    order_sheet.append(["position", "load order id", "name", "kind", "enabled", "mod id", "ui key", "invalid"])
    for row in _build_order_rows(entries, {item.entry.ui_key for item in invalid}):
        order_sheet.append(row)

    # Export Diagnostics sheet
    diagnostics_sheet = workbook.create_sheet("diagnostics")
    diagnostics_sheet.append(["package", "error type", "message"])
    for diagnostic in diagnostics:
        diagnostics_sheet.append([diagnostic.package, diagnostic.error_type, diagnostic.message])

    # Export Invalid entries sheet
    invalid_sheet = workbook.create_sheet("invalid")
    invalid_sheet.append(["load order id", "name", "ui key", "reason"])
    for item in invalid:
        invalid_sheet.append([item.entry.id, item.entry.name, item.entry.ui_key, item.reason])

    workbook.save(output_path)
    workbook.close()


__all__ = ["print_load_order", "print_validation_report", "print_diagnostics", "export_report"]
