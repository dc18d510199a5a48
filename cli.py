from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Sequence

from modorder import (
    DuplicateIdentityError,
    deserialize_load_order,
    export_report,
    load_managed_registry,
    load_program_config,
    move_entry,
    print_load_order,
    print_validation_report,
    serialize_load_order,
    set_enabled,
    validate,
)
from modorder.file_utils import restore_backup
from modorder.logging_utils import log_info, log_warn, set_verbose
from modorder.models import LoadOrderEntry
from modorder.report import print_diagnostics


def _parse_move(value: str) -> tuple[str, int]:
    load_order_id, sep, position = value.rpartition(":")
    if not sep or not load_order_id:
        raise argparse.ArgumentTypeError(f"expected ID:POSITION, got '{value}'")
    try:
        return load_order_id, int(position)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"position must be an integer, got '{position}'") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Scan the Mods folder of an Elegos install, merge it with the saved modorder.json "
            "and the managed mod registry, and print the resulting load order. "
            "Optionally edit and save the order."
        )
    )
    parser.add_argument(
        "--game",
        required=True,
        type=Path,
        help="Path to the game folder (the one containing Elegos.exe).",
    )
    parser.add_argument(
        "--config-path",
        type=Path,
        default=Path("config.toml"),
        help="Path to the program configuration TOML file.",
    )
    parser.add_argument(
        "--registry",
        type=Path,
        default=None,
        help="TOML snapshot of the mods managed by the host application.",
    )
    parser.add_argument(
        "--enable",
        action="append",
        default=[],
        metavar="ID",
        help="Enable the entry with this load order id. Can be repeated.",
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="ID",
        help="Disable the entry with this load order id. Can be repeated.",
    )
    parser.add_argument(
        "--move",
        action="append",
        default=[],
        type=_parse_move,
        metavar="ID:POS",
        help="Move the entry to a position (0 is the highest priority). Can be repeated.",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Write the resulting order to modorder.json.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print what would be saved.",
    )
    parser.add_argument(
        "--restore-backup",
        action="store_true",
        default=False,
        help="Restore modorder.json from the backup folder before loading.",
    )
    parser.add_argument(
        "--export-path",
        type=Path,
        default=Path(""),
        help="Path to save the load order report Excel file.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print debug output.",
    )
    return parser


def apply_edits(entries: List[LoadOrderEntry], args: argparse.Namespace) -> List[LoadOrderEntry]:
    try:
        for load_order_id in args.enable:
            entries = set_enabled(entries, load_order_id, True)
        for load_order_id in args.disable:
            entries = set_enabled(entries, load_order_id, False)
        for load_order_id, position in args.move:
            entries = move_entry(entries, load_order_id, position)
    except KeyError as exc:
        raise SystemExit(f"No load order entry with id {exc}.")
    return entries


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)

    game_root = args.game.expanduser().resolve()
    if not game_root.exists():
        raise SystemExit(f"Game path {game_root} does not exist.")

    config = load_program_config(args.config_path.expanduser())
    mods_root = config.mods_root(game_root)
    if not mods_root.exists():
        raise SystemExit(f"Mods folder {mods_root} does not exist. Create it before running.")

    if args.restore_backup:
        if config.backup_dir is None:
            log_warn("No backup_dir configured, nothing to restore.")
        else:
            restore_backup(config.backup_dir, mods_root / config.order_file, no_exist_ok=True)

    registry = load_managed_registry(args.registry.expanduser()) if args.registry else None
    result = deserialize_load_order(mods_root, registry, config=config)
    if result.diagnostics:
        log_warn("Packages skipped:")
        print_diagnostics(result.diagnostics)

    entries = apply_edits(result.entries, args)
    print_load_order(entries)
    invalid = validate(entries)
    print_validation_report(invalid)

    export_path = args.export_path
    if not export_path == Path(""):
        if export_path.suffix.lower() != ".xlsx":
            export_path = export_path / "load_order_report.xlsx"
        export_report(export_path, entries, result.diagnostics, invalid)
        log_info(f"Report saved to {export_path}")

    if args.save or args.dry_run:
        try:
            serialize_load_order(mods_root, entries, config=config, dry_run=args.dry_run)
        except DuplicateIdentityError as exc:
            raise SystemExit(f"Load order not saved. {exc}")


if __name__ == "__main__":
    main()
