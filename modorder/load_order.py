from __future__ import annotations

from pathlib import Path
from typing import Sequence

from . import engine
from .errors import DuplicateIdentityError
from .load_config import ProgramConfig
from .load_order_store import LoadOrderStore
from .logging_utils import log_info, log_warn
from .models import LoadOrderEntry, LoadOrderResult, ManagedRegistry, PersistedOrder
from .scanner import scan_packages
from .tooling import Extractor


def _store_for(mods_root: Path, config: ProgramConfig) -> LoadOrderStore:
    return LoadOrderStore(mods_root, file_name=config.order_file, backup_dir=config.backup_dir)


def deserialize_load_order(
    mods_root: Path,
    registry: ManagedRegistry | None = None,
    *,
    extractor: Extractor | None = None,
    config: ProgramConfig | None = None,
) -> LoadOrderResult:
    """Scan the mods directory and merge it with the saved order and the registry."""

    config = config or ProgramConfig()
    scan = scan_packages(
        mods_root,
        extractor or config.tools.extractor(),
        scratch_dir_name=config.scratch_dir,
        ignore=config.ignore_mods,
        max_workers=config.max_workers,
    )

    store = _store_for(mods_root, config)
    persisted = store.read()

    entries = engine.build(scan.packages, registry, persisted)
    diagnostics = [*scan.diagnostics, *store.diagnostics]
    if diagnostics:
        log_warn(f"{len(diagnostics)} problem(s) while loading the load order.")
    result = LoadOrderResult(entries=entries, diagnostics=diagnostics, persisted=persisted)
    log_info(f"Resolved {len(entries)} load order entries ({result.enabled_count} enabled).")
    return result


def serialize_load_order(
    mods_root: Path,
    entries: Sequence[LoadOrderEntry],
    *,
    config: ProgramConfig | None = None,
    dry_run: bool = False,
) -> PersistedOrder:
    """Validate ``entries`` and write them as the new saved order.

    Raises DuplicateIdentityError without touching the file when two entries
    share an identity.
    """

    invalid = engine.validate(entries)
    if invalid:
        raise DuplicateIdentityError(invalid)

    config = config or ProgramConfig()
    if dry_run:
        order = engine.project(entries)
        log_info(f"Dry run active. Would save {len(order)} entries to {mods_root / config.order_file}.")
        return order
    return _store_for(mods_root, config).write(entries)


__all__ = ["deserialize_load_order", "serialize_load_order"]
