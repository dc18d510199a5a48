from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from .logging_utils import log_debug
from .models import (
    EntryKey,
    InvalidEntry,
    LoadOrderEntry,
    ManagedRegistry,
    Package,
    PackageKind,
    PersistedOrder,
)
from .text_utils import format_names


def resolve_index(position: Optional[int], persisted: PersistedOrder) -> int:
    """Priority index for an entry; anything not saved goes after every saved entry."""

    if position is None:
        return len(persisted)
    return position


def _entry_for_package(package: Package, load_order_id: str, registry: ManagedRegistry | None) -> LoadOrderEntry:
    entry = LoadOrderEntry(
        key=EntryKey.for_package(package.kind, package.name, load_order_id),
        name=package.display_name,
        kind=package.kind,
    )
    if package.kind is PackageKind.FOLDER and registry is not None:
        record = registry.find_enabled(load_order_id)
        if record is not None:
            entry.name = record.display_name
            entry.mod_id = record.mod_id
    return entry


def build(
    packages: Iterable[Package],
    registry: ManagedRegistry | None,
    persisted: PersistedOrder,
) -> List[LoadOrderEntry]:
    """Merge scanned packages, the managed registry and the saved order into one list.

    The saved order decides ``enabled`` and priority, the scan decides which
    entries exist and what they are called. The result is sorted by priority
    index and keeps scan order between equal indices.
    """

    positions: Dict[str, int] = {key: pos for pos, key in enumerate(persisted)}
    entries: List[LoadOrderEntry] = []
    for package in packages:
        load_order_id = package.identity
        if not load_order_id:
            continue
        entry = _entry_for_package(package, load_order_id, registry)
        position = positions.get(entry.id)
        entry.enabled = bool(persisted[entry.id]) if position is not None else False
        entry.index = resolve_index(position, persisted)
        entries.append(entry)

    found = {entry.id for entry in entries}
    stale = [key for key in persisted if key not in found]
    if stale:
        log_debug(f"Saved entries with no package on disk: {format_names(stale)}")

    return sorted(entries, key=lambda item: item.index)


def validate(entries: Sequence[LoadOrderEntry]) -> List[InvalidEntry] | None:
    """Report every identity shared by more than one entry.

    The last entry of each group is reported, the earlier ones stay valid.
    Returns None when all identities are unique.
    """

    grouped: Dict[str, List[LoadOrderEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.id].append(entry)

    invalid: List[InvalidEntry] = []
    for load_order_id, group in grouped.items():
        if len(group) < 2:
            continue
        *others, last = group
        invalid.append(
            InvalidEntry(
                entry=last,
                reason=(
                    f"{last.name} ({load_order_id}) has the same identity as "
                    f"{format_names(item.name for item in others)} - identity must be unique"
                ),
            )
        )
    return invalid or None


def project(entries: Iterable[LoadOrderEntry]) -> PersistedOrder:
    """Turn a displayed load order into the ``{id: enabled}`` mapping that gets saved."""

    order: PersistedOrder = {}
    for entry in entries:
        if not entry.id:
            continue
        if entry.id in order:
            log_debug(f"Repeated identity '{entry.id}' ignored when saving.")
            continue
        order[entry.id] = bool(entry.enabled)
    return order


def _renumber(entries: Iterable[LoadOrderEntry]) -> List[LoadOrderEntry]:
    return [replace(entry, index=pos) for pos, entry in enumerate(entries)]


def _position_of(entries: Sequence[LoadOrderEntry], load_order_id: str) -> int:
    for pos, entry in enumerate(entries):
        if entry.id == load_order_id:
            return pos
    raise KeyError(load_order_id)


def set_enabled(entries: Sequence[LoadOrderEntry], load_order_id: str, enabled: bool) -> List[LoadOrderEntry]:
    _position_of(entries, load_order_id)
    updated = [
        replace(entry, enabled=enabled) if entry.id == load_order_id else entry
        for entry in entries
    ]
    return _renumber(updated)


def move_entry(entries: Sequence[LoadOrderEntry], load_order_id: str, position: int) -> List[LoadOrderEntry]:
    current = _position_of(entries, load_order_id)
    reordered = list(entries)
    entry = reordered.pop(current)
    position = min(max(position, 0), len(reordered))
    reordered.insert(position, entry)
    return _renumber(reordered)


__all__ = [
    "build",
    "validate",
    "project",
    "resolve_index",
    "set_enabled",
    "move_entry",
]
