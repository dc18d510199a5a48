from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class PackageKind(str, Enum):
    FOLDER = "folder"
    ARCHIVE = "zip"


# Insertion order is priority, index 0 wins.
PersistedOrder = Dict[str, bool]


@dataclass(slots=True)
class Manifest:
    id: str | None = None
    name: str | None = None
    description: str | None = None
    author: str | None = None
    mod_version: str | None = None
    game_version: str | None = None
    tags: str | None = None

    @property
    def has_identity(self) -> bool:
        return bool(self.id)


@dataclass(slots=True)
class Package:
    path: Path
    kind: PackageKind
    manifest: Manifest | None = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def identity(self) -> str | None:
        if self.manifest is None or not self.manifest.has_identity:
            return None
        return self.manifest.id

    @property
    def display_name(self) -> str:
        if self.manifest is not None and self.manifest.name:
            return self.manifest.name
        return self.name


@dataclass(frozen=True, slots=True)
class EntryKey:
    """Identity of a load order entry.

    ``ui_key`` tells folder and archive packages apart for presentation,
    ``load_order_id`` is the manifest ID used for priority and persistence.
    """

    ui_key: str
    load_order_id: str

    @classmethod
    def for_package(cls, kind: PackageKind, package_name: str, load_order_id: str) -> "EntryKey":
        return cls(ui_key=f"{kind.value}-{package_name.lower()}", load_order_id=load_order_id)


@dataclass(slots=True)
class ManagedModRecord:
    mod_id: str
    load_order_id: str | None
    name: str | None = None
    enabled: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.mod_id


@dataclass(slots=True)
class ManagedRegistry:
    game_id: str | None = None
    profile: str | None = None
    records: List[ManagedModRecord] = field(default_factory=list)

    def find_enabled(self, load_order_id: str) -> Optional[ManagedModRecord]:
        for record in self.records:
            if record.load_order_id == load_order_id and record.enabled:
                return record
        return None


@dataclass(slots=True)
class LoadOrderEntry:
    key: EntryKey
    name: str
    kind: PackageKind
    enabled: bool = False
    index: int = 0
    mod_id: str | None = None

    @property
    def id(self) -> str:
        return self.key.load_order_id

    @property
    def ui_key(self) -> str:
        return self.key.ui_key


@dataclass(slots=True)
class InvalidEntry:
    entry: LoadOrderEntry
    reason: str


@dataclass(slots=True)
class Diagnostic:
    package: str
    error_type: str
    message: str

    @classmethod
    def from_error(cls, package: str, exc: BaseException) -> "Diagnostic":
        return cls(package=package, error_type=type(exc).__name__, message=str(exc))


@dataclass(slots=True)
class ScanResult:
    packages: List[Package] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def identities(self) -> List[str]:
        return [package.identity for package in self.packages if package.identity]


@dataclass(slots=True)
class LoadOrderResult:
    entries: List[LoadOrderEntry] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    persisted: PersistedOrder = field(default_factory=dict)

    @property
    def enabled_count(self) -> int:
        return sum(1 for entry in self.entries if entry.enabled)
