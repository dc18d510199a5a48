"""Core package for the mod load order resolver."""

from .engine import build, move_entry, project, set_enabled, validate
from .errors import (
    ArchiveExtractionError,
    DuplicateIdentityError,
    ManifestParseError,
    ModOrderError,
    UnexpectedIoError,
)
from .load_config import ProgramConfig, load_managed_registry, load_program_config
from .load_order import deserialize_load_order, serialize_load_order
from .load_order_store import LoadOrderStore
from .manifest import parse_manifest, read_manifest
from .models import (
    Diagnostic,
    EntryKey,
    InvalidEntry,
    LoadOrderEntry,
    LoadOrderResult,
    ManagedModRecord,
    ManagedRegistry,
    Manifest,
    Package,
    PackageKind,
    ScanResult,
)
from .report import export_report, print_load_order, print_validation_report
from .scanner import discover_packages, scan_packages
from .tooling import ExternalTool, ToolConfig, extract_zip

__all__ = [
    "Diagnostic",
    "EntryKey",
    "InvalidEntry",
    "LoadOrderEntry",
    "LoadOrderResult",
    "ManagedModRecord",
    "ManagedRegistry",
    "Manifest",
    "Package",
    "PackageKind",
    "ScanResult",
    "ModOrderError",
    "ManifestParseError",
    "ArchiveExtractionError",
    "UnexpectedIoError",
    "DuplicateIdentityError",
    "ProgramConfig",
    "load_program_config",
    "load_managed_registry",
    "parse_manifest",
    "read_manifest",
    "discover_packages",
    "scan_packages",
    "LoadOrderStore",
    "build",
    "validate",
    "project",
    "set_enabled",
    "move_entry",
    "deserialize_load_order",
    "serialize_load_order",
    "print_load_order",
    "print_validation_report",
    "export_report",
    "ExternalTool",
    "ToolConfig",
    "extract_zip",
]
