from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import toml

from .logging_utils import log_warn
from .models import ManagedModRecord, ManagedRegistry
from .scanner import DEFAULT_SCRATCH_DIR
from .load_order_store import ORDER_FILE
from .tooling import ExternalTool, ToolConfig


@dataclass(slots=True)
class ProgramConfig:
    mods_dir: Path = Path("Mods")
    order_file: str = ORDER_FILE
    scratch_dir: str = DEFAULT_SCRATCH_DIR
    ignore_mods: List[str] = field(default_factory=list)
    max_workers: int = 1
    backup_dir: Path | None = None
    tools: ToolConfig = field(default_factory=ToolConfig)

    def mods_root(self, game_root: Path) -> Path:
        return game_root / self.mods_dir


def _read_toml(path: Path, label: str) -> Dict[str, Any]:
    raw_text = path.read_text(encoding="utf-8")
    try:
        return toml.loads(raw_text)
    except toml.TomlDecodeError as exc:
        raise ValueError(f"Invalid TOML in {label}: {path}") from exc


def load_program_config(config_path: Path) -> ProgramConfig:
    """Load program settings from a TOML file.

    Every key is optional::

        mods_dir = "Mods"
        order_file = "modorder.json"
        scratch_dir = "temp"
        ignore_mods = ["Broken Mod"]
        max_workers = 4
        backup_dir = "order_backup"

        [unpack_tool]
        executable = "7z"
        args = ["x", "-y"]
    """

    config = ProgramConfig()
    if not config_path.exists():
        log_warn(f"Config file {config_path} not found. Using defaults.")
        return config

    raw = _read_toml(config_path, "config file")

    if "mods_dir" in raw:
        config.mods_dir = Path(raw["mods_dir"])
    if "order_file" in raw:
        config.order_file = str(raw["order_file"])
    if "scratch_dir" in raw:
        config.scratch_dir = str(raw["scratch_dir"])
    config.ignore_mods = [str(name) for name in raw.get("ignore_mods", [])]
    config.max_workers = max(int(raw.get("max_workers", 1)), 1)
    if raw.get("backup_dir"):
        backup_dir = Path(raw["backup_dir"])
        config.backup_dir = backup_dir if backup_dir.is_absolute() else config_path.parent / backup_dir

    tool = raw.get("unpack_tool")
    if tool and tool.get("executable"):
        config.tools = ToolConfig(
            unpack_tool=ExternalTool(
                executable=Path(tool["executable"]),
                args=tuple(str(arg) for arg in tool.get("args", [])),
            )
        )
    return config


def load_managed_registry(registry_path: Path) -> ManagedRegistry:
    """Load a snapshot of the mods the host manages.

    ::

        game = "elegos"
        profile = "default"

        [mods.elegos-better-ui-12]
        loadOrderId = "betterui"
        name = "Better UI"
        enabled = true
    """

    if not registry_path.exists():
        log_warn(f"Registry snapshot {registry_path} not found. Proceeding without managed mods.")
        return ManagedRegistry()

    raw = _read_toml(registry_path, "registry snapshot")
    records: List[ManagedModRecord] = []
    for mod_id, attributes in raw.get("mods", {}).items():
        if not isinstance(attributes, dict):
            log_warn(f"Registry entry '{mod_id}' is not a table, skipped.")
            continue
        load_order_id = attributes.get("loadOrderId")
        records.append(
            ManagedModRecord(
                mod_id=str(mod_id),
                load_order_id=str(load_order_id) if load_order_id else None,
                name=attributes.get("name"),
                enabled=bool(attributes.get("enabled", False)),
            )
        )
    return ManagedRegistry(game_id=raw.get("game"), profile=raw.get("profile"), records=records)


__all__ = ["ProgramConfig", "load_program_config", "load_managed_registry"]
