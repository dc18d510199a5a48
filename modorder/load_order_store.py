from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

from .errors import UnexpectedIoError
from .file_utils import backup_file
from .engine import project
from .logging_utils import log_debug, log_info, log_warn
from .models import Diagnostic, LoadOrderEntry, PersistedOrder

ORDER_FILE = "modorder.json"


class LoadOrderStore:
    """Reads and writes the ``modorder.json`` file that lives in the mods directory."""

    def __init__(self, mods_root: Path, file_name: str = ORDER_FILE, backup_dir: Path | None = None) -> None:
        self.path = mods_root / file_name
        self.backup_dir = backup_dir
        self.diagnostics: List[Diagnostic] = []

    def read(self) -> PersistedOrder:
        self.diagnostics = []
        try:
            raw_text = self.path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            log_info(f"No saved load order at {self.path}, starting fresh.")
            return {}
        except OSError as exc:
            return self._degrade(UnexpectedIoError(f"Could not read {self.path}: {exc}"))
        except UnicodeDecodeError as exc:
            return self._degrade(UnexpectedIoError(f"{self.path} is not valid UTF-8 ({exc.reason})"))

        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            return self._degrade(UnexpectedIoError(f"Invalid JSON in {self.path}: {exc.msg} (line {exc.lineno})"))

        if not isinstance(data, dict):
            return self._degrade(UnexpectedIoError(f"{self.path} must contain a JSON object"))

        order: PersistedOrder = {str(key): bool(value) for key, value in data.items()}
        log_debug(f"Loaded {len(order)} saved entries from {self.path}")
        return order

    def write(self, entries: Iterable[LoadOrderEntry]) -> PersistedOrder:
        order = project(entries)
        if self.backup_dir is not None and self.path.exists():
            backup_file(self.path, self.backup_dir)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8", newline="\n") as writer:
            json.dump(order, writer, indent=2, ensure_ascii=False)
            writer.write("\n")
        log_info(f"Saved {len(order)} entries to {self.path}")
        return order

    def _degrade(self, error: UnexpectedIoError) -> PersistedOrder:
        log_warn(f"Failed to load saved load order: {error}")
        self.diagnostics.append(Diagnostic.from_error(self.path.name, error))
        return {}


__all__ = ["ORDER_FILE", "LoadOrderStore"]
