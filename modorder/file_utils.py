from __future__ import annotations

import shutil
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from .logging_utils import log_debug, log_info, log_warn


def remove_tree(path: Path) -> None:
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as exc:
        log_warn(f"Could not remove {path}: {exc}")


@contextmanager
def scratch_directory(path: Path) -> Iterator[Path]:
    """Create ``path`` for the duration of the block and always remove it afterwards."""

    remove_tree(path)
    path.mkdir(parents=True)
    try:
        yield path
    finally:
        remove_tree(path)
        log_debug(f"Removed scratch directory {path}")


def backup_file(source: Path, backup_dir: Path) -> Path:
    if not source.exists():
        raise FileNotFoundError(f"Cannot backup missing file: {source}")
    backup_dir.mkdir(parents=True, exist_ok=True)
    destination = backup_dir / (source.name + ".bak")
    shutil.copy2(source, destination)
    log_info(f"Created backup: {destination}")
    return destination


def restore_backup(
    backup_dir: Path, target_path: Path, no_exist_ok: bool = False
) -> None:
    backup_path = backup_dir / (target_path.name + ".bak")
    if not backup_path.exists():
        if no_exist_ok:
            return
        raise FileNotFoundError(f"Cannot restore missing backup: {backup_path}")
    shutil.copy2(backup_path, target_path)
    log_info(f"Restored backup from {backup_path} to {target_path}")


def run_command(command: Sequence[str], *, cwd: Path | None = None) -> None:
    log_debug(f"Running: {' '.join(command)}")
    completed = subprocess.run(
        list(command),
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )
    if completed.returncode != 0:
        output = (completed.stderr or completed.stdout or "").strip()
        raise subprocess.CalledProcessError(
            completed.returncode, list(command), output=completed.stdout, stderr=output
        )
