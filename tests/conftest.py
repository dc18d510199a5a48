from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Any, Dict

import pytest

from modorder.logging_utils import set_verbose


def write_folder_mod(mods_root: Path, folder: str, manifest: Dict[str, Any] | str | None) -> Path:
    package = mods_root / folder
    package.mkdir(parents=True, exist_ok=True)
    if manifest is not None:
        text = manifest if isinstance(manifest, str) else json.dumps(manifest)
        (package / "modinfo.json").write_text(text, encoding="utf-8")
    (package / "content.txt").write_text("data", encoding="utf-8")
    return package


def write_zip_mod(
    mods_root: Path,
    file_name: str,
    manifest: Dict[str, Any] | str | None,
    *,
    prefix: str = "",
) -> Path:
    mods_root.mkdir(parents=True, exist_ok=True)
    archive = mods_root / file_name
    with zipfile.ZipFile(archive, "w") as bundle:
        if manifest is not None:
            text = manifest if isinstance(manifest, str) else json.dumps(manifest)
            bundle.writestr(f"{prefix}modinfo.json", text)
        bundle.writestr(f"{prefix}content.txt", "data")
    return archive


def write_broken_zip(mods_root: Path, file_name: str) -> Path:
    mods_root.mkdir(parents=True, exist_ok=True)
    archive = mods_root / file_name
    archive.write_bytes(b"this is not a zip archive")
    return archive


@pytest.fixture
def mods_root(tmp_path: Path) -> Path:
    root = tmp_path / "Mods"
    root.mkdir()
    return root


@pytest.fixture(autouse=True)
def quiet_logging():
    set_verbose(False)
    yield
    set_verbose(False)
