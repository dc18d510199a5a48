from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .errors import ManifestParseError
from .models import Manifest

MANIFEST_FILE = "modinfo.json"

FIELD_MAP = {
    "ID": "id",
    "Name": "name",
    "Description": "description",
    "Author": "author",
    "ModVersion": "mod_version",
    "GameVersion": "game_version",
    "Tags": "tags",
}


def _coerce(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)


def parse_manifest(raw: str | bytes, source: Path | str | None = None) -> Manifest:
    """Parse the contents of a ``modinfo.json`` file.

    Every field is optional. Anything that is not a JSON object raises
    ``ManifestParseError``.
    """

    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ManifestParseError(f"manifest is not valid UTF-8 ({exc.reason})", source) from exc
    raw = raw.lstrip("\ufeff")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(f"invalid JSON in manifest: {exc.msg} (line {exc.lineno})", source) from exc

    if not isinstance(data, dict):
        raise ManifestParseError("manifest must be a JSON object", source)

    fields: Dict[str, str | None] = {}
    for json_key, attr in FIELD_MAP.items():
        fields[attr] = _coerce(data.get(json_key))
    return Manifest(**fields)


def find_manifest_file(package_dir: Path) -> Path | None:
    direct = package_dir / MANIFEST_FILE
    if direct.is_file():
        return direct
    if not package_dir.is_dir():
        return None
    for candidate in sorted(package_dir.iterdir()):
        if candidate.is_file() and candidate.name.lower() == MANIFEST_FILE:
            return candidate
    return None


def read_manifest(package_dir: Path) -> Manifest | None:
    """Return the manifest stored in ``package_dir`` or None when it has none."""

    manifest_path = find_manifest_file(package_dir)
    if manifest_path is None:
        return None
    return parse_manifest(manifest_path.read_bytes(), source=manifest_path)


__all__ = ["MANIFEST_FILE", "parse_manifest", "read_manifest", "find_manifest_file"]
