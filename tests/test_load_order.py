from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import write_broken_zip, write_folder_mod, write_zip_mod

from modorder.engine import set_enabled
from modorder.errors import DuplicateIdentityError
from modorder.load_config import ProgramConfig
from modorder.load_order import deserialize_load_order, serialize_load_order
from modorder.models import ManagedModRecord, ManagedRegistry


def test_deserialize_matches_saved_order_scenario(mods_root: Path) -> None:
    write_folder_mod(mods_root, "ModA", {"ID": "a1", "Name": "Alpha"})
    write_folder_mod(mods_root, "ModB", {"ID": "b1", "Name": "Beta"})
    (mods_root / "modorder.json").write_text('{"b1": true, "a1": false}', encoding="utf-8")

    result = deserialize_load_order(mods_root)

    assert [(e.id, e.name, e.enabled, e.index) for e in result.entries] == [
        ("b1", "Beta", True, 0),
        ("a1", "Alpha", False, 1),
    ]
    assert result.persisted == {"b1": True, "a1": False}
    assert result.diagnostics == []


def test_deserialize_collects_scan_and_store_diagnostics(mods_root: Path) -> None:
    write_broken_zip(mods_root, "Corrupt.zip")
    write_zip_mod(mods_root, "Good.zip", {"ID": "good"})
    (mods_root / "modorder.json").write_text("not json", encoding="utf-8")

    result = deserialize_load_order(mods_root)

    assert [e.id for e in result.entries] == ["good"]
    assert sorted(d.package for d in result.diagnostics) == ["Corrupt.zip", "modorder.json"]


def test_deserialize_uses_registry_and_config(mods_root: Path) -> None:
    write_folder_mod(mods_root, "ModA", {"ID": "a1", "Name": "Alpha"})
    write_folder_mod(mods_root, "Skipped", {"ID": "s1"})
    (mods_root / "order.json").write_text('{"a1": true}', encoding="utf-8")
    registry = ManagedRegistry(records=[ManagedModRecord("mod-1", "a1", "Alpha Managed", True)])
    config = ProgramConfig(order_file="order.json", ignore_mods=["Skipped"])

    result = deserialize_load_order(mods_root, registry, config=config)

    assert [(e.id, e.name, e.mod_id, e.enabled) for e in result.entries] == [
        ("a1", "Alpha Managed", "mod-1", True),
    ]


def test_serialize_writes_after_validation(mods_root: Path) -> None:
    write_folder_mod(mods_root, "ModA", {"ID": "a1"})
    write_folder_mod(mods_root, "ModB", {"ID": "b1"})
    entries = set_enabled(deserialize_load_order(mods_root).entries, "b1", True)

    order = serialize_load_order(mods_root, entries)

    assert order == {"a1": False, "b1": True}
    saved = json.loads((mods_root / "modorder.json").read_text(encoding="utf-8"))
    assert list(saved.items()) == [("a1", False), ("b1", True)]


def test_serialize_refuses_duplicate_identities(mods_root: Path) -> None:
    write_folder_mod(mods_root, "ModA", {"ID": "dup", "Name": "Folder copy"})
    write_zip_mod(mods_root, "ModA.zip", {"ID": "dup", "Name": "Archive copy"})
    (mods_root / "modorder.json").write_text('{"dup": true}', encoding="utf-8")
    entries = deserialize_load_order(mods_root).entries

    with pytest.raises(DuplicateIdentityError) as excinfo:
        serialize_load_order(mods_root, entries)

    assert [item.entry.name for item in excinfo.value.invalid] == ["Archive copy"]
    assert "Folder copy" in str(excinfo.value)
    assert (mods_root / "modorder.json").read_text(encoding="utf-8") == '{"dup": true}'


def test_serialize_dry_run_leaves_file_alone(mods_root: Path) -> None:
    write_folder_mod(mods_root, "ModA", {"ID": "a1"})
    entries = deserialize_load_order(mods_root).entries

    order = serialize_load_order(mods_root, entries, dry_run=True)

    assert order == {"a1": False}
    assert not (mods_root / "modorder.json").exists()
